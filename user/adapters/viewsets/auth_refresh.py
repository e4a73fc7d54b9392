from rest_framework.views import APIView
from rest_framework.permissions import AllowAny
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.exceptions import TokenError

from club.jwt_auth import REFRESH_COOKIE, set_access_cookie
from utils.response import envelope


class CookieTokenRefreshView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def get_authenticate_header(self, request):
        return "Bearer"

    def post(self, request):
        refresh_cookie = request.COOKIES.get(REFRESH_COOKIE) or request.data.get('refresh')
        if not refresh_cookie:
            raise AuthenticationFailed('Refresh token missing')

        try:
            refresh = RefreshToken(refresh_cookie)
            new_access = str(refresh.access_token)
        except TokenError:
            raise AuthenticationFailed('Invalid refresh token')

        res = envelope(data={'token': new_access}, message='Token refreshed')
        set_access_cookie(res, new_access)
        return res
