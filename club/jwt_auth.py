"""
JWT authentication that reads tokens from cookies before the Authorization header,
plus the helpers that write and clear those cookies.
"""

from django.conf import settings
from django.http import HttpRequest
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import AuthenticationFailed
from rest_framework_simplejwt.settings import api_settings as jwt_settings
from typing import Tuple, Optional

ACCESS_COOKIE = 'access_token'
REFRESH_COOKIE = 'refresh_token'


class CookieJWTAuthentication(JWTAuthentication):
    """
    Reads the access token from the HttpOnly `access_token` cookie.
    Falls back to the `Authorization: Bearer` header for API clients and tests.
    """

    def authenticate(self, request: HttpRequest) -> Optional[Tuple]:
        access_token = request.COOKIES.get(ACCESS_COOKIE)

        if not access_token:
            return super().authenticate(request)

        try:
            validated_token = self.get_validated_token(access_token)
        except AuthenticationFailed:
            raise

        return self.get_user(validated_token), validated_token

    def authenticate_header(self, request: HttpRequest) -> str:
        """
        Value of the `WWW-Authenticate` header on 401 responses. Having one makes
        DRF answer missing credentials with 401 rather than 403.
        """
        return 'Bearer'


def _cookie_options():
    return {
        'secure': settings.AUTH_COOKIE_SECURE,
        'httponly': True,
        'samesite': settings.AUTH_COOKIE_SAMESITE,
        'path': '/',
        'domain': settings.AUTH_COOKIE_DOMAIN,
    }


def set_access_cookie(response, access_token: str) -> None:
    response.set_cookie(
        key=ACCESS_COOKIE,
        value=access_token,
        max_age=int(jwt_settings.ACCESS_TOKEN_LIFETIME.total_seconds()),
        **_cookie_options(),
    )


def set_auth_cookies(response, access_token: str, refresh_token: str) -> None:
    set_access_cookie(response, access_token)
    response.set_cookie(
        key=REFRESH_COOKIE,
        value=refresh_token,
        max_age=int(jwt_settings.REFRESH_TOKEN_LIFETIME.total_seconds()),
        **_cookie_options(),
    )


def clear_auth_cookies(response) -> None:
    for key in (ACCESS_COOKIE, REFRESH_COOKIE):
        response.delete_cookie(
            key,
            path='/',
            domain=settings.AUTH_COOKIE_DOMAIN,
            samesite=settings.AUTH_COOKIE_SAMESITE,
        )
