import logging

from django.contrib.auth import authenticate
from django.contrib.auth.models import User, update_last_login
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework_simplejwt.tokens import RefreshToken
from drf_spectacular.utils import extend_schema

from club.jwt_auth import clear_auth_cookies, set_auth_cookies
from utils.response import envelope
from ..serializers.user_serializers import (
    ChangePasswordSerializer,
    LoginSerializer,
    ProfileUpdateSerializer,
    RegisterSerializer,
    UserSerializer,
)

logger = logging.getLogger(__name__)


def _token_response(request, user, message, status_code=status.HTTP_200_OK):
    """
    Issue a token pair for `user`. Tokens go into HttpOnly cookies; the access
    token is also returned in the body for clients that send a Bearer header.
    """
    refresh = RefreshToken.for_user(user)
    access_token = str(refresh.access_token)

    response = envelope(
        data={
            'user': UserSerializer(user, context={'request': request}).data,
            'token': access_token,
        },
        message=message,
        status=status_code,
    )
    set_auth_cookies(response, access_token, str(refresh))
    return response


class AuthViewSet(viewsets.ViewSet):
    permission_classes = [AllowAny]
    # A stale cookie must not block logging in again
    authentication_classes = []
    serializer_class = LoginSerializer

    def get_authenticate_header(self, request):
        return "Bearer"

    @extend_schema(request=RegisterSerializer, responses={201: UserSerializer})
    @action(detail=False, methods=["post"])
    def register(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info(f"Registered user {user.id} ({user.username})")
        return _token_response(request, user, 'Registration successful', status.HTTP_201_CREATED)

    @extend_schema(request=LoginSerializer, responses={200: UserSerializer})
    @action(detail=False, methods=["post"])
    def login(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data['email'].lower()
        password = serializer.validated_data['password']

        find_user = User.objects.filter(email__iexact=email).first()
        if not find_user or not find_user.check_password(password):
            raise AuthenticationFailed('Invalid email or password')

        if not find_user.is_active:
            raise AuthenticationFailed('Account is disabled, please contact an administrator')

        user = authenticate(request, username=find_user.username, password=password)
        if not user:
            raise AuthenticationFailed('Invalid email or password')

        update_last_login(None, user)
        logger.info(f"User {user.id} logged in")
        return _token_response(request, user, 'Login successful')


class AccountViewSet(viewsets.ViewSet):
    """Endpoints acting on the authenticated user's own account."""
    permission_classes = [IsAuthenticated]
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    @extend_schema(responses={200: UserSerializer})
    def me(self, request):
        return envelope(data={'user': UserSerializer(request.user, context={'request': request}).data})

    @extend_schema(request=ProfileUpdateSerializer, responses={200: UserSerializer})
    def update_profile(self, request):
        serializer = ProfileUpdateSerializer(
            request.user.profile,
            data=request.data,
            partial=True,
            context={'request': request},
        )
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return envelope(
            data={'user': UserSerializer(request.user, context={'request': request}).data},
            message='Profile updated',
        )

    @extend_schema(request=ChangePasswordSerializer)
    def change_password(self, request):
        serializer = ChangePasswordSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        request.user.set_password(serializer.validated_data['new_password'])
        request.user.save(update_fields=['password'])
        logger.info(f"User {request.user.id} changed password")
        return envelope(message='Password changed')

    def logout(self, request):
        """
        Clear the auth cookies. Tokens are not blacklisted; they simply stop
        being sent by the browser.
        """
        response = envelope(message='Successfully logged out')
        clear_auth_cookies(response)
        return response
