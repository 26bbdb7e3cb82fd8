"""
Authentication endpoints
"""
import logging

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView

from apps.accounts import services
from apps.core.utils import client_ip
from ..serializers.accounts import (
    LoginSerializer,
    LogoutSerializer,
    RefreshTokenSerializer,
    RegisterSerializer,
    UserSerializer,
    auth_payload,
)
from .base import success, validate

logger = logging.getLogger(__name__)


def _client_info(request):
    return {
        'user_agent': request.META.get('HTTP_USER_AGENT'),
        'ip_address': client_ip(request),
    }


class RegisterView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(request=RegisterSerializer, description="Create a customer account and open a session")
    def post(self, request):
        data = validate(RegisterSerializer, request.data)
        user, tokens = services.register_user(data, **_client_info(request))
        return success('User registered successfully', auth_payload(user, tokens), status_code=status.HTTP_201_CREATED)


class LoginView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(request=LoginSerializer, description="Exchange credentials for access and refresh tokens")
    def post(self, request):
        data = validate(LoginSerializer, request.data)
        user, tokens = services.login_user(data['email'], data['password'], **_client_info(request))
        logger.info(f"User {user.id} logged in")
        return success('Login successful', auth_payload(user, tokens))


class RefreshTokenView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(request=RefreshTokenSerializer, description="Rotate a refresh token")
    def post(self, request):
        data = validate(RefreshTokenSerializer, request.data)
        user, tokens = services.refresh_session(data['refresh_token'])
        return success('Token refreshed successfully', auth_payload(user, tokens))


class LogoutView(APIView):

    @extend_schema(request=LogoutSerializer, description="Close one session, or every session when no token is given")
    def post(self, request):
        data = validate(LogoutSerializer, request.data)
        services.logout_user(request.user, data.get('refresh_token'))
        return success('Logout successful')


class MeView(APIView):

    @extend_schema(responses={200: UserSerializer})
    def get(self, request):
        return success('User profile retrieved successfully', {'user': UserSerializer(request.user).data})
