"""
DRF authentication backed by Bearer JWT access tokens
"""
import logging

import jwt
from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication

from .models import User
from .tokens import decode_access_token

logger = logging.getLogger(__name__)


class JWTAuthentication(BaseAuthentication):
    """
    Authenticate `Authorization: Bearer <token>` headers.

    The user is re-read from the database on every request so deactivated
    accounts lose access immediately.
    """
    keyword = 'Bearer'

    def authenticate(self, request):
        token = self._extract_token(request)
        if token is None:
            return None

        try:
            payload = decode_access_token(token)
        except jwt.ExpiredSignatureError:
            raise exceptions.AuthenticationFailed('Token expired')
        except jwt.InvalidTokenError:
            raise exceptions.AuthenticationFailed('Invalid token')

        user = User.objects.filter(id=payload.get('user_id')).first()
        if user is None or not user.is_active:
            raise exceptions.AuthenticationFailed('User not found or inactive')

        return user, token

    def authenticate_header(self, request):
        return self.keyword

    def _extract_token(self, request):
        header = request.META.get('HTTP_AUTHORIZATION', '')
        if not header.startswith(f"{self.keyword} "):
            return None
        return header[len(self.keyword) + 1:].strip() or None


class OptionalJWTAuthentication(JWTAuthentication):
    """
    Used on public endpoints: a bad or expired token downgrades the request
    to anonymous instead of failing it.
    """

    def authenticate(self, request):
        try:
            return super().authenticate(request)
        except exceptions.AuthenticationFailed as e:
            logger.debug(f"Ignoring invalid token on public endpoint: {e.detail}")
            return None
