"""
JWT issuance and verification for access and refresh tokens
"""
import uuid
from dataclasses import dataclass
from typing import Any, Dict

import jwt
from django.conf import settings
from django.utils import timezone

from apps.core.utils import parse_duration

ALGORITHM = 'HS256'
ACCESS = 'access'
REFRESH = 'refresh'


@dataclass
class TokenPair:
    access_token: str
    refresh_token: str


def _encode(user, token_type: str, secret: str, lifetime: str) -> str:
    now = timezone.now()
    payload = {
        'user_id': str(user.id),
        'email': user.email,
        'role': user.role,
        'type': token_type,
        # Keeps two tokens issued within the same second distinct
        'jti': uuid.uuid4().hex,
        'iat': now,
        'exp': now + parse_duration(lifetime),
    }
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def generate_tokens(user) -> TokenPair:
    return TokenPair(
        access_token=_encode(user, ACCESS, settings.JWT_SECRET, settings.JWT_EXPIRES_IN),
        refresh_token=_encode(user, REFRESH, settings.JWT_REFRESH_SECRET, settings.JWT_REFRESH_EXPIRES_IN),
    )


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Decode an access token. Raises jwt.ExpiredSignatureError or jwt.InvalidTokenError.
    """
    payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[ALGORITHM])
    if payload.get('type') != ACCESS:
        raise jwt.InvalidTokenError('Not an access token')
    return payload


def decode_refresh_token(token: str) -> Dict[str, Any]:
    payload = jwt.decode(token, settings.JWT_REFRESH_SECRET, algorithms=[ALGORITHM])
    if payload.get('type') != REFRESH:
        raise jwt.InvalidTokenError('Not a refresh token')
    return payload
