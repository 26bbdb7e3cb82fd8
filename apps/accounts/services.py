"""
Account workflows: registration, login, token refresh and logout
"""
import logging
from typing import Optional, Tuple

import jwt
from django.conf import settings
from django.utils import timezone

from apps.core.exceptions import ConflictException, UnauthorizedException
from apps.core.utils import parse_duration
from .models import User, UserSession
from .tokens import TokenPair, decode_refresh_token, generate_tokens

logger = logging.getLogger(__name__)


def _open_session(user: User, user_agent: Optional[str], ip_address: Optional[str]) -> TokenPair:
    tokens = generate_tokens(user)
    UserSession.objects.create(
        user=user,
        refresh_token=tokens.refresh_token,
        user_agent=(user_agent or '')[:512] or None,
        ip_address=ip_address,
        expires_at=timezone.now() + parse_duration(settings.JWT_REFRESH_EXPIRES_IN),
    )
    return tokens


def register_user(data: dict, user_agent: str = None, ip_address: str = None) -> Tuple[User, TokenPair]:
    email = data['email'].lower()
    if User.objects.filter(email=email).exists():
        raise ConflictException('User with this email already exists')

    user = User(
        email=email,
        first_name=data['first_name'],
        last_name=data['last_name'],
        phone=data.get('phone'),
    )
    user.set_password(data['password'])
    user.save()

    logger.info(f"Registered user {user.id}")
    return user, _open_session(user, user_agent, ip_address)


def login_user(email: str, password: str, user_agent: str = None, ip_address: str = None) -> Tuple[User, TokenPair]:
    user = User.objects.filter(email=email.lower()).first()
    if user is None or not user.is_active or not user.check_password(password):
        raise UnauthorizedException('Invalid credentials')

    return user, _open_session(user, user_agent, ip_address)


def refresh_session(refresh_token: str) -> Tuple[User, TokenPair]:
    """
    Rotate a refresh token: the session row keeps its id and gets a new token and expiry.
    """
    try:
        decode_refresh_token(refresh_token)
    except jwt.InvalidTokenError:
        raise UnauthorizedException('Invalid refresh token')

    session = UserSession.objects.select_related('user').filter(refresh_token=refresh_token).first()
    if session is None or session.expires_at < timezone.now() or not session.user.is_active:
        raise UnauthorizedException('Invalid refresh token')

    tokens = generate_tokens(session.user)
    session.refresh_token = tokens.refresh_token
    session.expires_at = timezone.now() + parse_duration(settings.JWT_REFRESH_EXPIRES_IN)
    session.save(update_fields=['refresh_token', 'expires_at', 'updated_at'])
    return session.user, tokens


def logout_user(user: User, refresh_token: Optional[str] = None) -> int:
    """
    Delete one session when a refresh token is given, otherwise every session of the user.
    """
    sessions = UserSession.objects.filter(user=user)
    if refresh_token:
        sessions = sessions.filter(refresh_token=refresh_token)
    deleted, _ = sessions.delete()
    return deleted
