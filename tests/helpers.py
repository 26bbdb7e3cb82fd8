"""Object builders shared by the test modules."""

import itertools

from apps.accounts.models import Address, PaymentMethod, User
from apps.accounts.tokens import generate_tokens

PASSWORD = 'password123'

_sequence = itertools.count(1)


def next_id() -> int:
    return next(_sequence)


def create_user(role=User.CUSTOMER, email=None, password=PASSWORD, **extra):
    """Create a user with a hashed password."""
    n = next_id()
    user = User(
        email=email or f"user{n}@example.com",
        first_name=extra.pop('first_name', 'Test'),
        last_name=extra.pop('last_name', f"User{n}"),
        role=role,
        **extra,
    )
    user.set_password(password)
    user.save()
    return user


def authenticate(client, user):
    """Attach a fresh Bearer access token for `user` to the client."""
    tokens = generate_tokens(user)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens.access_token}")
    return client


def create_address(user):
    return Address.objects.create(
        user=user,
        first_name=user.first_name,
        last_name=user.last_name,
        street='742 Evergreen Terrace',
        city='Springfield',
        state='IL',
        zip_code='62701',
    )


def create_payment_method(user, **extra):
    return PaymentMethod.objects.create(
        user=user,
        last4=extra.pop('last4', '4242'),
        brand=extra.pop('brand', 'VISA'),
        expiry_month=12,
        expiry_year=2030,
        **extra,
    )
