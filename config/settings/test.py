"""
Settings used by the test suite
"""
import os

os.environ.setdefault('DATABASE_URL', 'sqlite://:memory:')
os.environ.setdefault('JWT_SECRET', 'test-jwt-secret')
os.environ.setdefault('JWT_REFRESH_SECRET', 'test-jwt-refresh-secret')
os.environ.setdefault('STRIPE_SECRET_KEY', 'sk_test_dummy')
os.environ.setdefault('STRIPE_WEBHOOK_SECRET', 'whsec_test_secret')

from .base import *  # noqa: E402,F401,F403

DEBUG = False

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

REST_FRAMEWORK = {
    **REST_FRAMEWORK,  # noqa: F405
    'DEFAULT_THROTTLE_CLASSES': [],
}

LOGGING['root']['handlers'] = ['console']  # noqa: F405
LOGGING['loggers']['apps.payments']['handlers'] = ['console']  # noqa: F405
