"""Test settings for Driving School Service."""
from .base import *  # noqa: F401,F403

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

LOG_LEVEL = 'WARNING'
LOGGING['root']['level'] = LOG_LEVEL  # noqa: F405
