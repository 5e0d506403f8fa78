"""
Test settings — in-memory SQLite so the suite runs without a PostgreSQL server.
"""
from .base import *

DEBUG = False

DATABASES = {
    'default': env.db_url_config('sqlite://:memory:'),
}

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

LOGGING['root']['level'] = 'WARNING'

LESSON_DEFAULT_STATUS = 'PENDING'
REPORT_RATE_SOURCE = 'teacher'
