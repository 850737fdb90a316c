"""
Test settings: SQLite in memory and fake infrastructure.
"""
from .base import *

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

USE_FAKES = True

LOOT_WEBHOOK_SECRET = ''
LOOT_STORAGE_BACKEND = 'database'

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

configure_logging(is_production=False, level='WARNING')
