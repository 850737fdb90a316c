"""
Development settings for the Loot Logger project.
"""
from .base import *

DEBUG = True

ALLOWED_HOSTS = ['*']

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': 'lootlogger',
        'USER': 'lootlogger',
        'PASSWORD': 'lootlogger',
        'HOST': 'db',
        'PORT': '5432',
    }
}
STATIC_URL = "/static/"
STATIC_ROOT = os.getenv("STATIC_ROOT", os.path.join(BASE_DIR, "staticfiles"))

configure_logging(is_production=False, level=LOG_LEVEL)
