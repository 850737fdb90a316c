"""
Base settings for the Loot Logger project.
"""
import os
from pathlib import Path

from infrastructure.logging import configure_logging

BASE_DIR = Path(__file__).resolve().parent.parent.parent

SECRET_KEY = os.environ.get('SECRET_KEY', 'django-insecure-change-this-in-production')

DEBUG = os.environ.get('DEBUG', 'True').lower() in ('true', '1', 'yes')

ALLOWED_HOSTS = os.environ.get('ALLOWED_HOSTS', 'localhost,127.0.0.1').split(',')

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    # Third party apps
    'corsheaders',
    'rest_framework',

    # Local apps
    'apps.loot',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'corsheaders.middleware.CorsMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'config.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [BASE_DIR / 'templates'],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'config.wsgi.application'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': os.environ.get('DB_NAME', 'lootlogger'),
        'USER': os.environ.get('DB_USER', 'lootlogger'),
        'PASSWORD': os.environ.get('DB_PASSWORD', 'lootlogger'),
        'HOST': os.environ.get('DB_HOST', 'localhost'),
        'PORT': os.environ.get('DB_PORT', '5432'),
    }
}

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# The webhook is protected by a shared secret header, not by user auth
REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.AllowAny',
    ],
    'DEFAULT_RENDERER_CLASSES': [
        'rest_framework.renderers.JSONRenderer',
    ],
    'DEFAULT_PARSER_CLASSES': [
        'rest_framework.parsers.JSONParser',
    ],
    'UNAUTHENTICATED_USER': None,
}

# CORS settings - the dashboard may be served from another origin
CORS_ALLOW_ALL_ORIGINS = os.environ.get('CORS_ALLOW_ALL_ORIGINS', 'True').lower() in ('true', '1', 'yes')
CORS_ALLOW_HEADERS = [
    'accept',
    'accept-encoding',
    'content-type',
    'origin',
    'user-agent',
    'x-requested-with',
    'x-webhook-secret',
]
CORS_ALLOW_METHODS = [
    'GET',
    'OPTIONS',
    'POST',
]

# Infrastructure settings
_redis_host = os.environ.get('REDIS_HOST', 'localhost')
_redis_port = os.environ.get('REDIS_PORT', '6379')
_redis_password = os.environ.get('REDIS_PASSWORD', '')
REDIS_URL = os.environ.get('REDIS_URL', f'redis://:{_redis_password}@{_redis_host}:{_redis_port}/0' if _redis_password else f'redis://{_redis_host}:{_redis_port}/0')

_rabbitmq_host = os.environ.get('RABBITMQ_HOST', 'localhost')
_rabbitmq_port = os.environ.get('RABBITMQ_PORT', '5672')
_rabbitmq_user = os.environ.get('RABBITMQ_USER', 'guest')
_rabbitmq_pass = os.environ.get('RABBITMQ_PASS', 'guest')
RABBITMQ_URL = os.environ.get('RABBITMQ_URL', f'amqp://{_rabbitmq_user}:{_rabbitmq_pass}@{_rabbitmq_host}:{_rabbitmq_port}/')

# Use in-memory fakes for every infrastructure component
USE_FAKES = os.environ.get('USE_FAKES', '').lower() in ('true', '1', 'yes')

# Loot webhook
LOOT_WEBHOOK_SECRET = os.environ.get('LOOT_WEBHOOK_SECRET', os.environ.get('WEBHOOK_SECRET', ''))
LOOT_STORAGE_BACKEND = os.environ.get('LOOT_STORAGE_BACKEND', 'database')  # 'database' or 'redis'
LOOT_RETENTION_SECONDS = int(os.environ.get('LOOT_RETENTION_SECONDS', 60 * 60 * 24 * 7))  # 0 = keep forever
LOOT_QUERY_DEFAULT_LIMIT = int(os.environ.get('LOOT_QUERY_DEFAULT_LIMIT', 50))
LOOT_QUERY_MAX_LIMIT = int(os.environ.get('LOOT_QUERY_MAX_LIMIT', 100))

# Broadcast channel
EVENT_BUS_BACKEND = os.environ.get('EVENT_BUS_BACKEND', 'redis')  # 'redis' or 'rabbitmq'
LOOT_BROADCAST_CHANNEL = os.environ.get('LOOT_BROADCAST_CHANNEL', 'loot-feed')

# Dashboard
ITEM_METADATA_URL = os.environ.get('ITEM_METADATA_URL', 'https://d2io.vercel.app/api/items')
ITEM_IMAGE_BASE_URL = os.environ.get('ITEM_IMAGE_BASE_URL', 'https://d2io.vercel.app')
DASHBOARD_POLL_INTERVAL = int(os.environ.get('DASHBOARD_POLL_INTERVAL', 5))  # seconds
DASHBOARD_API_URL = os.environ.get('DASHBOARD_API_URL', 'http://localhost:8000')

# Logging
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
LOGGING_CONFIG = None
configure_logging(is_production=not DEBUG, level=LOG_LEVEL)

# Sentry configuration
SENTRY_DSN = os.environ.get('SENTRY_DSN', '')
if SENTRY_DSN:
    import sentry_sdk
    from sentry_sdk.integrations.django import DjangoIntegration
    from sentry_sdk.integrations.redis import RedisIntegration

    sentry_sdk.init(
        dsn=SENTRY_DSN,
        integrations=[DjangoIntegration(), RedisIntegration()],
        traces_sample_rate=0.1,
        send_default_pii=False,
        environment=os.environ.get('ENVIRONMENT', 'development'),
        before_send_transaction=lambda event: None if event.get('transaction') == '/api/health/' else event,
    )
