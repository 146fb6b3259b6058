"""Django settings for the WeatherBot API."""

import os
from pathlib import Path

from django.core.exceptions import ImproperlyConfigured
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

# Load .env from the project root (same directory as manage.py)
load_dotenv(BASE_DIR / '.env')


def env(name, default=None):
    """Fetch an environment variable, raising if it is required and missing."""
    value = os.environ.get(name, default)
    if value is None:
        raise ImproperlyConfigured(f"Environment variable {name} is required")
    return value


SECRET_KEY = env('DJANGO_SECRET_KEY', 'dev-insecure-key-change-me')
DEBUG = env('DJANGO_DEBUG', '0') == '1'
ALLOWED_HOSTS = [h.strip() for h in env('DJANGO_ALLOWED_HOSTS', '*').split(',') if h.strip()]

INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'apps.weatherbot',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
    'core.middleware.RequestLogMiddleware',
]

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
            ],
        },
    }
]

ROOT_URLCONF = 'core.urls'
WSGI_APPLICATION = 'core.wsgi.application'

# No persistence; Django's test runner still expects a database alias.
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = False
USE_TZ = True

# Weather
OPENWEATHER_API_KEY = env('OPENWEATHER_API_KEY', '')
OPENWEATHER_BASE_URL = env('OPENWEATHER_BASE_URL', 'https://api.openweathermap.org/data/2.5')
OPENWEATHER_UNITS = 'metric'
WEATHER_HTTP_TIMEOUT = float(env('WEATHER_HTTP_TIMEOUT', '10'))
WEATHER_LOCAL_TIMEZONE = env('WEATHER_LOCAL_TIMEZONE', 'Asia/Kolkata')
WEATHER_CURRENT_WINDOW_HOURS = 2
WEATHER_FORECAST_HORIZON_DAYS = 5
WEATHER_FORECAST_LIST_LIMIT = 3

# API docs
WEATHER_API_TITLE = 'WeatherBot API'
WEATHER_API_VERSION = 'v1'
WEATHER_API_SERVER_URL = env('WEATHER_API_SERVER_URL', '')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {
            'format': '{asctime} {levelname} {name}: {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': env('DJANGO_LOG_LEVEL', 'INFO'),
    },
    'loggers': {
        'httpx': {
            'level': 'WARNING',
        },
    },
}
