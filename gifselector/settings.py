"""
Django settings for the gifselector project.

All deployment-specific values come from environment variables (optionally
loaded from a .env file next to manage.py).
"""

import os
from pathlib import Path

from django.core.exceptions import ImproperlyConfigured
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv(BASE_DIR / '.env')


def env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def env_list(name, default):
    value = os.environ.get(name)
    if not value:
        return list(default)
    return [item.strip() for item in value.split(',') if item.strip()]


def normalize_base_path(value):
    """Normalize a URL prefix to '/prefix' form (no trailing slash)."""
    if not value:
        return '/gifselector'
    if not value.startswith('/'):
        value = f'/{value}'
    if len(value) > 1 and value.endswith('/'):
        value = value[:-1]
    return value


def ensure_absolute_path(label, value):
    if not value:
        raise ImproperlyConfigured(f'{label} must be provided as an absolute path.')
    if not os.path.isabs(value):
        raise ImproperlyConfigured(f'{label} must be an absolute path. Received: {value}')
    return Path(value)


SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'dev-secret-change-me')

DEBUG = env_bool('DJANGO_DEBUG', False)

ALLOWED_HOSTS = env_list('DJANGO_ALLOWED_HOSTS', ['*'])

CSRF_TRUSTED_ORIGINS = env_list('DJANGO_CSRF_TRUSTED_ORIGINS', [])

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'gallery',
]

MIDDLEWARE = [
    'gallery.middleware.AccessLogMiddleware',
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'gifselector.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'gifselector.wsgi.application'

DATA_DIR = Path(os.environ.get('GIFSELECTOR_DATA_DIR', BASE_DIR / 'data'))

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': DATA_DIR / 'gifselector.db',
    }
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'

# Behind a reverse proxy the scheme comes from X-Forwarded-Proto
SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')
USE_X_FORWARDED_HOST = env_bool('DJANGO_USE_X_FORWARDED_HOST', True)

# Session cookie mirrors the old auth cookie: httpOnly, lax, 7 days
SESSION_COOKIE_AGE = 7 * 24 * 60 * 60
SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_SAMESITE = 'Lax'
SESSION_COOKIE_SECURE = env_bool('GIFSELECTOR_SECURE_COOKIES', not DEBUG)

# --- gifselector ---

GIFSELECTOR_BASE_PATH = normalize_base_path(os.environ.get('GIFSELECTOR_BASE_PATH'))

SESSION_COOKIE_PATH = GIFSELECTOR_BASE_PATH
CSRF_COOKIE_PATH = GIFSELECTOR_BASE_PATH

GIFSELECTOR_UPLOAD_DIR = ensure_absolute_path(
    'GIFSELECTOR_UPLOAD_DIR',
    os.environ.get('GIFSELECTOR_UPLOAD_DIR', str(BASE_DIR / 'uploads')),
)

# Per-URL import workspaces are created here as import-* directories
GIFSELECTOR_TMP_DIR = Path(os.environ.get('GIFSELECTOR_TMP_DIR', DATA_DIR / 'tmp'))

GIFSELECTOR_FRONTEND_DIST = ensure_absolute_path(
    'GIFSELECTOR_FRONTEND_DIST',
    os.environ.get('GIFSELECTOR_FRONTEND_DIST', str(BASE_DIR / 'frontend' / 'dist')),
)

GIFSELECTOR_MAX_BYTES = int(os.environ.get('GIFSELECTOR_MAX_BYTES', 15 * 1024 * 1024))

GIFSELECTOR_IMPORT_ALLOWED_DOMAINS = env_list(
    'GIFSELECTOR_IMPORT_ALLOWED_DOMAINS',
    [
        'giphy.com',
        'tenor.com',
        'imgur.com',
        'reddit.com',
        'redd.it',
        'redgifs.com',
        'twitter.com',
        'x.com',
        'twimg.com',
        'tumblr.com',
        'gfycat.com',
        'instagram.com',
        'bsky.app',
    ],
)

# 'gallery-dl' (subprocess) or 'yt-dlp' (in-process)
GIFSELECTOR_DOWNLOADER = os.environ.get('GIFSELECTOR_DOWNLOADER', 'gallery-dl')

GIFSELECTOR_TOOL_TIMEOUT = int(os.environ.get('GIFSELECTOR_TOOL_TIMEOUT', 300))
GIFSELECTOR_HTTP_TIMEOUT = int(os.environ.get('GIFSELECTOR_HTTP_TIMEOUT', 30))

GIFSELECTOR_ENABLE_FILE_LOGGING = env_bool('GIFSELECTOR_ENABLE_FILE_LOGGING', False)
GIFSELECTOR_LOG_FILE = Path(
    os.environ.get('GIFSELECTOR_LOG_FILE', DATA_DIR / 'access.log')
)
GIFSELECTOR_STATS_FILE = Path(
    os.environ.get('GIFSELECTOR_STATS_FILE', DATA_DIR / 'stats.txt')
)

GIFSELECTOR_ADMIN_USERNAME = os.environ.get('GIFSELECTOR_ADMIN_USERNAME', 'admin')
GIFSELECTOR_ADMIN_PASSWORD = os.environ.get('GIFSELECTOR_ADMIN_PASSWORD', '')

for _directory in (DATA_DIR, GIFSELECTOR_UPLOAD_DIR, GIFSELECTOR_TMP_DIR):
    _directory.mkdir(parents=True, exist_ok=True)
