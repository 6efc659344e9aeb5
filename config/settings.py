# config/settings.py
import os
from decimal import Decimal
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


# ─────────────────────────────────────────────────────────────
# CORE
# ─────────────────────────────────────────────────────────────

SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'dev-insecure-change-me')
DEBUG = env_bool('DJANGO_DEBUG', True)
ALLOWED_HOSTS = [h for h in os.environ.get('DJANGO_ALLOWED_HOSTS', 'localhost,127.0.0.1').split(',') if h]

INSTALLED_APPS = [
    'unfold',
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    'core',
    'users',
    'catalog',
    'promotions',
    'cart',
    'orders',
    'reviews',
    'content',
    'adminpanel',
]

MIDDLEWARE = [
    'core.logging_config.RequestLoggingMiddleware',
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
    'core.middleware.VisitTrackingMiddleware',
]

ROOT_URLCONF = 'config.urls'

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

WSGI_APPLICATION = 'config.wsgi.application'


# ─────────────────────────────────────────────────────────────
# DATABASE
# ─────────────────────────────────────────────────────────────

DATABASE_ENGINE = os.environ.get('DATABASE_ENGINE', 'sqlite')

if DATABASE_ENGINE == 'postgresql':
    DATABASES = {
        'default': {
            'ENGINE':   'django.db.backends.postgresql',
            'NAME':     os.environ.get('DATABASE_NAME', 'digital_store'),
            'USER':     os.environ.get('DATABASE_USER', 'postgres'),
            'PASSWORD': os.environ.get('DATABASE_PASSWORD', ''),
            'HOST':     os.environ.get('DATABASE_HOST', 'localhost'),
            'PORT':     os.environ.get('DATABASE_PORT', '5432'),
        }
    }
else:
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME':   os.environ.get('DATABASE_NAME', str(BASE_DIR / 'db.sqlite3')),
        }
    }

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

AUTH_USER_MODEL = 'users.User'

AUTH_PASSWORD_VALIDATORS = []


# ─────────────────────────────────────────────────────────────
# I18N / STATIC
# ─────────────────────────────────────────────────────────────

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

STATIC_URL = '/static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'


# ─────────────────────────────────────────────────────────────
# LOGGING
# ─────────────────────────────────────────────────────────────

LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'json': {
            '()': 'core.logging_config.JSONFormatter',
            'service_name': 'digital-store',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'stream': 'ext://sys.stdout',
            'formatter': 'json',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': LOG_LEVEL,
    },
    'loggers': {
        'django.db.backends': {
            'level': 'WARNING',
        },
    },
}


# ─────────────────────────────────────────────────────────────
# STORE
# ─────────────────────────────────────────────────────────────

# Client-supplied line prices may differ from the catalog price by at most this much
STORE_PRICE_TOLERANCE = Decimal('0.01')

STORE_LOW_STOCK_THRESHOLD = 5

# Upper bound for a single order or cart line quantity
STORE_MAX_LINE_QUANTITY = 10000

AUTH_TOKEN_MAX_AGE = 24 * 60 * 60

STORE_PUBLIC_SETTING_KEYS = [
    'site_name',
    'site_description',
    'contact_email',
    'company_address',
    'phone_number',
    'business_hours',
    'social_media_facebook',
    'social_media_twitter',
    'social_media_instagram',
]

STORE_PROTECTED_SETTING_KEYS = [
    'site_name',
    'contact_email',
    'max_file_upload_size',
    'email_notifications_enabled',
]

STORE_DEFAULT_SETTINGS = [
    ('site_name',                   'Digital Store',                           'The name of the website'),
    ('site_description',            'Your one-stop shop for digital products', 'Website description for SEO'),
    ('contact_email',               'contact@example.com',                     'Primary contact email'),
    ('company_address',             '123 Main St, City, State 12345',          'Company physical address'),
    ('phone_number',                '+1 (555) 123-4567',                       'Company phone number'),
    ('business_hours',              'Mon-Fri 9AM-5PM EST',                     'Business operating hours'),
    ('max_file_upload_size',        '50',                                      'Maximum file upload size in MB (admin only)'),
    ('email_notifications_enabled', 'true',                                    'Enable email notifications (admin only)'),
]

UNFOLD = {
    'SITE_TITLE':  'Digital Store',
    'SITE_HEADER': 'Digital Store Back Office',
}
