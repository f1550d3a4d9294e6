import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

# Read secret from env; prefer DJANGO_SECRET_KEY on hosted deployments
SECRET_KEY = os.environ.get(
    'DJANGO_SECRET_KEY',
    os.environ.get(
        'SECRET_KEY',
        'django-insecure-7r#w3k!x0t)v2q_pe9m(ab4j+u@c6n8s^z1dg$yfh5lio=e%kq'
    )
)

DEBUG = os.environ.get('DJANGO_DEBUG', 'True').lower() in ('1', 'true', 'yes')

_hosts_env = os.environ.get('DJANGO_ALLOWED_HOSTS', '*')
ALLOWED_HOSTS = [h.strip() for h in _hosts_env.split(',') if h.strip()]

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'rest_framework',
    'masters',
    'logistics',
    'billing',
    'ledger',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'whitenoise.middleware.WhiteNoiseMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'trading_mgmt.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
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

WSGI_APPLICATION = 'trading_mgmt.wsgi.application'

# Database configuration
# Default: MySQL via env vars. Set USE_SQLITE=1 to boot with a local
# SQLite database (demo machines, CI without a database server).
if os.environ.get('USE_SQLITE', '0') in ('1', 'true', 'True', 'YES', 'yes'):
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': os.path.join(BASE_DIR, 'db.sqlite3'),
        }
    }
else:
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.mysql',
            'NAME': os.environ.get('DB_NAME', 'trading'),
            'USER': os.environ.get('DB_USER', 'trading'),
            'PASSWORD': os.environ.get('DB_PASSWORD', ''),
            'HOST': os.environ.get('DB_HOST', '127.0.0.1'),
            'PORT': os.environ.get('DB_PORT', '3306'),
            'OPTIONS': {
                'init_command': "SET sql_mode='STRICT_TRANS_TABLES'",
            },
        }
    }

AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator'},
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator'},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
    {'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator'},
]

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'Asia/Kolkata'
USE_I18N = True
USE_TZ = True

# Static files storage
# Manifest storage only in production so a missing entry does not
# crash development.
STORAGES = {
    'default': {'BACKEND': 'django.core.files.storage.FileSystemStorage'},
    'staticfiles': {'BACKEND': 'whitenoise.storage.CompressedManifestStaticFilesStorage'},
}
if DEBUG:
    STORAGES['staticfiles'] = {'BACKEND': 'whitenoise.storage.CompressedStaticFilesStorage'}
    WHITENOISE_AUTOREFRESH = True
    WHITENOISE_USE_FINDERS = True

STATIC_URL = '/static/'
MEDIA_URL = '/media/'
STATIC_ROOT = os.path.join(BASE_DIR, 'staticfiles')
MEDIA_ROOT = os.path.join(BASE_DIR, 'media')

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

LOGIN_URL = '/admin/login/'

_csrf_env = os.environ.get('CSRF_TRUSTED_ORIGINS', '')
CSRF_TRUSTED_ORIGINS = [o.strip() for o in _csrf_env.split(',') if o.strip()] if _csrf_env else []

# Trust proxy HTTPS header so Django sees requests as secure behind a proxy
SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')

REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [
        'rest_framework.authentication.SessionAuthentication',
        'rest_framework.authentication.BasicAuthentication',
    ],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.IsAuthenticated',
    ],
}

# Celery: broker and eager mode come from the environment
CELERY_BROKER_URL = os.environ.get('CELERY_BROKER_URL', 'redis://localhost:6379/0')
CELERY_TASK_ALWAYS_EAGER = os.environ.get('CELERY_TASK_ALWAYS_EAGER', 'False').lower() in ('1', 'true', 'yes')

LOG_LEVEL = os.environ.get('DJANGO_LOG_LEVEL', 'INFO')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {'format': '%(asctime)s %(levelname)s %(name)s: %(message)s'},
    },
    'handlers': {
        'console': {'class': 'logging.StreamHandler', 'formatter': 'simple'},
    },
    'loggers': {
        'django': {'handlers': ['console'], 'level': 'INFO'},
        'django.request': {'handlers': ['console'], 'level': 'WARNING', 'propagate': True},
        'masters': {'handlers': ['console'], 'level': LOG_LEVEL},
        'logistics': {'handlers': ['console'], 'level': LOG_LEVEL},
        'billing': {'handlers': ['console'], 'level': LOG_LEVEL},
        'ledger': {'handlers': ['console'], 'level': LOG_LEVEL},
    },
}

# ---------------------------------------------------------------------------
# Business configuration
# ---------------------------------------------------------------------------

LOADING_PLACES = ['PULIVANTHI', 'MATTAPARAI']
DEFAULT_LOADING_PLACE = 'PULIVANTHI'
DEFAULT_STATE_CODE = '33'
DEFAULT_HSN_CODE = '1006'

# Document numbering. width=0 means no zero padding; floor is the lowest
# number a series may hand out (GRM bills continue the paper book at 050).
DOCUMENT_SERIES = {
    'sale:PULIVANTHI': {'prefix': '', 'width': 0, 'floor': 1},
    'sale:MATTAPARAI': {'prefix': 'GRM', 'width': 3, 'floor': 50},
    'sale:SPECIAL': {'prefix': 'D', 'width': 3, 'floor': 1},
    'receipt': {'prefix': 'RCP', 'width': 4, 'floor': 1},
    'credit_note': {'prefix': 'CN', 'width': 4, 'floor': 1},
    'debit_note:PULIVANTHI': {'prefix': 'DNP', 'width': 4, 'floor': 1},
    'debit_note:MATTAPARAI': {'prefix': 'DNM', 'width': 4, 'floor': 1},
    'supplier_payment': {'prefix': 'PAY', 'width': 4, 'floor': 1},
    'customer': {'prefix': 'CUST', 'width': 3, 'floor': 1},
    'supplier': {'prefix': 'SUP', 'width': 3, 'floor': 1},
    'outward_entry': {'prefix': '', 'width': 0, 'floor': 1},
}

# Seller details used when no CompanySetting row is active for a location
COMPANY_DEFAULTS = {
    'company_name': os.environ.get('COMPANY_NAME', 'GRM Traders'),
    'gstin': os.environ.get('COMPANY_GSTIN', ''),
    'address_line1': os.environ.get('COMPANY_ADDRESS_LINE1', ''),
    'address_line2': os.environ.get('COMPANY_ADDRESS_LINE2', ''),
    'locality': os.environ.get('COMPANY_LOCALITY', ''),
    'pin_code': os.environ.get('COMPANY_PIN_CODE', ''),
    'state_code': DEFAULT_STATE_CODE,
}

# Weighment photo uploads go to Google Drive when a folder is configured,
# otherwise to MEDIA_ROOT through default_storage.
GOOGLE_OAUTH_CLIENT_ID = os.environ.get('GOOGLE_OAUTH_CLIENT_ID', '')
GOOGLE_OAUTH_CLIENT_SECRET = os.environ.get('GOOGLE_OAUTH_CLIENT_SECRET', '')
GOOGLE_OAUTH_REDIRECT_URI = os.environ.get('GOOGLE_OAUTH_REDIRECT_URI', '')
GOOGLE_OAUTH_REFRESH_TOKEN = os.environ.get('GOOGLE_OAUTH_REFRESH_TOKEN', '')
GOOGLE_DRIVE_FOLDER_ID = os.environ.get('GOOGLE_DRIVE_FOLDER_ID', '')
