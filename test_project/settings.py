import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent

SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'eventplan-test-project-insecure-key')
DEBUG = os.environ.get('DJANGO_DEBUG', '1') == '1'
ALLOWED_HOSTS = os.environ.get('DJANGO_ALLOWED_HOSTS', 'localhost,127.0.0.1,testserver').split(',')

INSTALLED_APPS = [
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'rest_framework',
    'rest_framework.authtoken',
    'eventplan',
]

MIDDLEWARE = [
    'django.middleware.common.CommonMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
]

ROOT_URLCONF = 'test_project.urls'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': os.environ.get('EVENTPLAN_DB', str(BASE_DIR / 'db.sqlite3')),
    }
}

AUTH_USER_MODEL = 'eventplan.User'
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

USE_TZ = True
TIME_ZONE = 'UTC'

REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [
        'eventplan.authentication.BearerTokenAuthentication',
        'rest_framework.authentication.TokenAuthentication',
    ],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.IsAuthenticated',
    ],
    'EXCEPTION_HANDLER': 'eventplan.views.exception_handler',
}

EVENTPLAN_SCHEDULE_TIMEZONE = os.environ.get('EVENTPLAN_SCHEDULE_TIMEZONE', 'UTC')
EVENTPLAN_TEMPLATE_FILE = os.environ.get('EVENTPLAN_TEMPLATE_FILE')
EVENTPLAN_RECENT_COMMENTS_LIMIT = 10
EVENTPLAN_PAGE_SIZE = 10

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {
            'format': '%(asctime)s %(levelname)s %(name)s: %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },
    'loggers': {
        'eventplan': {
            'handlers': ['console'],
            'level': os.environ.get('EVENTPLAN_LOG_LEVEL', 'WARNING'),
        },
    },
}
