"""Base settings for Driving School Service."""
import os
import sys
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent.parent
sys.path.insert(0, str(BASE_DIR.parent.parent.parent))

SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key')
DEBUG = os.environ.get('DEBUG', 'True').lower() == 'true'
ALLOWED_HOSTS = os.environ.get('ALLOWED_HOSTS', '*').split(',')

INSTALLED_APPS = [
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'rest_framework',
    'django_filters',
    'apps.core',
]

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': os.environ.get('DB_NAME', 'driving_school_db'),
        'USER': os.environ.get('DB_USER', 'driving_school_user'),
        'PASSWORD': os.environ.get('DB_PASSWORD', 'driving_school_password'),
        'HOST': os.environ.get('DB_HOST', 'localhost'),
        'PORT': os.environ.get('DB_PORT', '5432'),
    }
}

LANGUAGE_CODE = 'en-us'
TIME_ZONE = os.environ.get('TIME_ZONE', 'UTC')
USE_I18N = True
USE_TZ = True
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

SERVICE_NAME = 'driving-school-service'

# Licensing rules
SCHOOL_EXAM_COOLDOWN_DAYS = int(os.environ.get('SCHOOL_EXAM_COOLDOWN_DAYS', '15'))
SCHOOL_SESSIONS_PLAN = int(os.environ.get('SCHOOL_SESSIONS_PLAN', '10'))
SCHOOL_EXAM_NOTES_MAX_LENGTH = 500
SCHOOL_DEFAULT_TOTAL_FEE = os.environ.get('SCHOOL_DEFAULT_TOTAL_FEE', '34000')

LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
LOGGING = {'version': 1, 'disable_existing_loggers': False, 'formatters': {'json': {'()': 'pythonjsonlogger.jsonlogger.JsonFormatter'}}, 'handlers': {'console': {'class': 'logging.StreamHandler', 'formatter': 'json'}}, 'root': {'handlers': ['console'], 'level': LOG_LEVEL}}
