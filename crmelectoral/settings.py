# ===================================================================
# crmelectoral/settings.py
# ===================================================================

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'django-insecure-crm-electoral-dev')

DEBUG = os.environ.get('DJANGO_DEBUG', '1') == '1'

ALLOWED_HOSTS = [h for h in os.environ.get('DJANGO_ALLOWED_HOSTS', 'localhost,127.0.0.1,testserver').split(',') if h]

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'channels',
    'electoral',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
    # Adjunta request.sesion (líder o administrador) en cada petición
    'electoral.middleware.SesionElectoralMiddleware',
]

ROOT_URLCONF = 'crmelectoral.urls'

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
                'electoral.context_processors.datos_globales_sesion',
            ],
        },
    },
]

WSGI_APPLICATION = 'crmelectoral.wsgi.application'
ASGI_APPLICATION = 'crmelectoral.asgi.application'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': os.environ.get('DJANGO_DB_PATH', str(BASE_DIR / 'db.sqlite3')),
    }
}

# Canal en memoria por defecto; en producción se configura Redis por entorno
CHANNEL_LAYERS = {
    'default': {
        'BACKEND': 'channels.layers.InMemoryChannelLayer',
    },
}

AUTH_PASSWORD_VALIDATORS = []

LANGUAGE_CODE = 'es-co'
TIME_ZONE = 'America/Bogota'
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'
MEDIA_URL = '/media/'
MEDIA_ROOT = BASE_DIR / 'media'

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

SESSION_ENGINE = 'django.contrib.sessions.backends.db'

# ===================================================================
# CONSTANTES DE NEGOCIO
# ===================================================================

MAX_MIEMBROS_POR_LIDER = 60
MUNICIPIO_DISTINGUIDO = 'Bello'
SESION_DURACION_HORAS = 12
PREFIJO_PAIS_WHATSAPP = '57'
URL_MAPA_MUNICIPIOS = (
    'https://gist.githubusercontent.com/john-guerra/727e8992e9599b9d9f1dbfdc4c8e479e/raw/'
    '090f8b935a437e24d65b64d87598fbb437c006da/colombia-municipios.json'
)
MAPA_GEOJSON_PATH = BASE_DIR / 'media' / 'antioquia-municipios.geojson'

# ===================================================================
# LOGGING
# ===================================================================

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {
            'format': '[{asctime}] {levelname} {name}: {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },
    'loggers': {
        'electoral': {
            'handlers': ['console'],
            'level': os.environ.get('ELECTORAL_LOG_LEVEL', 'INFO'),
            'propagate': False,
        },
    },
}
