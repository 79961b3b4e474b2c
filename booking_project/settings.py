
import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent
SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "change-me-in-production")

# Read DEBUG from environment; defaults to True for local development
DEBUG = os.getenv("DJANGO_DEBUG", "True") == "True"

ALLOWED_HOSTS = [h.strip() for h in os.getenv("DJANGO_ALLOWED_HOSTS", "*").split(",") if h.strip()]

# CSRF trusted origins: supply a comma-separated list of origins (including scheme)
csrf_origins = os.getenv('DJANGO_CSRF_TRUSTED_ORIGINS', '')
if csrf_origins:
    CSRF_TRUSTED_ORIGINS = [s.strip() for s in csrf_origins.split(',') if s.strip()]
else:
    CSRF_TRUSTED_ORIGINS = []

SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')

INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.staticfiles",

    # third party
    "rest_framework",

    # local
    "quotes",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    # WhiteNoise serves the browsable API's static assets; keep it right after SecurityMiddleware
    "whitenoise.middleware.WhiteNoiseMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "booking_project.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
            ],
        },
    },
]

WSGI_APPLICATION = "booking_project.wsgi.application"

# Quotes are computed, never stored; the database only backs sessions/auth.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "db.sqlite3",
    }
}

# Geocoding results are cached; point DJANGO_CACHE_LOCATION at a shared cache in production
CACHES = {
    "default": {
        "BACKEND": os.getenv("DJANGO_CACHE_BACKEND", "django.core.cache.backends.locmem.LocMemCache"),
        "LOCATION": os.getenv("DJANGO_CACHE_LOCATION", "quotes"),
    }
}

AUTH_PASSWORD_VALIDATORS = []

# Internationalization
LANGUAGE_CODE = "en-us"
# Surge windows are evaluated in this zone's wall-clock time
TIME_ZONE = os.getenv("DJANGO_TIME_ZONE", "Africa/Dar_es_Salaam")
USE_I18N = True
USE_TZ = True

STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"
STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage"},
}

REST_FRAMEWORK = {
    "UNAUTHENTICATED_USER": None,
}

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "simple"},
    },
    "loggers": {
        "quotes": {
            "handlers": ["console"],
            "level": os.getenv("DJANGO_LOG_LEVEL", "DEBUG" if DEBUG else "INFO"),
        },
    },
}

# Mapbox (forward geocoding of pickup addresses)
MAPBOX_ACCESS_TOKEN = os.getenv("MAPBOX_ACCESS_TOKEN", "")
# Cache timeout for geocoding results (seconds)
GEOCODING_CACHE_TIMEOUT = int(os.getenv("GEOCODING_CACHE_TIMEOUT", str(24 * 3600)))

# Platform commission applied when a property has no commissionPercent of its own
SYSTEM_COMMISSION_PERCENT = float(os.getenv("SYSTEM_COMMISSION_PERCENT", "0"))

# Transport fare constants (minor units of DEFAULT_CURRENCY)
TRANSPORT_FARES = {
    "DEFAULT_CURRENCY": os.getenv("DEFAULT_CURRENCY", "TZS"),
    "VEHICLES": {
        "BODA": {"base_fare": 1500, "per_km_rate": 350, "per_minute_rate": 35, "average_speed_kmh": 35},
        "BAJAJI": {"base_fare": 1800, "per_km_rate": 420, "per_minute_rate": 40, "average_speed_kmh": 28},
        "CAR": {"base_fare": 2000, "per_km_rate": 500, "per_minute_rate": 50, "average_speed_kmh": 30},
        "XL": {"base_fare": 2500, "per_km_rate": 650, "per_minute_rate": 60, "average_speed_kmh": 30},
        "PREMIUM": {"base_fare": 5000, "per_km_rate": 1200, "per_minute_rate": 80, "average_speed_kmh": 30},
    },
}

DEFAULT_AUTO_FIELD = 'django.db.models.AutoField'
