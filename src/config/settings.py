"""Django settings for the freight router project."""

from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent
PROJECT_ROOT = BASE_DIR.parent

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "change-me-in-production")
DEBUG = os.getenv("DJANGO_DEBUG", "1") == "1"
ALLOWED_HOSTS = [host for host in os.getenv("DJANGO_ALLOWED_HOSTS", "").split(",") if host]

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "freight_router",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "config.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "config.wsgi.application"
ASGI_APPLICATION = "config.asgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": PROJECT_ROOT / "db.sqlite3",
    }
}

AUTH_PASSWORD_VALIDATORS = [
    {
        "NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.MinimumLengthValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.CommonPasswordValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.NumericPasswordValidator",
    },
]

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "freight-router-cache",
    }
}

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "freight_router": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
    },
}

HERE_API_KEY = os.getenv("HERE_API_KEY", "")
HERE_GEOCODE_URL = os.getenv("HERE_GEOCODE_URL", "https://geocode.search.hereapi.com/v1/geocode")
HERE_ROUTER_URL = os.getenv("HERE_ROUTER_URL", "https://router.hereapi.com/v8/routes")
HERE_TIMEOUT_SECONDS = float(os.getenv("HERE_TIMEOUT_SECONDS", "12"))
HERE_RETRY_COUNT = int(os.getenv("HERE_RETRY_COUNT", "2"))
HERE_ROUTE_ALTERNATIVES = int(os.getenv("HERE_ROUTE_ALTERNATIVES", "3"))
FUEL_PRICE_PER_UNIT = float(os.getenv("FUEL_PRICE_PER_UNIT", "1.0"))

ELEVATION_BASE_URL = os.getenv("ELEVATION_BASE_URL", "https://api.open-elevation.com")
ELEVATION_BATCH_SIZE = int(os.getenv("ELEVATION_BATCH_SIZE", "100"))
ELEVATION_TIMEOUT_SECONDS = float(os.getenv("ELEVATION_TIMEOUT_SECONDS", "12"))
ELEVATION_RETRY_COUNT = int(os.getenv("ELEVATION_RETRY_COUNT", "1"))
ELEVATION_CHANGE_THRESHOLD = float(os.getenv("ELEVATION_CHANGE_THRESHOLD", "500"))

OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4")
OPENAI_TEMPERATURE = float(os.getenv("OPENAI_TEMPERATURE", "0.3"))
OPENAI_TIMEOUT_SECONDS = float(os.getenv("OPENAI_TIMEOUT_SECONDS", "30"))
OPENAI_RETRY_COUNT = int(os.getenv("OPENAI_RETRY_COUNT", "1"))

ENRICHMENT_TIMEOUT_SECONDS = float(os.getenv("ENRICHMENT_TIMEOUT_SECONDS", "45"))

ROUTE_CACHE_TTL_SECONDS = int(os.getenv("ROUTE_CACHE_TTL_SECONDS", "600"))
GEOCODE_CACHE_TTL_SECONDS = int(os.getenv("GEOCODE_CACHE_TTL_SECONDS", "86400"))

ROUTE_SCORE_DURATION_CAP_HOURS = float(os.getenv("ROUTE_SCORE_DURATION_CAP_HOURS", "12"))
ROUTE_SCORE_DISTANCE_CAP_MILES = float(os.getenv("ROUTE_SCORE_DISTANCE_CAP_MILES", "800"))
ROUTE_SCORE_CONDITION_PENALTY = float(os.getenv("ROUTE_SCORE_CONDITION_PENALTY", "0.2"))
ROUTE_SCORE_DURATION_WEIGHT = float(os.getenv("ROUTE_SCORE_DURATION_WEIGHT", "0.4"))
ROUTE_SCORE_DISTANCE_WEIGHT = float(os.getenv("ROUTE_SCORE_DISTANCE_WEIGHT", "0.3"))
ROUTE_SCORE_CONDITION_WEIGHT = float(os.getenv("ROUTE_SCORE_CONDITION_WEIGHT", "0.3"))

PLAN_ORDERS_CONCURRENCY = int(os.getenv("PLAN_ORDERS_CONCURRENCY", "4"))
