"""Settings for the form builder microservice."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict
from urllib.parse import urlparse

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "builder-service-secret-key")
DEBUG = os.environ.get("DJANGO_DEBUG", "false").lower() in {"1", "true", "yes"}
ALLOWED_HOSTS = os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")

INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "rest_framework",
    "corsheaders",
    "builder",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "builder_service.urls"
WSGI_APPLICATION = "builder_service.wsgi.application"
ASGI_APPLICATION = "builder_service.asgi.application"


def _database_settings() -> Dict[str, Dict[str, str]]:
    url = (
        os.environ.get("BUILDER_DATABASE_URL")
        or os.environ.get("DATABASE_URL")
        or "sqlite:///db.sqlite3"
    )
    parsed = urlparse(url)
    if parsed.scheme in {"postgres", "postgresql"}:
        return {
            "default": {
                "ENGINE": "django.db.backends.postgresql",
                "NAME": parsed.path.lstrip("/"),
                "USER": parsed.username or "",
                "PASSWORD": parsed.password or "",
                "HOST": parsed.hostname or "localhost",
                "PORT": str(parsed.port or 5432),
            }
        }
    if parsed.scheme == "sqlite":
        # sqlite:///name is relative to the service, sqlite:////abs/name is absolute.
        return {
            "default": {
                "ENGINE": "django.db.backends.sqlite3",
                "NAME": str(BASE_DIR / (parsed.path[1:] or "db.sqlite3")),
            }
        }
    raise ValueError("Supported database URLs: postgresql:// or sqlite:///")


DATABASES = _database_settings()

LANGUAGE_CODE = "en-us"
TIME_ZONE = os.environ.get("TZ", "UTC")
USE_I18N = True
USE_TZ = True

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

CORS_ALLOW_ALL_ORIGINS = True

# Authentication is handled in front of the service.
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
    "DEFAULT_PARSER_CLASSES": ["rest_framework.parsers.JSONParser"],
}

BUILDER_SERVICE_URL = os.environ.get("BUILDER_SERVICE_URL", "http://localhost:8000")
BUILDER_SERVICE_TIMEOUT = float(os.environ.get("BUILDER_SERVICE_TIMEOUT", "5"))

LOGGING: Dict[str, Any] = {
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
    "loggers": {
        "builder": {
            "handlers": ["console"],
            "level": os.environ.get("BUILDER_LOG_LEVEL", "INFO").upper(),
            "propagate": False,
        },
    },
}
