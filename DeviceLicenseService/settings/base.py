"""
Base Django settings for DeviceLicenseService.

These settings are shared across all environments.
Environment-specific overrides are in dev.py, test.py, and prod.py
"""
import math
import os
from pathlib import Path

from .logging import get_logging_config


def env_bool(name: str, default: bool = False) -> bool:
    """Read a boolean flag from the environment."""
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def postgres_timeout_options(timeout_seconds: float) -> dict:
    """
    Build libpq options that bound every database call server-side.

    ORM calls run on the request thread, so only the server can stop a
    hung query once the caller has given up on it.
    """
    timeout_ms = max(1, int(timeout_seconds * 1000))
    return {
        # libpq rejects connect timeouts below 2 seconds
        "connect_timeout": max(2, math.ceil(timeout_seconds)),
        "options": f"-c statement_timeout={timeout_ms} -c lock_timeout={timeout_ms}",
    }


# Build paths inside the project
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.environ.get(
    "SECRET_KEY", "django-insecure-n3w8b!v2k$q0x7@p5t#r1z&m4c^y6e*h9d(l+s)a_f-g=j%u"
)

# Application definition
INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # Third party
    "rest_framework",
    "drf_spectacular",
    # Local apps
    "core",
    "licenses",
    "activations",
    "api",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    # Custom middleware
    "core.middleware.observability.ObservabilityMiddleware",
    "core.middleware.metrics.MetricsMiddleware",
    "core.middleware.auth.AdminTokenMiddleware",
]

ROOT_URLCONF = "DeviceLicenseService.urls"

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
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "DeviceLicenseService.wsgi.application"
ASGI_APPLICATION = "DeviceLicenseService.asgi.application"

# Database
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.environ.get("DB_NAME", "license_service"),
        "USER": os.environ.get("DB_USER", "postgres"),
        "PASSWORD": os.environ.get("DB_PASSWORD", "postgres"),
        "HOST": os.environ.get("DB_HOST", "localhost"),
        "PORT": os.environ.get("DB_PORT", "5432"),
        "OPTIONS": {},
    }
}

# Password validation
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

# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# Static files (CSS, JavaScript, Images)
STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

# Default primary key field type
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# REST Framework
REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
    ],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [],
    "UNAUTHENTICATED_USER": None,
    "EXCEPTION_HANDLER": "api.exceptions.custom_exception_handler",
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
}

# drf-spectacular settings
SPECTACULAR_SETTINGS = {
    "TITLE": "Device License Service API",
    "DESCRIPTION": (
        "Issues license keys and binds each one to a single device. "
        "Client applications activate a key once and verify it on start-up."
    ),
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
    "COMPONENT_SPLIT_REQUEST": True,
    "SCHEMA_PATH_PREFIX": "/api",
    "TAGS": [
        {"name": "License API", "description": "Key issuance, activation and verification"},
        {"name": "Admin API", "description": "Operator license listing"},
        {"name": "Health", "description": "Health check endpoints"},
    ],
}

# License store
LICENSE_STORE_BACKEND = os.environ.get("LICENSE_STORE_BACKEND", "database")
LICENSE_STORE_FILE = os.environ.get("LICENSE_STORE_FILE", str(BASE_DIR / "licenses.json"))
LICENSE_STORE_TIMEOUT_SECONDS = float(os.environ.get("LICENSE_STORE_TIMEOUT_SECONDS", "5.0"))
DATABASES["default"]["OPTIONS"].update(postgres_timeout_options(LICENSE_STORE_TIMEOUT_SECONDS))

# License issuance
LICENSE_KEY_MAX_ATTEMPTS = 3
LICENSE_DEFAULT_PRODUCT = "default_product"
LICENSE_TEST_PRODUCT = "test_product"
LICENSE_TEST_PREFIX = "TEST"
LICENSE_ALLOW_TEMPORARY_KEYS = env_bool("LICENSE_ALLOW_TEMPORARY_KEYS", False)

# Admin listing
LICENSE_ADMIN_LISTING_ENABLED = env_bool("LICENSE_ADMIN_LISTING_ENABLED", False)
LICENSE_ADMIN_TOKEN = os.environ.get("LICENSE_ADMIN_TOKEN", "")

# Observability
OBSERVABILITY_ENABLED = env_bool("OBSERVABILITY_ENABLED", True)
LOGGING = get_logging_config(os.environ.get("ENVIRONMENT", "development"))
