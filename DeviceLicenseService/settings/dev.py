"""
Development settings for DeviceLicenseService.
"""

import os

from .base import *  # noqa: F403, F401

DEBUG = True

ALLOWED_HOSTS = ["localhost", "127.0.0.1", "0.0.0.0"]

# Database - Use PostgreSQL in Docker, SQLite for local development
# Override with environment variable DB_ENGINE=sqlite for SQLite
if os.environ.get("DB_ENGINE") == "sqlite":
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",  # noqa: F405
            "OPTIONS": {"timeout": LICENSE_STORE_TIMEOUT_SECONDS},  # noqa: F405
        }
    }

# Temporary keys and the admin listing are on unless switched off explicitly
LICENSE_ALLOW_TEMPORARY_KEYS = env_bool("LICENSE_ALLOW_TEMPORARY_KEYS", True)  # noqa: F405
LICENSE_ADMIN_LISTING_ENABLED = env_bool("LICENSE_ADMIN_LISTING_ENABLED", True)  # noqa: F405
