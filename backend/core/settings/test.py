# flake8: noqa
"""
Test settings: in-memory SQLite, fast password hashing, quiet logging.
"""

from .base import *

ENVIRONMENT = "test"

DEBUG = False
SECRET_KEY = "django-insecure-test-key"
ALLOWED_HOSTS = ["testserver", "localhost"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

# Tests pin the fallback table so conversions are deterministic
AGENCY_BASE_CURRENCY = "TRY"
AGENCY_DEFAULT_TAX_RATE = Decimal("20")
AGENCY_NUMBER_LOCALE = "tr-TR"
AGENCY_FALLBACK_RATES = {
    "USD": Decimal("43.50"),
    "EUR": Decimal("51.30"),
    "GBP": Decimal("58.00"),
}

LOGGING["handlers"]["console"]["level"] = "WARNING"
LOGGING["loggers"]["agency"]["level"] = "WARNING"
