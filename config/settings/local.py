from .base import *  # noqa: F403
from .base import LOGGING
from .base import env

# GENERAL
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#debug
DEBUG = True
# https://docs.djangoproject.com/en/dev/ref/settings/#secret-key
SECRET_KEY = env(
    "DJANGO_SECRET_KEY",
    default="pT3vS0qkX9dYb1mZcH7wLr4uN8aGeF2jKx6QsVt5RyWo0nBi",
)
# https://docs.djangoproject.com/en/dev/ref/settings/#allowed-hosts
ALLOWED_HOSTS = ["localhost", "0.0.0.0", "127.0.0.1"]  # noqa: S104

# EMAIL
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#email-backend
EMAIL_BACKEND = env(
    "DJANGO_EMAIL_BACKEND",
    default="django.core.mail.backends.console.EmailBackend",
)

# LOGGING
# ------------------------------------------------------------------------------
LOGGING["loggers"]["taskboard.realtime"]["level"] = env(
    "REALTIME_LOG_LEVEL",
    default="DEBUG",
)
