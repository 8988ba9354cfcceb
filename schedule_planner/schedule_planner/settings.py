'''
Name: schedule_planner/settings.py
Description: Django settings for the schedule planner project.
Authors: Schedule planner maintainers
Created: October 6, 2026
Last Modified: October 12, 2026
'''

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "dev-only-insecure-key")
DEBUG = os.environ.get("DJANGO_DEBUG", "1") == "1"
ALLOWED_HOSTS = os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",")

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "apps.schedule_generator",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "schedule_planner.urls"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("DJANGO_DB_PATH", BASE_DIR / "db.sqlite3"),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

LANGUAGE_CODE = "en-us"
TIME_ZONE = "America/New_York"
USE_TZ = True

# Scheduling knobs, see apps/schedule_generator/utils/constants.py for defaults
SCHEDULE_GENERATOR = {
    "HORIZON_DAYS": 7,
    "WORK_DAY_START": "08:00",
    "WORK_DAY_END": "22:00",
    "TIME_ZONE": TIME_ZONE,
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
        "apps.schedule_generator": {
            "handlers": ["console"],
            "level": os.environ.get("SCHEDULER_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
    },
}
