"""
config.py
-----------------
Application settings, loaded with app.config.from_object(Config).
Every value can be overridden through an environment variable of the same name.
"""

import os


def _env_bool(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "change-me")
    DEBUG = _env_bool("DEBUG", False)
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # MongoDB (local settings, cache, server-side Odoo sessions)
    MONGO_URI = os.environ.get("MONGO_URI", "mongodb://localhost:27017/FaceAttendance")

    # Odoo server defaults; values saved from the config screen take precedence
    ODOO_URL = os.environ.get("ODOO_URL", "")
    ODOO_DB = os.environ.get("ODOO_DB", "")
    ODOO_TIMEOUT = float(os.environ.get("ODOO_TIMEOUT", 30))
    ODOO_WRITE_TIMEOUT = float(os.environ.get("ODOO_WRITE_TIMEOUT", 60))

    # Post photos to the Odoo /submit_face controller instead of writing hr.attendance
    FACE_VERIFY_VIA_CONTROLLER = _env_bool("FACE_VERIFY_VIA_CONTROLLER", False)

    # Local cache
    CACHE_DURATION_MINUTES = int(os.environ.get("CACHE_DURATION_MINUTES", 15))
    HISTORY_LIMIT = int(os.environ.get("HISTORY_LIMIT", 50))

    # Photo compression
    PHOTO_MAX_SIDE = int(os.environ.get("PHOTO_MAX_SIDE", 1024))
    PHOTO_QUALITY = int(os.environ.get("PHOTO_QUALITY", 88))

    # Reverse geocoding (Nominatim)
    GEOCODER_ENABLED = _env_bool("GEOCODER_ENABLED", True)
    GEOCODER_USER_AGENT = os.environ.get("GEOCODER_USER_AGENT", "face-attendance-web")
    GEOCODER_TIMEOUT = float(os.environ.get("GEOCODER_TIMEOUT", 10))


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    MONGO_URI = "mongodb://localhost:27017/FaceAttendanceTest"
    ODOO_URL = ""
    ODOO_DB = ""
    GEOCODER_ENABLED = False
    FACE_VERIFY_VIA_CONTROLLER = False
