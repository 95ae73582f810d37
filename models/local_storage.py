from datetime import timedelta

from utils.db import mongo
from utils.odoo_datetime import as_utc, utc_now

ODOO_SETTINGS_ID = "odoo"
LOGIN_SETTINGS_ID = "last_login"
DEFAULT_CACHE_MINUTES = 15


class LocalStorage:
    """Key-value settings and timestamped cache entries kept in MongoDB."""

    @staticmethod
    def settings():
        return mongo.db.app_settings

    @staticmethod
    def cache():
        return mongo.db.cache

    def _get_setting(self, doc_id, key, default=None):
        doc = self.settings().find_one({"_id": doc_id}) or {}
        value = doc.get(key)
        return default if value is None else value

    def _set_settings(self, doc_id, **values):
        self.settings().update_one({"_id": doc_id}, {"$set": values}, upsert=True)

    # Odoo configuration
    def save_odoo_url(self, url):
        self._set_settings(ODOO_SETTINGS_ID, url=url)

    def get_odoo_url(self):
        return self._get_setting(ODOO_SETTINGS_ID, "url")

    def save_odoo_database(self, database):
        self._set_settings(ODOO_SETTINGS_ID, database=database)

    def get_odoo_database(self):
        return self._get_setting(ODOO_SETTINGS_ID, "database")

    def save_odoo_config(self, url, database):
        self._set_settings(ODOO_SETTINGS_ID, url=url, database=database)

    def has_odoo_config(self):
        return bool(self.get_odoo_url()) and bool(self.get_odoo_database())

    def clear_odoo_config(self):
        self.settings().update_one(
            {"_id": ODOO_SETTINGS_ID},
            {"$unset": {"url": "", "database": ""}, "$set": {"is_first_login": True}},
            upsert=True,
        )

    def is_first_login(self):
        return bool(self._get_setting(ODOO_SETTINGS_ID, "is_first_login", True))

    def set_first_login_completed(self):
        self._set_settings(ODOO_SETTINGS_ID, is_first_login=False)

    # Last login; the password is never stored here
    def save_last_email(self, email):
        self._set_settings(LOGIN_SETTINGS_ID, email=email)

    def get_saved_email(self):
        return self._get_setting(LOGIN_SETTINGS_ID, "email")

    def clear_saved_credentials(self):
        self.settings().delete_one({"_id": LOGIN_SETTINGS_ID})

    # Cache
    def save_cache(self, key, data):
        self.cache().update_one(
            {"_id": key},
            {"$set": {"data": data, "updated_at": utc_now()}},
            upsert=True,
        )

    def get_cache(self, key):
        doc = self.cache().find_one({"_id": key})
        return doc.get("data") if doc else None

    def get_cache_time(self, key):
        doc = self.cache().find_one({"_id": key})
        # MongoDB hands datetimes back naive (UTC)
        return as_utc(doc.get("updated_at")) if doc else None

    def is_cache_valid(self, key, minutes=DEFAULT_CACHE_MINUTES, now=None):
        updated_at = self.get_cache_time(key)
        if updated_at is None:
            return False
        now = as_utc(now) if now else utc_now()
        return now - updated_at < timedelta(minutes=minutes)

    def clear_cache_for(self, key):
        self.cache().delete_one({"_id": key})

    def clear_cache(self):
        self.cache().delete_many({})

    def clear_all_data(self):
        self.clear_odoo_config()
        self.clear_saved_credentials()
        self.clear_cache()
