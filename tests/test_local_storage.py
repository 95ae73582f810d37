from datetime import timedelta

import pytest

from models.local_storage import LocalStorage


@pytest.fixture
def storage(mongo_db):
    return LocalStorage()


def test_odoo_config_round_trip(storage):
    assert storage.get_odoo_url() is None
    assert not storage.has_odoo_config()

    storage.save_odoo_config("https://odoo.example.com", "prod")

    assert storage.get_odoo_url() == "https://odoo.example.com"
    assert storage.get_odoo_database() == "prod"
    assert storage.has_odoo_config()


def test_individual_setters(storage):
    storage.save_odoo_url("https://odoo.example.com")
    assert not storage.has_odoo_config()

    storage.save_odoo_database("prod")
    assert storage.has_odoo_config()


def test_first_login_flag(storage):
    assert storage.is_first_login() is True

    storage.set_first_login_completed()
    assert storage.is_first_login() is False

    storage.save_odoo_config("https://odoo.example.com", "prod")
    storage.clear_odoo_config()
    assert storage.is_first_login() is True
    assert not storage.has_odoo_config()


def test_saved_email(storage):
    storage.save_last_email("jane@example.com")
    assert storage.get_saved_email() == "jane@example.com"

    storage.clear_saved_credentials()
    assert storage.get_saved_email() is None


def test_cache_validity_window(storage):
    storage.save_cache("attendance:42", [{"id": 1}])
    saved_at = storage.get_cache_time("attendance:42")

    assert storage.get_cache("attendance:42") == [{"id": 1}]
    assert storage.is_cache_valid("attendance:42", minutes=15, now=saved_at + timedelta(minutes=14))
    assert not storage.is_cache_valid("attendance:42", minutes=15, now=saved_at + timedelta(minutes=16))
    assert not storage.is_cache_valid("missing")


def test_clear_cache(storage):
    storage.save_cache("a", 1)
    storage.save_cache("b", 2)

    storage.clear_cache_for("a")
    assert storage.get_cache("a") is None
    assert storage.get_cache("b") == 2

    storage.clear_cache()
    assert storage.get_cache("b") is None


def test_clear_all_data(storage):
    storage.save_odoo_config("https://odoo.example.com", "prod")
    storage.set_first_login_completed()
    storage.save_last_email("jane@example.com")
    storage.save_cache("a", 1)

    storage.clear_all_data()

    assert not storage.has_odoo_config()
    assert storage.is_first_login() is True
    assert storage.get_saved_email() is None
    assert storage.get_cache("a") is None


def test_cache_time_is_aware_utc(storage):
    storage.save_cache("a", 1)

    saved_at = storage.get_cache_time("a")

    assert saved_at.tzinfo is not None
    assert saved_at.utcoffset() == timedelta(0)
    assert storage.is_cache_valid("a")
    # Naive "now" values are read as UTC
    assert storage.is_cache_valid("a", now=saved_at.replace(tzinfo=None) + timedelta(minutes=1))
