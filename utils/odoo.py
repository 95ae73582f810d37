"""
utils/odoo.py
-----------------
Per-request wiring of the Odoo client, reconciler and HR service.
"""

from flask import current_app

from models.local_storage import LocalStorage
from services.attendance_reconciler import AttendanceReconciler
from services.hr_service import HrService
from services.odoo_rpc import OdooClient
from utils.auth import current_odoo_session


def odoo_settings():
    """(url, database): saved config screen values, else the app config defaults."""
    storage = LocalStorage()
    url = storage.get_odoo_url() or current_app.config.get("ODOO_URL", "")
    database = storage.get_odoo_database() or current_app.config.get("ODOO_DB", "")
    return url, database


def new_odoo_client(url=None, database=None):
    if url is None or database is None:
        saved_url, saved_db = odoo_settings()
        url = saved_url if url is None else url
        database = saved_db if database is None else database
    return OdooClient(url, database, timeout=current_app.config["ODOO_TIMEOUT"])


def geo_capability_for(odoo_session):
    registry = current_app.extensions["geo_capabilities"]
    return registry.for_server(odoo_session.base_url, odoo_session.database)


def current_reconciler():
    odoo_session = current_odoo_session()
    if odoo_session is None:
        return AttendanceReconciler(None, None)
    client = odoo_session.client(timeout=current_app.config["ODOO_TIMEOUT"])
    return AttendanceReconciler(client, odoo_session.employee_id, geo_capability_for(odoo_session))


def current_hr_service(reconciler=None):
    reconciler = reconciler or current_reconciler()
    return HrService(
        reconciler.client,
        employee_id=reconciler.employee_id,
        reconciler=reconciler,
        history_limit=current_app.config["HISTORY_LIMIT"],
        cache_minutes=current_app.config["CACHE_DURATION_MINUTES"],
    )
