import base64
import itertools

import cv2
import mongomock
import numpy as np
import pytest

from config import TestConfig
from models.odoo_session import OdooSession
from services.odoo_rpc import OdooAuthenticationError, OdooRemoteError
from utils.db import mongo

ODOO_URL = "http://odoo.test"
ODOO_DB = "hr"
EMPLOYEE_ID = 42
USER_ID = 7


class FakeOdooClient:
    """In-memory stand-in for OdooClient (hr.attendance / hr.employee only)."""

    def __init__(self, authenticated=True, password="secret"):
        self.base_url = ODOO_URL
        self.database = ODOO_DB
        self.valid_password = password
        self.uid = USER_ID if authenticated else None
        self.password = password if authenticated else None
        self.login = "jane@example.com" if authenticated else None
        self.records = {}
        self.employees = [{
            "id": EMPLOYEE_ID,
            "name": "Jane Doe",
            "user_id": USER_ID,
            "job_title": "Engineer",
            "department_id": [3, "R&D"],
            "work_email": "jane@example.com",
        }]
        self.calls = []
        # Geo field names the server schema does not know
        self.reject_fields = set()
        # Raised on every create/write when set
        self.write_error = None
        # Raised on every search_read when set
        self.read_error = None
        self._ids = itertools.count(100)

    @property
    def is_authenticated(self):
        return bool(self.uid) and self.password is not None

    def add_record(self, id=None, employee_id=EMPLOYEE_ID, check_in="2024-03-05 08:00:00", check_out=False):
        record_id = id if id is not None else next(self._ids)
        self.records[record_id] = {
            "id": record_id,
            "employee_id": employee_id,
            "check_in": check_in,
            "check_out": check_out,
        }
        return record_id

    def calls_of(self, method):
        return [call for call in self.calls if call[0] == method]

    def authenticate(self, login, password):
        self.calls.append(("authenticate", login))
        if password != self.valid_password:
            raise OdooAuthenticationError("Invalid username or password")
        self.uid = USER_ID
        self.password = password
        self.login = login
        return self.uid

    def test_connection(self):
        return {"success": True, "statusCode": 200, "server_version": "17.0"}

    def search_read(self, model, domain, fields=None, limit=None, offset=None, order=None):
        self.calls.append(("search_read", model, domain))
        if self.read_error:
            raise self.read_error

        source = self.employees if model == "hr.employee" else list(self.records.values())
        rows = [dict(row) for row in source if all(_matches(row, term) for term in domain)]
        if order == "check_in desc":
            rows.sort(key=lambda row: row["check_in"], reverse=True)
        if limit is not None:
            rows = rows[:limit]
        if fields:
            rows = [{key: row.get(key, False) for key in fields} for row in rows]
        return rows

    def create(self, model, values):
        self.calls.append(("create", model, dict(values)))
        self._check(model, values)
        record_id = next(self._ids)
        self.records[record_id] = dict(values, id=record_id, check_out=False)
        return record_id

    def write(self, model, ids, values):
        self.calls.append(("write", model, list(ids), dict(values)))
        self._check(model, values)
        for record_id in ids:
            self.records[record_id].update(values)
        return True

    def _check(self, model, values):
        if self.write_error:
            raise self.write_error
        for name in values:
            if name in self.reject_fields:
                raise OdooRemoteError(f"Invalid field '{name}' on model '{model}'")


def _matches(row, term):
    field, op, value = term
    current = row.get(field, False)
    if op == "=":
        if value is False:
            return current in (False, None)
        return current == value
    if op == ">=":
        return bool(current) and current >= value
    raise ValueError(f"unsupported operator {op}")


def png_bytes(width=64, height=48):
    image = np.full((height, width, 3), 127, dtype=np.uint8)
    ok, buffer = cv2.imencode(".png", image)
    assert ok
    return buffer.tobytes()


def png_data_url(width=64, height=48):
    return "data:image/png;base64," + base64.b64encode(png_bytes(width, height)).decode()


@pytest.fixture
def fake_odoo():
    return FakeOdooClient()


@pytest.fixture
def mongo_db(monkeypatch):
    db = mongomock.MongoClient().db
    monkeypatch.setattr(mongo, "db", db)
    return db


@pytest.fixture
def app(monkeypatch, fake_odoo):
    from app import create_app

    flask_app = create_app(TestConfig)
    monkeypatch.setattr(mongo, "db", mongomock.MongoClient().db)
    monkeypatch.setattr("models.odoo_session.OdooClient", lambda *args, **kwargs: fake_odoo)
    monkeypatch.setattr("utils.odoo.OdooClient", lambda *args, **kwargs: fake_odoo)
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def logged_in(app, client):
    """Store an OdooSession and bind it to the test client's cookie session."""
    with app.app_context():
        odoo_session = OdooSession(
            base_url=ODOO_URL,
            database=ODOO_DB,
            uid=USER_ID,
            login="jane@example.com",
            password="secret",
            employee_id=EMPLOYEE_ID,
            employee_name="Jane Doe",
        ).save()
    with client.session_transaction() as sess:
        sess["odoo_token"] = odoo_session.token
        sess["user_name"] = odoo_session.employee_name
    return odoo_session
