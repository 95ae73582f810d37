import secrets

from services.odoo_rpc import OdooClient
from utils.db import mongo
from utils.odoo_datetime import as_utc, utc_now


class OdooSession:
    """
    Credentials of an authenticated Odoo login.
    Kept server-side; the browser only holds the random token.
    """

    @staticmethod
    def collection():
        return mongo.db.odoo_sessions

    def __init__(self, base_url, database, uid, login, password, employee_id=None,
                 employee_name=None, token=None, login_time=None):
        self.token = token or secrets.token_urlsafe(32)
        self.base_url = base_url
        self.database = database
        self.uid = uid
        self.login = login
        self.password = password
        self.employee_id = employee_id
        self.employee_name = employee_name
        self.login_time = as_utc(login_time) or utc_now()

    def to_dict(self):
        return {
            "token": self.token,
            "base_url": self.base_url,
            "database": self.database,
            "uid": self.uid,
            "login": self.login,
            "password": self.password,
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "login_time": self.login_time,
        }

    @staticmethod
    def from_dict(doc):
        return OdooSession(
            base_url=doc["base_url"],
            database=doc["database"],
            uid=doc["uid"],
            login=doc.get("login"),
            password=doc.get("password"),
            employee_id=doc.get("employee_id"),
            employee_name=doc.get("employee_name"),
            token=doc["token"],
            login_time=doc.get("login_time"),
        )

    def save(self):
        OdooSession.collection().insert_one(self.to_dict())
        return self

    @staticmethod
    def find_by_token(token):
        if not token:
            return None
        doc = OdooSession.collection().find_one({"token": token})
        return OdooSession.from_dict(doc) if doc else None

    def set_employee(self, employee_id, employee_name):
        self.employee_id = employee_id
        self.employee_name = employee_name
        OdooSession.collection().update_one(
            {"token": self.token},
            {"$set": {"employee_id": employee_id, "employee_name": employee_name}},
        )

    @staticmethod
    def delete(token):
        return OdooSession.collection().delete_one({"token": token})

    def client(self, timeout=30):
        return OdooClient(
            self.base_url,
            self.database,
            uid=self.uid,
            password=self.password,
            login=self.login,
            timeout=timeout,
        )
