"""
services/odoo_rpc.py
-----------------
Thin Odoo JSON-RPC client (POST /jsonrpc, services "common" and "object").
"""

import itertools
import logging

import requests

_logger = logging.getLogger(__name__)

USER_AGENT = "Face Attendance Web"
DEFAULT_TIMEOUT = 30


class OdooError(Exception):
    """Base class for every failure talking to Odoo."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class OdooTransportError(OdooError):
    """Network, HTTP status or undecodable response."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class OdooRemoteError(OdooError):
    """Structured JSON-RPC error returned by the server."""

    def __init__(self, message, code=None, data=None):
        super().__init__(message)
        self.code = code
        self.data = data or {}


class OdooAuthenticationError(OdooError):
    pass


class OdooClient:
    """Simple Odoo JSON-RPC client."""

    def __init__(self, base_url, database, uid=None, password=None, login=None,
                 timeout=DEFAULT_TIMEOUT, session=None):
        self.base_url = (base_url or "").rstrip("/")
        self.database = database
        self.uid = uid
        self.password = password
        self.login = login
        self.timeout = timeout
        self.session = session or requests.Session()
        self._ids = itertools.count(1)

    @property
    def is_authenticated(self):
        return bool(self.uid) and self.password is not None

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------
    def call(self, service, method, *args):
        """Call /jsonrpc and return the "result" member."""
        url = f"{self.base_url}/jsonrpc"
        payload = {
            "jsonrpc": "2.0",
            "method": "call",
            "params": {"service": service, "method": method, "args": list(args)},
            "id": next(self._ids),
        }
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }

        try:
            response = self.session.post(url, json=payload, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            _logger.warning("Odoo request to %s failed: %s", url, e)
            raise OdooTransportError(f"Exception: {e}") from e

        if response.status_code != 200:
            raise OdooTransportError(f"HTTP Error: {response.status_code}", response.status_code)

        try:
            body = response.json()
        except ValueError as e:
            raise OdooTransportError(f"Invalid JSON response: {e}", response.status_code) from e

        if not isinstance(body, dict):
            raise OdooTransportError(
                f"Invalid JSON response: expected an object, got {type(body).__name__}",
                response.status_code,
            )

        error = body.get("error")
        if error and not isinstance(error, dict):
            _logger.info("Odoo %s.%s returned an error: %s", service, method, error)
            raise OdooRemoteError(str(error))
        if error:
            data = error.get("data")
            if not isinstance(data, dict):
                data = {}
            message = data.get("message") or error.get("message") or "Odoo method call failed"
            _logger.info("Odoo %s.%s returned an error: %s", service, method, message)
            raise OdooRemoteError(message, code=error.get("code"), data=data)

        return body.get("result")

    # ------------------------------------------------------------------
    # Service "common"
    # ------------------------------------------------------------------
    def version(self):
        return self.call("common", "version")

    def test_connection(self):
        """Probe the server; never raises."""
        try:
            info = self.version() or {}
        except OdooTransportError as e:
            return {"success": False, "statusCode": e.status_code, "error": e.message}
        except OdooError as e:
            return {"success": False, "statusCode": 200, "error": e.message}
        return {
            "success": True,
            "statusCode": 200,
            "server_version": info.get("server_version"),
        }

    def authenticate(self, login, password):
        uid = self.call("common", "authenticate", self.database, login, password, {})
        if not uid:
            raise OdooAuthenticationError("Invalid username or password")
        self.uid = uid
        self.login = login
        self.password = password
        _logger.info("Authenticated %s on %s (uid=%s)", login, self.database, uid)
        return uid

    # ------------------------------------------------------------------
    # Service "object"
    # ------------------------------------------------------------------
    def execute_kw(self, model, method, args, kwargs=None):
        if not self.is_authenticated:
            raise OdooAuthenticationError("Not authenticated. Please login first.")
        params = [self.database, self.uid, self.password, model, method, args]
        if kwargs:
            params.append(kwargs)
        return self.call("object", "execute_kw", *params)

    def search_read(self, model, domain, fields=None, limit=None, offset=None, order=None):
        kwargs = {}
        if fields is not None:
            kwargs["fields"] = fields
        if limit is not None:
            kwargs["limit"] = limit
        if offset:
            kwargs["offset"] = offset
        if order:
            kwargs["order"] = order
        return self.execute_kw(model, "search_read", [domain], kwargs) or []

    def create(self, model, values):
        return self.execute_kw(model, "create", [values])

    def write(self, model, ids, values):
        if isinstance(ids, int):
            ids = [ids]
        return self.execute_kw(model, "write", [ids, values])
