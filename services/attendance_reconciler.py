"""
services/attendance_reconciler.py
-----------------
Check-in / check-out against Odoo's hr.attendance.

The action is always decided by the open record on the server (check_out
unset), never by what the browser last showed, so two devices acting for
the same employee converge on server state.

Geo fields are sent while the server's GeoCapabilityFlag allows them. A
rejection naming one of the geo fields that were sent downgrades the flag
and the write is retried once without them.
"""

import logging

from models.attendance import (
    CHECK_IN,
    CHECK_OUT,
    NOT_AUTHENTICATED,
    REMOTE,
    TRANSPORT,
    AttendanceResult,
    AttendanceStatus,
)
from services.geo_capability import GeoCapabilityFlag
from services.odoo_rpc import OdooError, OdooRemoteError
from utils.odoo_datetime import format_odoo_datetime, parse_odoo_datetime, utc_now

_logger = logging.getLogger(__name__)

ATTENDANCE_MODEL = "hr.attendance"
NOT_AUTHENTICATED_ERROR = "not authenticated"

CHECK_IN_GEO_FIELDS = ("in_latitude", "in_longitude")
CHECK_OUT_GEO_FIELDS = ("out_latitude", "out_longitude")


def is_geo_field_rejection(message, field_names):
    # Matches Odoo's "Invalid field 'in_latitude' on model 'hr.attendance'".
    # Relies on the server's wording; keep the exact substring.
    if not message:
        return False
    return any(f"Invalid field '{name}'" in message for name in field_names)


class AttendanceReconciler:

    def __init__(self, client, employee_id, capability=None, clock=utc_now):
        self.client = client
        self.employee_id = employee_id
        self.capability = capability if capability is not None else GeoCapabilityFlag()
        self.clock = clock

    @property
    def is_authenticated(self):
        return (
            self.client is not None
            and self.client.is_authenticated
            and self.employee_id is not None
        )

    # ------------------------------------------------------------------
    # Current state
    # ------------------------------------------------------------------
    def get_current_status(self):
        """Open hr.attendance record of the employee; any failure reads as checked out."""
        if not self.is_authenticated:
            return AttendanceStatus.checked_out()

        try:
            rows = self.client.search_read(
                ATTENDANCE_MODEL,
                [["employee_id", "=", self.employee_id], ["check_out", "=", False]],
                ["id", "check_in", "check_out"],
                limit=1,
            )
        except OdooError as e:
            _logger.warning("Could not read attendance status for employee %s: %s", self.employee_id, e)
            return AttendanceStatus.checked_out()

        if not rows:
            return AttendanceStatus.checked_out()

        row = rows[0]
        try:
            check_in = parse_odoo_datetime(row.get("check_in"))
        except ValueError:
            _logger.warning("Unparseable check_in %r on attendance %s", row.get("check_in"), row.get("id"))
            check_in = None
        return AttendanceStatus(True, record_id=row["id"], check_in=check_in)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    def submit(self, photo, latitude, longitude):
        """Check out if an open record exists, otherwise check in."""
        if not self.is_authenticated:
            return AttendanceResult.failed(CHECK_IN, NOT_AUTHENTICATED_ERROR, NOT_AUTHENTICATED)

        status = self.get_current_status()
        _logger.info(
            "Employee %s is currently %s",
            self.employee_id,
            "checked in" if status.is_checked_in else "checked out",
        )
        if status.is_checked_in:
            return self.check_out(status.record_id, latitude, longitude)
        return self.check_in(photo, latitude, longitude)

    def check_in(self, photo, latitude, longitude):
        if not self.is_authenticated:
            return AttendanceResult.failed(CHECK_IN, NOT_AUTHENTICATED_ERROR, NOT_AUTHENTICATED)

        values = {
            "employee_id": self.employee_id,
            "check_in": format_odoo_datetime(self.clock()),
        }
        geo = _geo_values(CHECK_IN_GEO_FIELDS, latitude, longitude)

        def send(payload):
            return self.client.create(ATTENDANCE_MODEL, payload)

        return self._write(CHECK_IN, send, values, geo)

    def check_out(self, record_id, latitude, longitude):
        if not self.is_authenticated:
            return AttendanceResult.failed(CHECK_OUT, NOT_AUTHENTICATED_ERROR, NOT_AUTHENTICATED)

        values = {"check_out": format_odoo_datetime(self.clock())}
        geo = _geo_values(CHECK_OUT_GEO_FIELDS, latitude, longitude)

        def send(payload):
            self.client.write(ATTENDANCE_MODEL, [record_id], payload)
            return record_id

        return self._write(CHECK_OUT, send, values, geo)

    def _write(self, action, send, values, geo):
        with_geo = bool(geo) and self.capability.allows_geo()
        payload = dict(values, **geo) if with_geo else dict(values)
        _logger.debug("%s payload for employee %s: %s", action, self.employee_id, payload)

        try:
            data = send(payload)
        except OdooRemoteError as e:
            if not (with_geo and is_geo_field_rejection(e.message, geo)):
                return AttendanceResult.failed(action, e.message, REMOTE)
            if self.capability.downgrade():
                _logger.warning("Server rejected geo fields (%s); sending attendance without location", e.message)
            return self._retry_without_geo(action, send, values)
        except OdooError as e:
            return AttendanceResult.failed(action, e.message, TRANSPORT)

        if with_geo:
            self.capability.mark_supported()
        return AttendanceResult.ok(action, _success_message(action, with_geo), data)

    def _retry_without_geo(self, action, send, values):
        try:
            data = send(dict(values))
        except OdooRemoteError as e:
            return AttendanceResult.failed(action, e.message, REMOTE)
        except OdooError as e:
            return AttendanceResult.failed(action, e.message, TRANSPORT)
        return AttendanceResult.ok(action, _success_message(action, False), data)


def _geo_values(field_names, latitude, longitude):
    if latitude is None or longitude is None:
        return {}
    lat_field, lon_field = field_names
    return {lat_field: float(latitude), lon_field: float(longitude)}


def _success_message(action, with_geo):
    verb = "checked in" if action == CHECK_IN else "checked out"
    if with_geo:
        return f"Successfully {verb} with location"
    return f"Successfully {verb}"
