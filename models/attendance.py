from utils.odoo_datetime import (
    elapsed_since,
    format_duration,
    format_local_time,
    format_odoo_datetime,
    parse_odoo_datetime,
)

CHECK_IN = "check_in"
CHECK_OUT = "check_out"

# AttendanceResult.reason
NOT_AUTHENTICATED = "not_authenticated"
TRANSPORT = "transport"
REMOTE = "remote"


class AttendanceRecord:
    """One hr.attendance row as read from Odoo."""

    FIELDS = ["id", "employee_id", "check_in", "check_out", "worked_hours",
              "in_latitude", "in_longitude", "out_latitude", "out_longitude"]

    def __init__(self, id, check_in, check_out=None, employee_id=None, worked_hours=None,
                 in_latitude=None, in_longitude=None, out_latitude=None, out_longitude=None):
        self.id = id
        self.employee_id = employee_id
        self.check_in = check_in
        self.check_out = check_out
        self.worked_hours = worked_hours
        self.in_latitude = in_latitude
        self.in_longitude = in_longitude
        self.out_latitude = out_latitude
        self.out_longitude = out_longitude

    @staticmethod
    def from_odoo(row):
        employee = row.get("employee_id")
        # many2one fields come back as [id, display_name]
        if isinstance(employee, (list, tuple)):
            employee = employee[0] if employee else None
        return AttendanceRecord(
            id=row.get("id"),
            employee_id=employee or None,
            check_in=parse_odoo_datetime(row.get("check_in")),
            check_out=parse_odoo_datetime(row.get("check_out")),
            worked_hours=row.get("worked_hours") or None,
            in_latitude=row.get("in_latitude") or None,
            in_longitude=row.get("in_longitude") or None,
            out_latitude=row.get("out_latitude") or None,
            out_longitude=row.get("out_longitude") or None,
        )

    @property
    def is_open(self):
        return self.check_out is None

    def duration(self, now=None):
        if self.check_out is not None:
            return elapsed_since(self.check_in, self.check_out)
        return elapsed_since(self.check_in, now)

    def to_dict(self):
        return {
            "id": self.id,
            "employee_id": self.employee_id,
            "check_in": format_odoo_datetime(self.check_in) if self.check_in else None,
            "check_out": format_odoo_datetime(self.check_out) if self.check_out else None,
            "worked_hours": self.worked_hours,
            "in_latitude": self.in_latitude,
            "in_longitude": self.in_longitude,
            "out_latitude": self.out_latitude,
            "out_longitude": self.out_longitude,
        }


class AttendanceStatus:

    def __init__(self, is_checked_in=False, record_id=None, check_in=None):
        self.is_checked_in = is_checked_in
        self.record_id = record_id
        self.check_in = check_in

    @staticmethod
    def checked_out():
        return AttendanceStatus(False)

    def elapsed(self, now=None):
        if not self.is_checked_in:
            return elapsed_since(None)
        return elapsed_since(self.check_in, now)

    def to_dict(self, now=None):
        elapsed = self.elapsed(now)
        return {
            "is_checked_in": self.is_checked_in,
            "attendance_id": self.record_id,
            "check_in": format_odoo_datetime(self.check_in) if self.check_in else None,
            "check_in_time": format_local_time(self.check_in),
            "elapsed_seconds": int(elapsed.total_seconds()),
            "elapsed": format_duration(elapsed),
        }


class AttendanceResult:

    def __init__(self, success, action, message=None, error=None, reason=None, data=None):
        self.success = success
        self.action = action
        self.message = message
        self.error = error
        self.reason = reason
        self.data = data

    @staticmethod
    def ok(action, message, data=None):
        return AttendanceResult(True, action, message=message, data=data)

    @staticmethod
    def failed(action, error, reason):
        return AttendanceResult(False, action, error=error, reason=reason)

    def __bool__(self):
        return self.success

    def to_dict(self):
        result = {"success": self.success, "action": self.action}
        if self.success:
            result["message"] = self.message
            result["data"] = self.data
        else:
            result["error"] = self.error
            result["reason"] = self.reason
        return result

    def __repr__(self):
        state = "ok" if self.success else f"failed: {self.error}"
        return f"<AttendanceResult {self.action} {state}>"
