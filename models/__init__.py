# models/__init__.py

from .attendance import AttendanceRecord, AttendanceResult, AttendanceStatus
from .employee import Employee
from .local_storage import LocalStorage
from .odoo_session import OdooSession

__all__ = [
    "AttendanceRecord",
    "AttendanceResult",
    "AttendanceStatus",
    "Employee",
    "LocalStorage",
    "OdooSession",
]
