import logging
from datetime import timedelta

from models.attendance import AttendanceRecord
from models.employee import Employee
from models.local_storage import LocalStorage
from services.attendance_reconciler import ATTENDANCE_MODEL
from services.odoo_rpc import OdooError
from utils.odoo_datetime import format_duration, format_odoo_datetime, local_day_start, utc_now

_logger = logging.getLogger(__name__)

EMPLOYEE_MODEL = "hr.employee"
HISTORY_FIELDS = ["id", "check_in", "check_out", "worked_hours"]


class HrService:
    """Read-side HR queries for the logged-in employee."""

    def __init__(self, client, employee_id=None, reconciler=None, storage=None,
                 history_limit=50, cache_minutes=15, clock=utc_now):
        self.client = client
        self.employee_id = employee_id
        self.reconciler = reconciler
        self.storage = storage or LocalStorage()
        self.history_limit = history_limit
        self.cache_minutes = cache_minutes
        self.clock = clock

    def get_current_employee(self):
        """hr.employee of the authenticated user, or None."""
        if self.client is None or not self.client.is_authenticated:
            return None
        try:
            rows = self.client.search_read(
                EMPLOYEE_MODEL,
                [["user_id", "=", self.client.uid]],
                Employee.FIELDS,
                limit=1,
            )
        except OdooError as e:
            _logger.error("Could not load employee for uid %s: %s", self.client.uid, e)
            return None
        if not rows:
            _logger.warning("No employee linked to Odoo user %s", self.client.uid)
            return None
        return Employee.from_odoo(rows[0])

    def get_today_summary(self):
        now = self.clock()
        day_start = local_day_start(now)

        status = self.reconciler.get_current_status()

        records = []
        try:
            rows = self.client.search_read(
                ATTENDANCE_MODEL,
                [["employee_id", "=", self.employee_id],
                 ["check_in", ">=", format_odoo_datetime(day_start)]],
                HISTORY_FIELDS,
                order="check_in desc",
            )
            records = [AttendanceRecord.from_odoo(row) for row in rows]
        except (OdooError, ValueError) as e:
            _logger.error("Error loading today's attendance: %s", e)

        total = timedelta(0)
        for record in records:
            total += record.duration(now)

        # The open session may have started before midnight
        if status.is_checked_in and all(r.id != status.record_id for r in records):
            total += status.elapsed(now)

        return {
            "is_checked_in": status.is_checked_in,
            "attendance_id": status.record_id,
            "current_check_in": status.check_in,
            "today_records": records,
            "total_worked_hours": format_duration(total),
        }

    def get_history(self, refresh=False):
        cache_key = f"attendance:{self.employee_id}"
        if not refresh and self.storage.is_cache_valid(cache_key, self.cache_minutes):
            cached = self.storage.get_cache(cache_key)
            if cached is not None:
                return [AttendanceRecord.from_odoo(row) for row in cached]

        rows = self.client.search_read(
            ATTENDANCE_MODEL,
            [["employee_id", "=", self.employee_id]],
            HISTORY_FIELDS,
            limit=self.history_limit,
            order="check_in desc",
        )
        # Parse first so unreadable rows never reach the cache
        records = [AttendanceRecord.from_odoo(row) for row in rows]
        self.storage.save_cache(cache_key, rows)
        return records

    def invalidate_history(self):
        self.storage.clear_cache_for(f"attendance:{self.employee_id}")
