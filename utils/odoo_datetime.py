"""
utils/odoo_datetime.py
-----------------
Odoo stores datetimes as naive UTC strings ("YYYY-MM-DD HH:MM:SS").
"""

from datetime import datetime, timedelta, timezone

ODOO_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def utc_now():
    return datetime.now(timezone.utc)


def as_utc(value):
    """Aware UTC datetime; naive values (as read back from MongoDB) are taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_odoo_datetime(value):
    """Format a datetime as Odoo's UTC string, without fractional seconds.

    Naive datetimes are taken as local time of this process.
    """
    utc = value.astimezone(timezone.utc)
    # strftime does not zero-pad years below 1000 on every platform
    return (
        f"{utc.year:04d}-{utc.month:02d}-{utc.day:02d} "
        f"{utc.hour:02d}:{utc.minute:02d}:{utc.second:02d}"
    )


def parse_odoo_datetime(value):
    """Parse an Odoo datetime string into an aware UTC datetime.

    Returns None for empty values (Odoo sends False for unset fields).
    """
    if not value:
        return None
    if isinstance(value, datetime):
        return as_utc(value)
    text = str(value).strip().split(".")[0]
    return datetime.strptime(text, ODOO_DATETIME_FORMAT).replace(tzinfo=timezone.utc)


def local_day_start(now=None):
    """Midnight of the current local day, as an aware datetime."""
    now = (now or datetime.now()).astimezone()
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def elapsed_since(start, now=None):
    if start is None:
        return timedelta(0)
    now = now or utc_now()
    delta = now - start
    if delta < timedelta(0):
        return timedelta(0)
    return delta


def format_duration(duration):
    """HH:MM:SS, hours are not wrapped at 24."""
    total = int(duration.total_seconds()) if isinstance(duration, timedelta) else int(duration)
    total = max(total, 0)
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def format_local_time(value):
    """Clock time (HH:MM:SS) of an aware datetime in local time, '--:--:--' if missing."""
    if value is None:
        return "--:--:--"
    return value.astimezone().strftime("%H:%M:%S")
