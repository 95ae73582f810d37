"""
services/geo_capability.py
-----------------
Whether the Odoo schema accepts latitude/longitude on hr.attendance.

Discovered lazily: a flag starts UNKNOWN (treated as supported) and is
downgraded to UNSUPPORTED for good the first time the server rejects a geo
field by name.
"""

import logging
import threading
from enum import Enum

_logger = logging.getLogger(__name__)


class GeoCapability(Enum):
    UNKNOWN = "unknown"
    SUPPORTED = "supported"
    UNSUPPORTED = "unsupported"


class GeoCapabilityFlag:

    def __init__(self, state=GeoCapability.UNKNOWN):
        self._state = state
        self._lock = threading.Lock()

    @property
    def state(self):
        return self._state

    def allows_geo(self):
        return self._state is not GeoCapability.UNSUPPORTED

    def mark_supported(self):
        # Only promotes from UNKNOWN; an UNSUPPORTED flag stays downgraded.
        with self._lock:
            if self._state is GeoCapability.UNKNOWN:
                self._state = GeoCapability.SUPPORTED
                return True
            return False

    def downgrade(self):
        """Set UNSUPPORTED. Returns True if this call changed the state."""
        with self._lock:
            if self._state is GeoCapability.UNSUPPORTED:
                return False
            self._state = GeoCapability.UNSUPPORTED
            return True

    def __repr__(self):
        return f"<GeoCapabilityFlag {self._state.value}>"


class GeoCapabilityRegistry:
    """One flag per (server url, database), kept for the process lifetime."""

    def __init__(self):
        self._flags = {}
        self._lock = threading.Lock()

    def for_server(self, base_url, database):
        key = ((base_url or "").rstrip("/"), database or "")
        with self._lock:
            flag = self._flags.get(key)
            if flag is None:
                flag = GeoCapabilityFlag()
                self._flags[key] = flag
                _logger.debug("New geo capability flag for %s/%s", *key)
            return flag

    def reset(self):
        with self._lock:
            self._flags.clear()
