"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DEFAULT_WORK_START = time(8, 0)
DEFAULT_WORK_END = time(17, 0)
DEFAULT_BREAK_START = time(12, 0)
DEFAULT_BREAK_END = time(13, 0)

DEFAULT_GRACE_MINUTES = 30
DEFAULT_DEBOUNCE_MINUTES = 5

# Fixed lunch window used only when estimating requested leave hours.
LEAVE_LUNCH_START = time(12, 0)
LEAVE_LUNCH_END = time(13, 0)

PIN_LENGTH = 6
DEFAULT_RECENT_PUNCHES = 5
DEFAULT_LIST_LIMIT = 200

EARTH_RADIUS_METERS = 6_371_000
DEFAULT_LOCATION_NAME = "Default location"
DEFAULT_LOCATION_LATITUDE = 25.0330
DEFAULT_LOCATION_LONGITUDE = 121.5654
DEFAULT_LOCATION_RADIUS_METERS = 100
DEFAULT_GEOLOCATION_TIMEOUT_MS = 10_000

# Leave types whose days count as a full working day when nobody punched.
FULL_DAY_CREDIT_LEAVE_CODES = frozenset({"BUSINESS_TRIP", "OFFICIAL_LEAVE"})
FULL_DAY_CREDIT_HOURS = 8.0

UNASSIGNED_DEPARTMENT = "Unassigned"
