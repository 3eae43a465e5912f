"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_METERS = 6_371_000
DEFAULT_GEO_RADIUS_METERS = 500

# date.weekday(): Monday=0 ... Sunday=6
NON_WORKING_WEEKDAY = 6

HALF_DAY_HOURS_THRESHOLD = 4
DEFAULT_PERSONAL_HOLIDAY_QUOTA = 3

DEFAULT_SLIP_LIMIT = 24
OUT_OF_RANGE_SCAN_LIMIT = 50
