"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
Settings modules may override the site and target values.
"""

# J23X+XHW San Juan City, Metro Manila
SITE_LAT = 14.605213
SITE_LNG = 121.048929
SITE_RADIUS_METERS = 800.0

EARTH_RADIUS_METERS = 6_371_000.0

GEOLOCATION_TIMEOUT_SECONDS = 10.0

DEFAULT_TARGET_HOURS = 486
WEEKLY_WINDOW_DAYS = 7

ATTENDANCE_HISTORY_LIMIT = 60
PROGRESS_HISTORY_LIMIT = 120

LIVE_REFRESH_SECONDS = 1
STATUS_REFRESH_SECONDS = 60

TRANSIENT_ERROR_DISMISS_MS = 3000
