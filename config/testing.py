SECRET_KEY = "test-secret"

DB_CONFIG = None
STORE_BACKEND = "memory"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False

SITE_LAT = 14.605213
SITE_LNG = 121.048929
SITE_RADIUS_METERS = 800.0
TARGET_HOURS = 486.0
