import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "ojt_attendance"),
}

# mysql | memory
STORE_BACKEND = os.getenv("STORE_BACKEND", "mysql")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will create the attendance tables on startup (idempotent)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

SITE_LAT = float(os.getenv("SITE_LAT", "14.605213"))
SITE_LNG = float(os.getenv("SITE_LNG", "121.048929"))
SITE_RADIUS_METERS = float(os.getenv("SITE_RADIUS_METERS", "800"))
TARGET_HOURS = float(os.getenv("TARGET_HOURS", "486"))
