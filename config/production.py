import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "ojt_attendance"),
}

STORE_BACKEND = os.getenv("STORE_BACKEND", "mysql")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

SITE_LAT = float(os.getenv("SITE_LAT", "14.605213"))
SITE_LNG = float(os.getenv("SITE_LNG", "121.048929"))
SITE_RADIUS_METERS = float(os.getenv("SITE_RADIUS_METERS", "800"))
TARGET_HOURS = float(os.getenv("TARGET_HOURS", "486"))
