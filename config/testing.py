import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "coaching_center_test"),
}

DEBUG = False
TESTING = True

AUTO_INIT_DB = False

# Tests drive the sweep through run_once().
SWEEP_INTERVAL_SECONDS = 0
MAX_ATTENDANCE_RECORDS = 500

LOG_LEVEL = "WARNING"
JSON_LOGS = False
