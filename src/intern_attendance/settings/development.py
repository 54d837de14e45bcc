import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "intern_attendance"),
}

# Calendar days and clock-ins are taken in the organization's timezone
ORG_TIMEZONE = os.getenv("ORG_TIMEZONE", "Asia/Manila")

WORKING_HOURS = {
    "start": os.getenv("WORKDAY_START", "07:00"),
    "break_start": os.getenv("BREAK_START", "11:00"),
    "break_end": os.getenv("BREAK_END", "13:00"),
    "end": os.getenv("WORKDAY_END", "19:00"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
