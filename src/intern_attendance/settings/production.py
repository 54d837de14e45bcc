import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "intern_attendance"),
}

ORG_TIMEZONE = os.getenv("ORG_TIMEZONE", "Asia/Manila")

WORKING_HOURS = {
    "start": os.getenv("WORKDAY_START", "07:00"),
    "break_start": os.getenv("BREAK_START", "11:00"),
    "break_end": os.getenv("BREAK_END", "13:00"),
    "end": os.getenv("WORKDAY_END", "19:00"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
