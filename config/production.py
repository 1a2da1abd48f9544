import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "path": os.getenv("DB_PATH", "instance/absensi.sqlite3"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DEFAULT_SCHOOL_NAME = os.getenv("DEFAULT_SCHOOL_NAME", "SMA NEGERI 1 PULAU BANYAK BARAT")
DEFAULT_ADMIN_PASSWORD = os.getenv("DEFAULT_ADMIN_PASSWORD", "admin123")
ON_TIME_DEADLINE = os.getenv("ON_TIME_DEADLINE", "07:30")

AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
