SECRET_KEY = "test-secret"

DB_CONFIG = {
    "path": ":memory:",
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

DEFAULT_SCHOOL_NAME = "SMA NEGERI 1 PULAU BANYAK BARAT"
DEFAULT_ADMIN_PASSWORD = "admin123"
ON_TIME_DEADLINE = "07:30"

AUTO_SEED_DB = True
