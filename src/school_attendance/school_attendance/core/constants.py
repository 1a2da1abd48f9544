"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

SCHEMA_VERSION = 6

DEFAULT_ON_TIME_DEADLINE = "07:30"
DEFAULT_ADMIN_PASSWORD = "admin123"
DEFAULT_SCHOOL_NAME = "SMA NEGERI 1 PULAU BANYAK BARAT"
MIN_PASSWORD_LENGTH = 6

ADMIN_USERNAME = "admin"

# Pseudo-subject used for whole-school (gate) attendance.
SCHOOL_ATTENDANCE_SUBJECT = "-- Kehadiran Sekolah --"

SUBJECTS = (
    SCHOOL_ATTENDANCE_SUBJECT,
    "Pendidikan Agama & Budi Pekerti",
    "Pendidikan Pancasila",
    "Bahasa Indonesia",
    "Matematika",
    "Bahasa Inggris",
    "Pendidikan Jasmani, Olahraga & Kesehatan (PJOK)",
    "Sejarah",
    "Seni Budaya",
    "Prakarya & Kewirausahaan (PKWU)",
    "Informatika",
    "Biologi",
    "Fisika",
    "Kimia",
    "Matematika Tingkat Lanjut",
    "Sosiologi",
    "Ekonomi",
    "Geografi",
    "Antropologi",
)

CLASSES = (
    "X", "X-A", "X-B", "X-C", "X-D",
    "XI", "XI-A", "XI-B", "XI-C", "XI-D",
    "XII", "XII-A", "XII-B", "XII-C", "XII-D",
)

# Settings keys
SETTING_ADMIN_PASSWORD = "adminPassword"
SETTING_ADMIN_PROFILE = "adminProfile"
SETTING_SCHOOL_LIST = "schoolList"
SETTING_ATTENDANCE_ENABLED_PREFIX = "attendance_enabled_"
SETTING_ON_TIME_DEADLINE_PREFIX = "on_time_deadline_"
