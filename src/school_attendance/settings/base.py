"""Settings shared by every environment (values come from the process env)."""
import os

from ..core import constants
from . import env_flag

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_attendance"),
}

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = env_flag("AUTO_INIT_DB")

# QR signing salt: printed codes stop resolving if this changes.
QR_SECRET_SALT = os.getenv("QR_SECRET_SALT", "dev-qr-salt-change-me")

SCHOOL_TIMEZONE = os.getenv("SCHOOL_TIMEZONE", constants.DEFAULT_SCHOOL_TIMEZONE)
GRACE_PERIOD_SECONDS = int(os.getenv("GRACE_PERIOD_SECONDS", str(constants.DEFAULT_GRACE_PERIOD_SECONDS)))

LATE_THRESHOLD_MINUTES = int(os.getenv("LATE_THRESHOLD_MINUTES", str(constants.DEFAULT_LATE_THRESHOLD_MINUTES)))
LATE_WARNING_CRITICAL_MINUTES = int(
    os.getenv("LATE_WARNING_CRITICAL_MINUTES", str(constants.DEFAULT_LATE_WARNING_CRITICAL_MINUTES))
)
LATE_WARNING_MODERATE_MINUTES = int(
    os.getenv("LATE_WARNING_MODERATE_MINUTES", str(constants.DEFAULT_LATE_WARNING_MODERATE_MINUTES))
)
ABSENCE_STREAK_DAYS = int(os.getenv("ABSENCE_STREAK_DAYS", str(constants.DEFAULT_ABSENCE_STREAK_DAYS)))

# PhilSMS provider
SMS_API_URL = os.getenv("PHILSMS_API_URL", constants.DEFAULT_SMS_API_URL)
SMS_API_TOKEN = os.getenv("PHILSMS_API_TOKEN", "")
SMS_SENDER_ID = os.getenv("PHILSMS_SENDER_ID", constants.DEFAULT_SMS_SENDER_ID)
SMS_TIMEOUT_SECONDS = float(os.getenv("SMS_TIMEOUT_SECONDS", str(constants.DEFAULT_SMS_TIMEOUT_SECONDS)))
SMS_ENABLED = env_flag("PHILSMS_ENABLED")
SMS_MOCK_MODE = env_flag("PHILSMS_MOCK")
SMS_RETRY_ATTEMPTS = int(os.getenv("SMS_RETRY_ATTEMPTS", str(constants.DEFAULT_SMS_RETRY_ATTEMPTS)))
SMS_RETRY_DELAY_SECONDS = float(os.getenv("SMS_RETRY_DELAY_SECONDS", str(constants.DEFAULT_SMS_RETRY_DELAY_SECONDS)))
SMS_WORKERS = int(os.getenv("SMS_WORKERS", str(constants.DEFAULT_SMS_WORKERS)))
NOTIFICATION_LIMIT = int(os.getenv("NOTIFICATION_LIMIT", str(constants.DEFAULT_NOTIFICATION_LIMIT)))
