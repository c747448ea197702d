"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
Every value can be overridden from the settings module.
"""

DEFAULT_SCHOOL_TIMEZONE = "Asia/Manila"
DEFAULT_GRACE_PERIOD_SECONDS = 60

DEFAULT_LATE_THRESHOLD_MINUTES = 70
DEFAULT_LATE_WARNING_CRITICAL_MINUTES = 15
DEFAULT_LATE_WARNING_MODERATE_MINUTES = 30

DEFAULT_ABSENCE_STREAK_DAYS = 3
DEFAULT_ABSENCE_LOOKBACK_DAYS = 31
DEFAULT_NOTIFICATION_LIMIT = 20

QR_HASH_LENGTH = 16
QR_CHECKSUM_LENGTH = 8

DEFAULT_SMS_API_URL = "https://dashboard.philsms.com/api/v3/sms/send"
DEFAULT_SMS_SENDER_ID = "RizalHigh"
DEFAULT_SMS_TIMEOUT_SECONDS = 5.0
DEFAULT_SMS_RETRY_ATTEMPTS = 1
DEFAULT_SMS_RETRY_DELAY_SECONDS = 30.0
DEFAULT_SMS_WORKERS = 2
SMS_SEGMENT_LENGTH = 160
