from .base import *  # noqa: F401,F403

SECRET_KEY = "test-secret"
QR_SECRET_SALT = "test-qr-salt"

DEBUG = False
TESTING = True

AUTO_INIT_DB = False

SMS_ENABLED = True
SMS_MOCK_MODE = True
SMS_RETRY_DELAY_SECONDS = 0.0
