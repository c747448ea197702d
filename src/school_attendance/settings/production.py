import os

from .base import *  # noqa: F401,F403

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")
QR_SECRET_SALT = os.getenv("QR_SECRET_SALT", "please-set-QR_SECRET_SALT")

DEBUG = False

# Mock delivery is a non-production path only.
SMS_MOCK_MODE = False
