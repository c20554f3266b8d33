from .base import *  # noqa: F401,F403

SECRET_KEY = "test-secret"
ADMIN_LOGIN = "admin"
ADMIN_PASSWORD = "adminpassword"

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
LOG_LEVEL = "WARNING"
S3_BUCKET = None
