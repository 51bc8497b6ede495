import os
from pathlib import Path

# -----------------------
# Configuration (env)
# -----------------------
BASE_DIR = Path(__file__).parent.parent.resolve()

API_VERSION = os.environ.get("INSTA_API_VERSION", "/api/v1").rstrip("/")

SECRET_KEY = os.environ.get("INSTA_SECRET_KEY", None)
if not SECRET_KEY:
    # In production this MUST be set. For dev only fallback:
    SECRET_KEY = "please_set_INSTA_SECRET_KEY_in_env"
RESET_SECRET_KEY = os.environ.get("INSTA_RESET_SECRET_KEY", "please_set_INSTA_RESET_SECRET_KEY_in_env")
JWT_ALGORITHM = os.environ.get("INSTA_JWT_ALGORITHM", "HS256")
JWT_EXP_SECONDS = int(os.environ.get("INSTA_JWT_EXP_SECONDS", 60 * 60 * 24))  # default 1 day

MONGO_URL = os.environ.get("INSTA_MONGO_URL", "mongodb://localhost:27017")
DB_NAME = os.environ.get("INSTA_DB_NAME", "InstaClone_Db")

CLOUD_NAME = os.environ.get("INSTA_CLOUD_NAME", "")
CLOUD_API_KEY = os.environ.get("INSTA_CLOUD_API_KEY", "")
CLOUD_API_SECRET = os.environ.get("INSTA_CLOUD_API_SECRET", "")

UPLOAD_FOLDER = os.environ.get("INSTA_UPLOAD_FOLDER", str(BASE_DIR / "public" / "temp"))
MAX_CONTENT_LENGTH = int(os.environ.get("INSTA_MAX_CONTENT_LENGTH", 55 * 1024 * 1024))  # 10 images x 5 MB + form
MAX_IMAGE_SIZE = 5 * 1024 * 1024
MAX_POST_IMAGES = 10

CORS_ORIGINS = os.environ.get("INSTA_CORS_ORIGINS", "*")  # set to origin(s) in prod
SOCKET_CORS_ORIGINS = os.environ.get("INSTA_SOCKET_CORS_ORIGINS", "http://localhost:5173")
COOKIE_SECURE = os.environ.get("INSTA_COOKIE_SECURE", "1") == "1"

SUGGESTED_USERS_LIMIT = int(os.environ.get("INSTA_SUGGESTED_USERS_LIMIT", 10))
LOG_LEVEL = os.environ.get("INSTA_LOG_LEVEL", "INFO")

# Pagination limits
DEFAULT_PAGE_LIMIT = 20
MAX_PAGE_LIMIT = 100


def defaults() -> dict:
    """Settings loaded into ``app.config`` before any overrides."""
    return {
        "API_VERSION": API_VERSION,
        "SECRET_KEY": SECRET_KEY,
        "RESET_SECRET_KEY": RESET_SECRET_KEY,
        "JWT_ALGORITHM": JWT_ALGORITHM,
        "JWT_EXP_SECONDS": JWT_EXP_SECONDS,
        "MONGO_URL": MONGO_URL,
        "DB_NAME": DB_NAME,
        "CLOUD_NAME": CLOUD_NAME,
        "CLOUD_API_KEY": CLOUD_API_KEY,
        "CLOUD_API_SECRET": CLOUD_API_SECRET,
        "UPLOAD_FOLDER": UPLOAD_FOLDER,
        "MAX_CONTENT_LENGTH": MAX_CONTENT_LENGTH,
        "MAX_IMAGE_SIZE": MAX_IMAGE_SIZE,
        "MAX_POST_IMAGES": MAX_POST_IMAGES,
        "CORS_ORIGINS": CORS_ORIGINS,
        "SOCKET_CORS_ORIGINS": SOCKET_CORS_ORIGINS,
        "COOKIE_SECURE": COOKIE_SECURE,
        "SUGGESTED_USERS_LIMIT": SUGGESTED_USERS_LIMIT,
        "LOG_LEVEL": LOG_LEVEL,
    }
