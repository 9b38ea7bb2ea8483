# file: LISTINGS/core/config.py
import os

# ==============================
# Categories
# ==============================
# Each category maps to its own Firestore collection and a placeholder
# image shown on cards without an uploaded picture.
COLLECTIONS = {
    "food": "foods",
    "house": "houses",
    "market": "markets",
}

PLACEHOLDER_IMAGES = {
    "food": "/static/food.svg",
    "house": "/static/house.svg",
    "market": "/static/market.svg",
}

DEFAULT_CATEGORY = "food"

# ==============================
# Store Settings
# ==============================
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID", "listings-site")
CREDENTIAL_SOURCE = os.getenv("GOOGLE_APPLICATION_CREDENTIALS")
STORE_TIMEOUT_SEC = float(os.getenv("STORE_TIMEOUT_SEC", "10"))

# ==============================
# HTTP Settings
# ==============================
PORT = int(os.getenv("PORT", "8080"))
UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
UPLOAD_URL_PREFIX = "uploads"  # public mount path for UPLOAD_DIR
PUBLIC_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "public")
STATIC_URL_PREFIX = "static"  # public mount path for PUBLIC_DIR
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

CREATE_RATE_LIMIT = os.getenv("CREATE_RATE_LIMIT", "30/minute")
RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() in {"1", "true", "yes"}

# ==============================
# Logging
# ==============================
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CLOUD_LOGGING = os.getenv("CLOUD_LOGGING", "false").lower() in {"1", "true", "yes"}
