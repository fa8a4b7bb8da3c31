"""
Environment-driven settings for the card transfer service.

Values are read once at import time after loading an optional .env file.
"""

import os

from dotenv import find_dotenv, load_dotenv

load_dotenv(find_dotenv(usecwd=True), override=False)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL not set in environment or .env")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

SESSION_TIMEOUT_MINUTES = int(os.getenv("SESSION_TIMEOUT_MINUTES", "30"))
VERIFICATION_TTL_SECONDS = int(os.getenv("VERIFICATION_TTL_SECONDS", "300"))

# "fixed" hands out VERIFICATION_FIXED_CODE to everybody (reference fixture),
# "random" generates a fresh numeric code per login attempt.
VERIFICATION_CODE_MODE = os.getenv("VERIFICATION_CODE_MODE", "fixed").lower()
VERIFICATION_FIXED_CODE = os.getenv("VERIFICATION_FIXED_CODE", "12345")
VERIFICATION_CODE_LENGTH = int(os.getenv("VERIFICATION_CODE_LENGTH", "5"))

SEED_DEMO_DATA = _env_bool("SEED_DEMO_DATA", True)
SIMPLE_ADMIN_TOKEN = os.getenv("SIMPLE_ADMIN_TOKEN", "letmein")

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "9999"))
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
