import logging
import os
from typing import List

from dotenv import load_dotenv

load_dotenv()

# Credential header read by the auth gate (not the standard Authorization header)
API_TOKEN_HEADER = "api-token"

USER_ID_LENGTH = 8
NOTE_ID_LENGTH = 8
TOKEN_LENGTH = 24

# Password hashing cost factor
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "5"))

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))


# PUBLIC_INTERFACE
def get_log_level() -> int:
    """Numeric level for LOG_LEVEL; unknown names fall back to INFO."""
    level = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


# PUBLIC_INTERFACE
def get_cors_origins() -> List[str]:
    """Splits the comma-separated CORS_ORIGINS variable."""
    raw = os.getenv("CORS_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]
