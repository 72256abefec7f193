"""
Process configuration, read once at startup.

Only the identity provider URL and its public API key drive behavior; the
rest are server knobs.
"""
import os
from typing import List

from dotenv import load_dotenv

from authgate.core.secrets import get_secret_value

load_dotenv()

DEFAULT_ALLOWED_ORIGINS = "http://localhost:3000,http://localhost:5173"


def get_supabase_url() -> str:
    url = os.getenv("SUPABASE_URL")
    if not url:
        raise RuntimeError("SUPABASE_URL is not set")
    return url.rstrip("/")


def get_supabase_key() -> str:
    """
    Public (anon) API key of the identity provider.

    SUPABASE_KEY wins when set; otherwise SUPABASE_KEY_NAME is resolved
    through Secret Manager.
    """
    key = os.getenv("SUPABASE_KEY")
    if key:
        return key

    key_name = os.getenv("SUPABASE_KEY_NAME")
    if not key_name:
        raise RuntimeError("SUPABASE_KEY or SUPABASE_KEY_NAME must be set")
    return get_secret_value(key_name)


def get_allowed_origins() -> List[str]:
    raw = os.getenv("ALLOWED_ORIGINS", DEFAULT_ALLOWED_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()


def get_port() -> int:
    return int(os.getenv("PORT", "3000"))
