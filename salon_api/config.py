import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


def _int_env(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid integer for {name}: {raw!r}") from None


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./salon.db")

# Security - JWT_SECRET is accepted as an alias for SECRET_KEY
SECRET_KEY = os.getenv("SECRET_KEY") or os.getenv("JWT_SECRET")
if not SECRET_KEY:
    import warnings

    warnings.warn(
        "SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2
    )
    SECRET_KEY = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"  # noqa: S105 - Dev fallback only

JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRE_HOURS = _int_env("JWT_EXPIRE_HOURS", "24")

# Daily booking grid. End hour is exclusive: 9..18 yields 09:00..17:30
SLOT_START_HOUR = _int_env("SLOT_START_HOUR", "9")
SLOT_END_HOUR = _int_env("SLOT_END_HOUR", "18")
SLOT_STEP_MINUTES = _int_env("SLOT_STEP_MINUTES", "30")
BOOKING_BUFFER_MINUTES = _int_env("BOOKING_BUFFER_MINUTES", "30")  # Cleanup/prep after each visit
DEFAULT_SERVICE_DURATION = _int_env("DEFAULT_SERVICE_DURATION", "60")

# Telegram
TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN")
TELEGRAM_BOT_SECRET = os.getenv("TELEGRAM_BOT_SECRET")  # Shared with the bot process for /telegram/verify
TELEGRAM_API_URL = os.getenv("TELEGRAM_API_URL", "https://api.telegram.org")
LINK_CODE_TTL_MINUTES = _int_env("LINK_CODE_TTL_MINUTES", "60")

ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS",
    "http://localhost:3000,http://localhost:3001,http://localhost:5173,http://localhost:5174,http://127.0.0.1:3000,http://127.0.0.1:5173",
).split(",")

# Reverse proxies whose X-Forwarded-For header is trusted (comma-separated IPs)
TRUSTED_PROXIES = [ip.strip() for ip in os.getenv("TRUSTED_PROXIES", "").split(",") if ip.strip()]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
