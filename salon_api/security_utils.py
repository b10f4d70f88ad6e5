"""
Security utilities: password hashing, access tokens and Telegram link codes
"""

import logging
import secrets
import string
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import jwt as jose_jwt
from passlib.context import CryptContext

from .config import JWT_ALGORITHM, JWT_EXPIRE_HOURS, SECRET_KEY

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

LINK_CODE_ALPHABET = string.ascii_uppercase + string.digits
LINK_CODE_LENGTH = 6


# ============================================================================
# PASSWORD SECURITY
# ============================================================================


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against bcrypt hash"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError) as e:
        logger.error(f"Password verification error: {e}")
        return False


# ============================================================================
# ACCESS TOKENS
# ============================================================================


def create_access_token(user_id: int, email: str, role: str) -> str:
    """Issue a signed JWT for the given user"""
    expire = datetime.now(timezone.utc) + timedelta(hours=JWT_EXPIRE_HOURS)
    claims = {"sub": str(user_id), "email": email, "role": role, "exp": expire}
    return jose_jwt.encode(claims, SECRET_KEY, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode and verify a JWT. Raises jose.JWTError on any failure, including expiry."""
    return jose_jwt.decode(token, SECRET_KEY, algorithms=[JWT_ALGORITHM])


# ============================================================================
# TELEGRAM LINK CODES
# ============================================================================


def generate_link_code() -> str:
    """Six uppercase letters/digits, the format the bot recognises"""
    return "".join(secrets.choice(LINK_CODE_ALPHABET) for _ in range(LINK_CODE_LENGTH))
