import hmac
import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from .config import TELEGRAM_BOT_SECRET
from .database import get_db
from .models import User
from .security_utils import decode_access_token

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the caller from the Bearer token"""
    if not credentials:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
        )

    try:
        payload = decode_access_token(credentials.credentials)
    except JWTError as e:
        logger.warning(f"⚠️ Token rejected: {e}")
        raise HTTPException(status_code=401, detail="Invalid or expired token") from e

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        logger.error(f"❌ Token missing user ID claim. Available claims: {list(payload.keys())}")
        raise HTTPException(status_code=401, detail="Invalid token claims") from None

    user = db.get(User, user_id)
    if not user:
        logger.warning(f"⚠️ Token for unknown user {user_id}")
        raise HTTPException(status_code=401, detail="User not found")

    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        logger.warning(f"⚠️ User {user.id} attempted to access an admin route")
        raise HTTPException(status_code=403, detail="Access denied")
    return user


async def verify_bot_secret(
    x_telegram_bot_secret: Optional[str] = Header(None),
) -> None:
    """Authenticate calls made by the Telegram bot process"""
    if not TELEGRAM_BOT_SECRET:
        raise HTTPException(status_code=503, detail="Telegram bot integration is not configured")
    if not x_telegram_bot_secret or not hmac.compare_digest(
        x_telegram_bot_secret, TELEGRAM_BOT_SECRET
    ):
        logger.warning("⚠️ Invalid Telegram bot secret")
        raise HTTPException(status_code=401, detail="Invalid bot secret")
