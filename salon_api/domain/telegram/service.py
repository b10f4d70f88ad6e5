"""Telegram account linking

A signed-in user asks for a short code, sends it to the bot, and the bot
calls back with the chat identity. Codes expire after
LINK_CODE_TTL_MINUTES and each new request replaces the user's older codes.
"""

import logging
from datetime import datetime, timedelta, timezone

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...config import LINK_CODE_TTL_MINUTES
from ...errors import ConstraintViolation
from ...models import User
from ...security_utils import generate_link_code
from .repository import TelegramLinkRepository
from .schemas import VerifyLinkRequest

logger = logging.getLogger(__name__)

MAX_CODE_ATTEMPTS = 5


def utcnow() -> datetime:
    # Stored timestamps are naive UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TelegramLinkService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = TelegramLinkRepository()

    def create_link_code(self, user: User) -> dict:
        expires_at = utcnow() + timedelta(minutes=LINK_CODE_TTL_MINUTES)
        for attempt in range(1, MAX_CODE_ATTEMPTS + 1):
            code = generate_link_code()
            try:
                self.repo.replace_link_code(self.db, user.id, code, expires_at)
            except ConstraintViolation:
                logger.warning(f"⚠️ Link code collision on attempt {attempt}, retrying")
                continue
            logger.info(f"✅ Telegram link created for user {user.id}")
            return {"linkCode": code}

        logger.error(f"❌ Could not allocate a unique link code for user {user.id}")
        raise HTTPException(status_code=500, detail="Failed to create link code")

    def check_link(self, code: str) -> dict:
        link = self.repo.get_active_link(self.db, code.upper(), utcnow())
        if link and link.is_verified:
            logger.info(f"✅ Telegram link verified: {code}")
            return {
                "linked": True,
                "telegramId": link.telegram_id,
                "telegramUsername": link.telegram_username,
            }
        return {"linked": False}

    def verify_link(self, data: VerifyLinkRequest) -> dict:
        now = utcnow()
        link = self.repo.get_active_link(self.db, data.code, now)
        if not link:
            logger.warning(f"⚠️ Unknown or expired link code: {data.code}")
            raise HTTPException(status_code=404, detail="Link code not found or expired")
        if link.is_verified:
            logger.warning(f"⚠️ Link code already used: {data.code}")
            raise HTTPException(status_code=409, detail="Link code has already been used")

        user = self.repo.verify_link(self.db, link, data.telegramId, data.telegramUsername, now)
        logger.info(f"✅ Telegram account linked: {data.telegramId} -> user {user.id}")
        return {
            "userId": user.id,
            "telegramId": data.telegramId,
            "telegramUsername": data.telegramUsername,
        }

    def unlink(self, user: User) -> dict:
        self.repo.unlink_user(self.db, user)
        logger.info(f"✅ Telegram unlinked for user: {user.id}")
        return {"success": True}
