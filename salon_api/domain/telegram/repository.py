"""Telegram link repository"""

from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...database import transaction
from ...errors import translate_db_error
from ...models import TelegramLink, User


class TelegramLinkRepository:
    @staticmethod
    def replace_link_code(db: Session, user_id: int, code: str, expires_at: datetime) -> TelegramLink:
        """Drop the user's previous codes and store a fresh one"""
        link = TelegramLink(user_id=user_id, link_code=code, expires_at=expires_at)
        try:
            with transaction(db):
                db.query(TelegramLink).filter(TelegramLink.user_id == user_id).delete(
                    synchronize_session=False
                )
                db.add(link)
        except SQLAlchemyError as e:
            raise translate_db_error(e, "Telegram link") from e
        db.refresh(link)
        return link

    @staticmethod
    def get_active_link(db: Session, code: str, now: datetime) -> Optional[TelegramLink]:
        return (
            db.query(TelegramLink)
            .filter(TelegramLink.link_code == code, TelegramLink.expires_at > now)
            .first()
        )

    @staticmethod
    def verify_link(
        db: Session,
        link: TelegramLink,
        telegram_id: str,
        telegram_username: Optional[str],
        now: datetime,
    ) -> User:
        """Mark the link verified and copy the identity onto the user, both or neither"""
        try:
            with transaction(db):
                link.is_verified = True
                link.telegram_id = telegram_id
                link.telegram_username = telegram_username
                link.verified_at = now

                user = db.get(User, link.user_id)
                user.telegram_id = telegram_id
                user.telegram_username = telegram_username
        except SQLAlchemyError as e:
            raise translate_db_error(e, "Telegram link") from e
        return user

    @staticmethod
    def unlink_user(db: Session, user: User) -> None:
        try:
            with transaction(db):
                db.query(TelegramLink).filter(TelegramLink.user_id == user.id).delete(
                    synchronize_session=False
                )
                user.telegram_id = None
                user.telegram_username = None
        except SQLAlchemyError as e:
            raise translate_db_error(e, "Telegram link") from e
