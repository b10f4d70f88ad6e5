"""User repository - Database access layer"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...database import transaction
from ...errors import translate_db_error
from ...models import User, UserRole


class UserRepository:
    """Repository for user database operations"""

    @staticmethod
    def get_by_id(db: Session, user_id: int) -> Optional[User]:
        return db.get(User, user_id)

    @staticmethod
    def get_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

    @staticmethod
    def get_by_phone(db: Session, phone: str) -> Optional[User]:
        return db.query(User).filter(User.phone == phone).first()

    @staticmethod
    def get_by_phone_or_email(db: Session, phone_or_email: str) -> Optional[User]:
        return (
            db.query(User)
            .filter(or_(User.phone == phone_or_email, User.email == phone_or_email.lower()))
            .first()
        )

    @staticmethod
    def create_user(db: Session, **kwargs) -> User:
        user = User(**kwargs)
        try:
            with transaction(db):
                db.add(user)
        except SQLAlchemyError as e:
            raise translate_db_error(e, "User") from e
        db.refresh(user)
        return user

    @staticmethod
    def get_admin_chat_ids(db: Session) -> list[str]:
        """Telegram chat ids of every admin that has linked an account"""
        rows = (
            db.query(User.telegram_id)
            .filter(User.role == UserRole.ADMIN.value, User.telegram_id.isnot(None))
            .all()
        )
        return [row.telegram_id for row in rows]
