"""Client repository - aggregate queries over users and their bookings"""

from typing import Any, Optional

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from ...models import Booking, BookingStatus, User, UserRole


def _status_count(status: BookingStatus):
    return func.sum(case((Booking.status == status.value, 1), else_=0))


class ClientRepository:
    @staticmethod
    def get_clients(db: Session) -> list[tuple[User, int, Any]]:
        """Clients with (user, total_bookings, last_booking), ordered by name"""
        return (
            db.query(
                User,
                func.count(Booking.id).label("total_bookings"),
                func.max(Booking.created_at).label("last_booking"),
            )
            .outerjoin(Booking, Booking.user_id == User.id)
            .filter(User.role == UserRole.CLIENT.value)
            .group_by(User.id)
            .order_by(User.name, User.surname)
            .all()
        )

    @staticmethod
    def get_client_details(db: Session, user_id: int) -> Optional[tuple]:
        """(user, total, completed, pending, last_booking) or None"""
        return (
            db.query(
                User,
                func.count(Booking.id).label("total_bookings"),
                _status_count(BookingStatus.COMPLETED).label("completed_bookings"),
                _status_count(BookingStatus.PENDING).label("pending_bookings"),
                func.max(Booking.created_at).label("last_booking"),
            )
            .outerjoin(Booking, Booking.user_id == User.id)
            .filter(User.id == user_id, User.role == UserRole.CLIENT.value)
            .group_by(User.id)
            .first()
        )
