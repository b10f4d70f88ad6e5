"""Booking repository - the booking store queries"""

from datetime import date
from typing import Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ...database import transaction
from ...errors import translate_db_error
from ...models import Booking


class BookingRepository:
    """Repository for booking database operations"""

    @staticmethod
    def bookings_on_date(db: Session, booking_date: date) -> list[Booking]:
        """Every booking on the date regardless of status, with its service loaded"""
        return (
            db.query(Booking)
            .options(joinedload(Booking.service))
            .filter(Booking.booking_date == booking_date)
            .order_by(Booking.booking_time)
            .all()
        )

    @staticmethod
    def get_booking(db: Session, booking_id: int) -> Optional[Booking]:
        return (
            db.query(Booking)
            .options(joinedload(Booking.service), joinedload(Booking.user))
            .filter(Booking.id == booking_id)
            .first()
        )

    @staticmethod
    def get_user_bookings(db: Session, user_id: int) -> list[Booking]:
        return (
            db.query(Booking)
            .options(joinedload(Booking.service))
            .filter(Booking.user_id == user_id)
            .order_by(Booking.booking_date.desc(), Booking.booking_time.desc())
            .all()
        )

    @staticmethod
    def get_all_bookings(db: Session) -> list[Booking]:
        return (
            db.query(Booking)
            .options(joinedload(Booking.service), joinedload(Booking.user))
            .order_by(Booking.booking_date.desc(), Booking.booking_time.desc())
            .all()
        )

    @staticmethod
    def lock_date(db: Session, booking_date: date) -> None:
        """Serialize booking writes for one date until the transaction ends (PostgreSQL only)"""
        if db.get_bind().dialect.name == "postgresql":
            db.execute(text("SELECT pg_advisory_xact_lock(:key)"), {"key": booking_date.toordinal()})

    @staticmethod
    def add_booking(db: Session, **kwargs) -> Booking:
        """Stage a booking in the caller's transaction and flush it to get an id"""
        booking = Booking(**kwargs)
        db.add(booking)
        db.flush()
        return booking

    @staticmethod
    def update_status(db: Session, booking: Booking, status: str) -> Booking:
        try:
            with transaction(db):
                booking.status = status
        except SQLAlchemyError as e:
            raise translate_db_error(e, "Booking") from e
        db.refresh(booking)
        return booking

    @staticmethod
    def delete_booking(db: Session, booking: Booking) -> None:
        try:
            with transaction(db):
                db.delete(booking)
        except SQLAlchemyError as e:
            raise translate_db_error(e, "Booking") from e
