"""Booking service - booking flow around the availability engine"""

import logging
from datetime import date
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...config import (
    BOOKING_BUFFER_MINUTES,
    DEFAULT_SERVICE_DURATION,
    SLOT_END_HOUR,
    SLOT_START_HOUR,
    SLOT_STEP_MINUTES,
)
from ...database import transaction
from ...errors import NotFoundError, translate_db_error
from ...models import Booking, BookingStatus, Service, User
from ...services.notification_service import BookingNotice
from ...shared.validators import parse_date
from ..catalog.repository import ServiceRepository
from ..scheduling.availability import (
    AvailabilityResult,
    ExistingBooking,
    SlotGrid,
    compute_available_slots,
)
from ..users.repository import UserRepository
from .repository import BookingRepository
from .schemas import BookingCreate

logger = logging.getLogger(__name__)


def default_slot_grid() -> SlotGrid:
    return SlotGrid(
        start_hour=SLOT_START_HOUR,
        end_hour=SLOT_END_HOUR,
        step_minutes=SLOT_STEP_MINUTES,
        buffer_minutes=BOOKING_BUFFER_MINUTES,
        default_duration=DEFAULT_SERVICE_DURATION,
    )


def serialize_booking(booking: Booking, include_user: bool = False) -> dict:
    data = {
        "id": booking.id,
        "user_id": booking.user_id,
        "service_id": booking.service_id,
        "booking_date": booking.booking_date.isoformat(),
        "booking_time": booking.booking_time,
        "status": booking.status,
        "comment": booking.comment,
        "telegram_notification": booking.telegram_notification,
        "created_at": booking.created_at.isoformat() if booking.created_at else None,
        "service_name": booking.service.name if booking.service else None,
        "service_price": booking.service.price if booking.service else None,
        "service_duration": booking.service.duration if booking.service else None,
    }
    if include_user and booking.user:
        data.update(
            {
                "user_name": booking.user.name,
                "user_surname": booking.user.surname,
                "user_email": booking.user.email,
                "user_phone": booking.user.phone,
            }
        )
    return data


def build_notice(booking: Booking, service: Service, user: User) -> BookingNotice:
    return BookingNotice(
        booking_id=booking.id,
        date=booking.booking_date.isoformat(),
        time=booking.booking_time,
        status=booking.status,
        comment=booking.comment,
        service_name=service.name,
        service_price=service.price,
        service_duration=service.duration,
        client_name=user.name,
        client_surname=user.surname,
        client_email=user.email,
        client_phone=user.phone,
        client_telegram_id=user.telegram_id,
        telegram_notification=booking.telegram_notification,
    )


class BookingService:
    """Service layer for booking business logic"""

    def __init__(self, db: Session, grid: Optional[SlotGrid] = None):
        self.db = db
        self.grid = grid or default_slot_grid()
        self.repo = BookingRepository()
        self.services = ServiceRepository()
        self.users = UserRepository()

    def _get_service(self, service_id: int) -> Service:
        service = self.services.get_service_by_id(self.db, service_id)
        if not service:
            raise NotFoundError("Service not found", entity="Service")
        return service

    def _compute(self, booking_date: date, service: Service) -> AvailabilityResult:
        day_bookings = self.repo.bookings_on_date(self.db, booking_date)
        active = [
            ExistingBooking(
                time=b.booking_time,
                duration_minutes=b.service.duration if b.service else None,
                status=b.status,
            )
            for b in day_bookings
            if b.status != BookingStatus.CANCELLED.value
        ]
        return compute_available_slots(booking_date, service.duration, active, self.grid)

    def get_available_times(self, date_str: Optional[str], service_id: Optional[int]) -> AvailabilityResult:
        if not date_str or not service_id:
            raise HTTPException(status_code=400, detail="Date and service ID are required")

        try:
            booking_date = parse_date(date_str)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        service = self._get_service(service_id)
        result = self._compute(booking_date, service)

        logger.info(
            f"✅ Available time slots fetched: {len(result.available_slots)} "
            f"(service duration {service.duration} min, date {booking_date})"
        )
        return result

    def create_booking(self, user: User, data: BookingCreate) -> tuple[Booking, BookingNotice, list[str]]:
        """
        Create a pending booking if the requested start time is still free.

        Availability is recomputed inside the write transaction; on PostgreSQL
        the date is also locked so two requests can't both pass the check.

        Returns:
            The booking, a notification snapshot and the admin chat ids to notify
        """
        logger.info(f"📥 Creating booking for user {user.id}: {data.date} {data.time} service {data.serviceId}")
        booking_date = parse_date(data.date)
        service = self._get_service(data.serviceId)

        try:
            with transaction(self.db):
                self.repo.lock_date(self.db, booking_date)
                result = self._compute(booking_date, service)
                if data.time not in result.available_slots:
                    logger.warning(f"⚠️ Slot {data.date} {data.time} is not available")
                    raise HTTPException(status_code=409, detail="Selected time is not available")

                booking = self.repo.add_booking(
                    self.db,
                    user_id=user.id,
                    service_id=service.id,
                    booking_date=booking_date,
                    booking_time=data.time,
                    status=BookingStatus.PENDING.value,
                    comment=data.comment,
                    telegram_notification=data.telegramNotification,
                )
        except SQLAlchemyError as e:
            raise translate_db_error(e, "Booking") from e

        self.db.refresh(booking)
        logger.info(f"✅ Booking created: {booking.id}")

        notice = build_notice(booking, service, user)
        admin_chat_ids = self.users.get_admin_chat_ids(self.db)
        return booking, notice, admin_chat_ids

    def get_user_bookings(self, user: User) -> list[dict]:
        return [serialize_booking(b) for b in self.repo.get_user_bookings(self.db, user.id)]

    def get_all_bookings(self) -> list[dict]:
        bookings = self.repo.get_all_bookings(self.db)
        logger.info(f"✅ Bookings fetched: {len(bookings)}")
        return [serialize_booking(b, include_user=True) for b in bookings]

    def get_booking(self, booking_id: int) -> Booking:
        booking = self.repo.get_booking(self.db, booking_id)
        if not booking:
            raise NotFoundError("Booking not found", entity="Booking")
        return booking

    def update_status(self, booking_id: int, status: BookingStatus) -> tuple[Booking, BookingNotice]:
        logger.info(f"📥 Updating booking status: {booking_id} -> {status.value}")
        booking = self.get_booking(booking_id)
        reactivating = (
            booking.status == BookingStatus.CANCELLED.value and status != BookingStatus.CANCELLED
        )
        if reactivating:
            self._reactivate(booking, status)
        else:
            booking = self.repo.update_status(self.db, booking, status.value)
        logger.info("✅ Booking status updated successfully")
        return booking, build_notice(booking, booking.service, booking.user)

    def _reactivate(self, booking: Booking, status: BookingStatus) -> None:
        """Un-cancel a booking only if its slot is still free.

        The booking is still cancelled while availability is computed, so it
        doesn't block itself.
        """
        try:
            with transaction(self.db):
                self.repo.lock_date(self.db, booking.booking_date)
                result = self._compute(booking.booking_date, booking.service)
                if booking.booking_time not in result.available_slots:
                    logger.warning(
                        f"⚠️ Cannot reactivate booking {booking.id}: "
                        f"{booking.booking_date} {booking.booking_time} is taken"
                    )
                    raise HTTPException(status_code=409, detail="Selected time is not available")
                booking.status = status.value
        except SQLAlchemyError as e:
            raise translate_db_error(e, "Booking") from e
        self.db.refresh(booking)

    def delete_booking(self, booking_id: int, user: User) -> dict:
        booking = self.get_booking(booking_id)
        if not user.is_admin and booking.user_id != user.id:
            logger.warning(f"⚠️ User {user.id} tried to delete booking {booking_id}")
            raise HTTPException(status_code=403, detail="No access to this booking")

        self.repo.delete_booking(self.db, booking)
        logger.info(f"✅ Booking deleted successfully: {booking_id}")
        return {"success": True}
