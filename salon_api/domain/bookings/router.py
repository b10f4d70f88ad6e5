"""Booking endpoints"""

from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_admin
from ...database import get_db
from ...models import User
from ...services.notification_service import Notifier, get_notifier
from ..scheduling.availability import SlotGrid
from .schemas import AvailabilityResponse, BookingCreate, BookingStatusUpdate
from .service import BookingService, default_slot_grid, serialize_booking

router = APIRouter(prefix="/bookings", tags=["Bookings"])


def get_slot_grid() -> SlotGrid:
    return default_slot_grid()


def get_booking_service(
    db: Session = Depends(get_db), grid: SlotGrid = Depends(get_slot_grid)
) -> BookingService:
    """Dependency injection for BookingService"""
    return BookingService(db, grid)


@router.post("")
async def create_booking(
    data: BookingCreate,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
    notifier: Notifier = Depends(get_notifier),
):
    """Book a service; notifications go out after the response is sent"""
    booking, notice, admin_chat_ids = service.create_booking(current_user, data)
    background_tasks.add_task(notifier.notify_booking_created, notice, admin_chat_ids)
    return serialize_booking(booking)


@router.get("/my")
async def get_my_bookings(
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return service.get_user_bookings(current_user)


@router.get("/available-times", response_model=AvailabilityResponse)
async def get_available_times(
    date: Optional[str] = Query(None),
    serviceId: Optional[int] = Query(None),
    _user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Bookable start times for a service on a date"""
    return service.get_available_times(date, serviceId).to_dict()


@router.get("/all")
async def get_all_bookings(
    _admin: User = Depends(require_admin),
    service: BookingService = Depends(get_booking_service),
):
    return service.get_all_bookings()


@router.put("/{booking_id}/status")
async def update_booking_status(
    booking_id: int,
    data: BookingStatusUpdate,
    background_tasks: BackgroundTasks,
    _admin: User = Depends(require_admin),
    service: BookingService = Depends(get_booking_service),
    notifier: Notifier = Depends(get_notifier),
):
    _booking, notice = service.update_status(booking_id, data.status)
    background_tasks.add_task(notifier.notify_status_changed, notice, data.status.value)
    return {"success": True}


@router.delete("/{booking_id}")
async def delete_booking(
    booking_id: int,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Delete a booking; clients may only delete their own"""
    return service.delete_booking(booking_id, current_user)
