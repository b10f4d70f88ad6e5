"""Day schedule view for the admin calendar"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ...auth import require_admin
from ...database import get_db
from ...models import User
from ...shared.validators import parse_date
from ..bookings.repository import BookingRepository

router = APIRouter(prefix="/schedule", tags=["Schedule"])


@router.get("")
async def get_schedule(
    date: str = Query(...),
    _admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Every booking on the date, in time order"""
    try:
        day = parse_date(date)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    return [
        {
            "id": b.id,
            "time": b.booking_time,
            "booked": True,
            "status": b.status,
            "client_name": b.user.full_name,
            "service_name": b.service.name,
        }
        for b in BookingRepository.bookings_on_date(db, day)
    ]
