"""Client router - admin views of salon clients"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ...auth import require_admin
from ...database import get_db
from ...models import User
from .repository import ClientRepository
from .schemas import iso_or_none, serialize_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/clients", tags=["Clients"])


@router.get("")
async def get_clients(
    _admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """All clients with booking counts"""
    rows = ClientRepository.get_clients(db)
    logger.info(f"✅ Clients fetched: {len(rows)}")
    return [
        {
            **serialize_client(user),
            "total_bookings": total or 0,
            "last_booking": iso_or_none(last_booking),
        }
        for user, total, last_booking in rows
    ]


@router.get("/{client_id}")
async def get_client(
    client_id: int,
    _admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    row = ClientRepository.get_client_details(db, client_id)
    if not row:
        raise HTTPException(status_code=404, detail="Client not found")

    user, total, completed, pending, last_booking = row
    return {
        **serialize_client(user),
        "total_bookings": total or 0,
        "completed_bookings": int(completed or 0),
        "pending_bookings": int(pending or 0),
        "last_booking": iso_or_none(last_booking),
    }
