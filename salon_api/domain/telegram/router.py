"""Telegram account-link endpoints"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user, verify_bot_secret
from ...database import get_db
from ...models import User
from .schemas import LinkCodeResponse, VerifyLinkRequest
from .service import TelegramLinkService

router = APIRouter(prefix="/telegram", tags=["Telegram"])


def get_link_service(db: Session = Depends(get_db)) -> TelegramLinkService:
    return TelegramLinkService(db)


@router.post("/link", response_model=LinkCodeResponse)
async def create_link(
    current_user: User = Depends(get_current_user),
    service: TelegramLinkService = Depends(get_link_service),
):
    """Issue a one-time code the user sends to the bot"""
    return service.create_link_code(current_user)


@router.get("/check-link/{code}")
async def check_link(code: str, service: TelegramLinkService = Depends(get_link_service)):
    return service.check_link(code)


@router.post("/unlink")
async def unlink(
    current_user: User = Depends(get_current_user),
    service: TelegramLinkService = Depends(get_link_service),
):
    return service.unlink(current_user)


@router.post("/verify", dependencies=[Depends(verify_bot_secret)])
async def verify_link(data: VerifyLinkRequest, service: TelegramLinkService = Depends(get_link_service)):
    """Called by the bot process with the code and the sender's chat identity"""
    return service.verify_link(data)
