"""Telegram linking schemas"""

import re
from typing import Optional

from pydantic import BaseModel, field_validator

LINK_CODE_PATTERN = re.compile(r"^[A-Z0-9]{6}$")


class LinkCodeResponse(BaseModel):
    linkCode: str


class VerifyLinkRequest(BaseModel):
    """Sent by the bot when a user messages it a link code"""

    code: str
    telegramId: str
    telegramUsername: Optional[str] = None

    @field_validator("code")
    @classmethod
    def validate_code(cls, v):
        v = v.strip().upper()
        if not LINK_CODE_PATTERN.match(v):
            raise ValueError("Link code must be 6 letters or digits")
        return v

    @field_validator("telegramId", mode="before")
    @classmethod
    def validate_telegram_id(cls, v):
        # Telegram ids arrive as integers from the Bot API
        v = str(v).strip() if v is not None else ""
        if not v:
            raise ValueError("Telegram ID is required")
        return v
