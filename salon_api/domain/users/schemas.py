"""User domain schemas - Pydantic models for validation"""

from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import User
from ...shared.validators import validate_email, validate_phone

MIN_PASSWORD_LENGTH = 6


class RegisterRequest(BaseModel):
    name: str
    surname: str
    phone: str
    email: str
    password: str

    @field_validator("name", "surname")
    @classmethod
    def validate_not_blank(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Field must not be empty")
        return v

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v):
        return validate_email(v)

    @field_validator("phone")
    @classmethod
    def validate_phone_field(cls, v):
        return validate_phone(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
        return v


class LoginRequest(BaseModel):
    phoneOrEmail: str
    password: str


class AdminLoginRequest(BaseModel):
    email: str
    password: str


class UserResponse(BaseModel):
    id: int
    name: str
    surname: str
    email: str
    phone: str
    role: str
    telegramConnected: bool
    telegramId: Optional[str] = None
    telegramUsername: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            name=user.name,
            surname=user.surname,
            email=user.email,
            phone=user.phone,
            role=user.role,
            telegramConnected=bool(user.telegram_id),
            telegramId=user.telegram_id,
            telegramUsername=user.telegram_username,
        )


class AuthResponse(BaseModel):
    user: UserResponse
    token: str
