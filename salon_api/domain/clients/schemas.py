"""Client serialization shared by the client and report endpoints"""

from ...models import User


def iso_or_none(value):
    return value.isoformat() if value else None


def serialize_client(user: User) -> dict:
    return {
        "id": user.id,
        "name": user.name,
        "surname": user.surname,
        "email": user.email,
        "phone": user.phone,
        "role": user.role,
        "telegramConnected": bool(user.telegram_id),
        "telegram_username": user.telegram_username,
        "created_at": iso_or_none(user.created_at),
    }
