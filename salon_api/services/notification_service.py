"""
Booking notifications over Telegram

Delivery is best-effort: every public method catches and logs its own
failures, so a notification problem can never fail the booking request
that triggered it. Methods take plain snapshots rather than ORM objects
because they run as background tasks after the request's session closes.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from fastapi import Request

from ..models import BookingStatus
from .telegram_service import TelegramClient

logger = logging.getLogger(__name__)

STATUS_LABELS = {
    BookingStatus.PENDING.value: "⏳ Awaiting confirmation",
    BookingStatus.CONFIRMED.value: "✅ Confirmed",
    BookingStatus.COMPLETED.value: "✅ Completed",
    BookingStatus.CANCELLED.value: "❌ Cancelled",
}

STATUS_TRAILERS = {
    BookingStatus.CANCELLED.value: "❌ If you have any questions, please contact us.",
    BookingStatus.CONFIRMED.value: "✅ Your booking is confirmed! We look forward to seeing you.",
    BookingStatus.COMPLETED.value: "✅ Thank you for your visit! We hope to see you again.",
}


@dataclass(frozen=True)
class BookingNotice:
    """Everything a booking message needs, captured while the session is open"""

    booking_id: int
    date: str
    time: str
    status: str
    comment: Optional[str]
    service_name: str
    service_price: float
    service_duration: Optional[int]
    client_name: str
    client_surname: str
    client_email: str
    client_phone: str
    client_telegram_id: Optional[str]
    telegram_notification: bool = True


def status_label(status: str) -> str:
    return STATUS_LABELS.get(status, status)


def format_client_booking_message(notice: BookingNotice) -> str:
    lines = [
        "📅 You have booked a service!",
        "",
        f"👤 Client: {notice.client_name} {notice.client_surname}",
        f"📱 Phone: {notice.client_phone}",
        f"💆 Service: {notice.service_name}",
        f"💰 Price: {notice.service_price:g}",
        f"📅 Date: {notice.date}",
        f"⏰ Time: {notice.time}",
        f"📝 Status: {status_label(notice.status)}",
    ]
    if notice.comment:
        lines.append(f"💬 Comment: {notice.comment}")
    lines += ["", "We will contact you to confirm the booking."]
    return "\n".join(lines)


def format_admin_booking_message(notice: BookingNotice) -> str:
    lines = [
        "🆕 NEW BOOKING!",
        "",
        f"👤 Client: {notice.client_name} {notice.client_surname}",
        f"📧 Email: {notice.client_email}",
        f"📱 Phone: {notice.client_phone}",
        f"💆 Service: {notice.service_name}",
        f"💰 Price: {notice.service_price:g}",
        f"⏱ Duration: {notice.service_duration or '-'} min",
        f"📅 Date: {notice.date}",
        f"⏰ Time: {notice.time}",
    ]
    if notice.comment:
        lines.append(f"💬 Comment: {notice.comment}")
    lines += ["", f"🆔 Booking ID: {notice.booking_id}"]
    return "\n".join(lines)


def format_status_message(notice: BookingNotice, new_status: str) -> str:
    lines = [
        "📢 Your booking status has changed",
        "",
        f"💆 Service: {notice.service_name}",
        f"📅 Date: {notice.date}",
        f"⏰ Time: {notice.time}",
        f"🔄 New status: {status_label(new_status)}",
    ]
    trailer = STATUS_TRAILERS.get(new_status)
    if trailer:
        lines += ["", trailer]
    return "\n".join(lines)


class Notifier(Protocol):
    enabled: bool

    async def notify_booking_created(
        self, notice: BookingNotice, admin_chat_ids: list[str]
    ) -> dict: ...

    async def notify_status_changed(self, notice: BookingNotice, new_status: str) -> dict: ...


class TelegramNotifier:
    """Notification sink backed by the Telegram Bot API"""

    enabled = True

    def __init__(self, client: TelegramClient):
        self.client = client

    async def notify_booking_created(
        self, notice: BookingNotice, admin_chat_ids: list[str]
    ) -> dict:
        """Tell the client (if linked and opted in) and every linked admin"""
        result = {"user_sent": False, "admins_sent": 0, "admins_total": len(admin_chat_ids)}

        if notice.client_telegram_id and notice.telegram_notification:
            try:
                sent, error = await self.client.send_message(
                    notice.client_telegram_id, format_client_booking_message(notice)
                )
                result["user_sent"] = sent
                if sent:
                    logger.info(f"✅ Booking notification sent to user {notice.client_telegram_id}")
                else:
                    logger.warning(f"⚠️ Booking notification not sent to user: {error}")
            except Exception as e:
                logger.error(f"❌ User Telegram notification failed: {e}")
        else:
            logger.info("ℹ️ User has no Telegram connected, skipping user notification")

        if admin_chat_ids:
            message = format_admin_booking_message(notice)
            for chat_id in admin_chat_ids:
                try:
                    sent, error = await self.client.send_message(chat_id, message)
                except Exception as e:
                    logger.error(f"❌ Failed to send to admin {chat_id}: {e}")
                    continue
                if sent:
                    result["admins_sent"] += 1
                else:
                    logger.warning(f"⚠️ Admin {chat_id} notification not sent: {error}")
            logger.info(
                f"✅ Notifications sent to {result['admins_sent']}/{len(admin_chat_ids)} admins"
            )
        else:
            logger.info("ℹ️ No admins with Telegram linked, skipping admin notification")

        return result

    async def notify_status_changed(self, notice: BookingNotice, new_status: str) -> dict:
        result = {"user_sent": False}
        if not notice.client_telegram_id:
            logger.info(f"ℹ️ No telegram_id for booking {notice.booking_id} owner")
            return result

        try:
            sent, error = await self.client.send_message(
                notice.client_telegram_id, format_status_message(notice, new_status)
            )
            result["user_sent"] = sent
            if not sent:
                logger.warning(f"⚠️ Status notification not sent: {error}")
        except Exception as e:
            logger.error(f"❌ Status Telegram notification failed: {e}")
        return result


class DisabledNotifier:
    """Used when no bot token is configured"""

    enabled = False

    async def notify_booking_created(
        self, notice: BookingNotice, admin_chat_ids: list[str]
    ) -> dict:
        logger.debug(f"Telegram disabled, booking {notice.booking_id} notification skipped")
        return {"user_sent": False, "admins_sent": 0, "admins_total": len(admin_chat_ids)}

    async def notify_status_changed(self, notice: BookingNotice, new_status: str) -> dict:
        logger.debug(f"Telegram disabled, booking {notice.booking_id} status notification skipped")
        return {"user_sent": False}


def build_notifier(bot_token: Optional[str]) -> Notifier:
    if not bot_token:
        logger.info("ℹ️ Telegram bot token not provided, notifications disabled")
        return DisabledNotifier()
    return TelegramNotifier(TelegramClient(bot_token))


def get_notifier(request: Request) -> Notifier:
    """Dependency returning the notifier created at application startup"""
    return request.app.state.notifier
