"""
Telegram Bot API client
Sends plain-text messages to linked chats
"""

import logging
from typing import Optional, Union

import httpx

from ..config import TELEGRAM_API_URL

logger = logging.getLogger(__name__)


class TelegramClient:
    """Thin async wrapper over the Bot API HTTP interface"""

    def __init__(
        self,
        token: str,
        api_url: str = TELEGRAM_API_URL,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    def _method_url(self, method: str) -> str:
        return f"{self.api_url}/bot{self.token}/{method}"

    async def send_message(
        self, chat_id: Union[int, str], text: str
    ) -> tuple[bool, Optional[str]]:
        """
        Send a text message

        Returns:
            Tuple of (success: bool, error_message: Optional[str])
        """
        try:
            async with self._client() as client:
                response = await client.post(
                    self._method_url("sendMessage"),
                    json={"chat_id": chat_id, "text": text},
                )
        except httpx.HTTPError as e:
            logger.error(f"❌ Telegram request failed for chat {chat_id}: {e}")
            return False, str(e)

        if response.status_code == 200 and response.json().get("ok"):
            return True, None

        try:
            error = response.json().get("description") or f"HTTP {response.status_code}"
        except ValueError:
            error = f"HTTP {response.status_code}"
        logger.warning(f"⚠️ Telegram rejected message to chat {chat_id}: {error}")
        return False, error

    async def get_me(self) -> Optional[dict]:
        """Return the bot's profile, or None if the token doesn't work"""
        try:
            async with self._client() as client:
                response = await client.get(self._method_url("getMe"))
            if response.status_code == 200:
                return response.json().get("result")
            logger.error(f"❌ Telegram getMe failed: HTTP {response.status_code}")
        except httpx.HTTPError as e:
            logger.error(f"❌ Telegram getMe failed: {e}")
        return None
