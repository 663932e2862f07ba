"""
Telegram message sender.

Delivers plain-text messages via the Telegram Bot API.
"""

import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


class TelegramNotifier:
    """
    Async Telegram message sender.

    Never raises: transport errors are logged and reported as False,
    so callers can record a failed delivery.
    """

    API_URL = "https://api.telegram.org"

    def __init__(self, bot_token: Optional[str], timeout: float = 10.0):
        self.bot_token = bot_token
        self.timeout = timeout
        self._enabled = bool(self.bot_token)

        if not self._enabled:
            logger.info("TelegramNotifier disabled: TELEGRAM_BOT_TOKEN not set")

    @property
    def enabled(self) -> bool:
        """Check if notifier is configured."""
        return self._enabled

    async def send_message(self, chat_id: int, text: str) -> bool:
        """
        Send message to Telegram chat.

        Args:
            chat_id: Telegram chat/user ID
            text: Plain message text

        Returns:
            True if sent successfully, False otherwise
        """
        if not self._enabled:
            return False

        if not chat_id:
            logger.warning("Cannot send Telegram message: no chat_id")
            return False

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.API_URL}/bot{self.bot_token}/sendMessage",
                    json={"chat_id": chat_id, "text": text}
                )
        except httpx.TimeoutException:
            logger.warning(f"Telegram timeout sending to {chat_id}")
            return False
        except httpx.HTTPError as e:
            logger.error(f"Telegram send error: {e}")
            return False

        if response.status_code != 200:
            logger.warning(
                f"Telegram API error: {response.status_code} - {response.text}"
            )
            return False

        logger.debug(f"Telegram message sent to {chat_id}")
        return True
