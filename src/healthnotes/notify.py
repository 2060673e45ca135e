"""
User-facing notifications.

Sync outcomes worth telling the user about go through a single Notifier.
Without Telegram credentials messages are only logged; with them they are also
sent to the owner's chat.
"""
import logging
from typing import Optional

import telegram
from telegram.error import TelegramError

from healthnotes.config import Settings

logger = logging.getLogger(__name__)


class Notifier:
    async def notify(self, message: str) -> None:
        raise NotImplementedError


class LogNotifier(Notifier):
    async def notify(self, message: str) -> None:
        logger.info("Notice: %s", message)


class TelegramNotifier(Notifier):
    """Sends notices to one Telegram chat. Delivery failures are logged, not raised."""

    def __init__(self, token: str, chat_id: int, bot: Optional[telegram.Bot] = None):
        self._bot = bot or telegram.Bot(token)
        self._chat_id = chat_id

    async def notify(self, message: str) -> None:
        logger.info("Notice: %s", message)
        try:
            async with self._bot:
                await self._bot.send_message(chat_id=self._chat_id, text=message)
        except TelegramError:
            logger.exception("Failed to send Telegram notification")


def build_notifier(settings: Settings) -> Notifier:
    if settings.telegram_bot_token and settings.telegram_chat_id:
        return TelegramNotifier(settings.telegram_bot_token, settings.telegram_chat_id)
    return LogNotifier()
