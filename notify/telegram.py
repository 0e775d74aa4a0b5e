"""
Telegram Notifier - forward monitored headlines to a chat.

Bot API docs: https://core.telegram.org/bots/api#sendmessage
"""
from typing import Optional

import httpx
from loguru import logger

from config import settings

API_BASE = "https://api.telegram.org"


def format_news_message(site_name: str, title: str, link: str) -> str:
    """Markdown message for one headline."""
    return f"📢 *{site_name}*\n\n{title}. [Baca selengkapnya]({link})"


class TelegramNotifier:
    """Send Markdown messages through the Telegram Bot API."""

    def __init__(
        self,
        bot_token: Optional[str] = None,
        chat_id: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        api_base: str = API_BASE,
        timeout: float = 15.0,
    ):
        self.bot_token = settings.TELEGRAM_BOT_TOKEN if bot_token is None else bot_token
        self.chat_id = settings.TELEGRAM_CHAT_ID if chat_id is None else chat_id
        self.http_client = http_client
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.bot_token and self.chat_id)

    async def send_message(self, text: str) -> bool:
        """
        Send one message.

        Returns:
            True when Telegram accepted it. Failures are logged, never raised.
        """
        if not self.configured:
            logger.error("Telegram credentials missing (TELEGRAM_BOT_TOKEN / TELEGRAM_CHAT_ID)")
            return False

        url = f"{self.api_base}/bot{self.bot_token}/sendMessage"
        payload = {
            "chat_id": self.chat_id,
            "text": text,
            "parse_mode": "Markdown",
            "disable_web_page_preview": True,
        }

        try:
            if self.http_client is not None:
                response = await self.http_client.post(url, json=payload, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(url, json=payload)
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Telegram send failed: {type(e).__name__}: {e}")
            return False

        if data.get("ok"):
            logger.info("Sent to Telegram")
            return True

        logger.warning(f"Telegram rejected message: {data.get('description')}")
        return False

    async def send_news(self, site_name: str, title: str, link: str) -> bool:
        return await self.send_message(format_news_message(site_name, title, link))
