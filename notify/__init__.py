"""
Notify Module - outbound notifications.
"""
from .telegram import TelegramNotifier, format_news_message

__all__ = [
    "TelegramNotifier",
    "format_news_message",
]
