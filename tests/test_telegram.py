import asyncio
import json

import httpx

from notify import TelegramNotifier, format_news_message
from conftest import mock_client


def test_message_format():
    text = format_news_message("CNN", "Markets rally", "https://cnn.com/a")
    assert text == "📢 *CNN*\n\nMarkets rally. [Baca selengkapnya](https://cnn.com/a)"


def test_send_news_posts_markdown():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json={"ok": True, "result": {"message_id": 1}})

    notifier = TelegramNotifier("TOKEN", "42", http_client=mock_client(handler))

    assert asyncio.run(notifier.send_news("CNN", "Markets rally", "https://cnn.com/a"))

    request = requests[0]
    assert request.url.path == "/botTOKEN/sendMessage"
    body = json.loads(request.content)
    assert body["chat_id"] == "42"
    assert body["parse_mode"] == "Markdown"
    assert body["disable_web_page_preview"] is True
    assert body["text"].startswith("📢 *CNN*")


def test_rejected_message():
    notifier = TelegramNotifier(
        "TOKEN", "42",
        http_client=mock_client(lambda r: httpx.Response(400, json={"ok": False, "description": "chat not found"})),
    )
    assert asyncio.run(notifier.send_message("hi")) is False


def test_transport_error_is_not_raised():
    def handler(request):
        raise httpx.ConnectError("offline")

    notifier = TelegramNotifier("TOKEN", "42", http_client=mock_client(handler))
    assert asyncio.run(notifier.send_message("hi")) is False


def test_missing_credentials_sends_nothing():
    requests = []
    notifier = TelegramNotifier("", "", http_client=mock_client(lambda r: requests.append(r)))

    assert not notifier.configured
    assert asyncio.run(notifier.send_message("hi")) is False
    assert requests == []
