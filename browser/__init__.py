"""
Browser Module - remote browser sessions for scraping rendered pages.
"""
from .session import (
    BrowserSessionConfig,
    BrowserCashClient,
    PageRenderer,
    RemoteSession,
    Renderer,
    remote_page,
)

__all__ = [
    "BrowserSessionConfig",
    "BrowserCashClient",
    "PageRenderer",
    "RemoteSession",
    "Renderer",
    "remote_page",
]
