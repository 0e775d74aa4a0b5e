"""
Task CLI helpers - argument parsing and the browser session questions.

`--cron` skips the questions and uses BrowserSessionConfig.cron().
"""
import argparse
from typing import Callable, Optional, Sequence

from loguru import logger

from browser import BrowserSessionConfig
from browser.session import DEFAULT_WINDOW_SIZE
from config import settings
from constants import SessionType
from utils import init_logging

InputFn = Callable[[str], str]

SESSION_TYPES = [t.value for t in SessionType]


def parse_args(description: str, argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument("--cron", action="store_true", help="Non-interactive run with the fixed session config")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    return parser.parse_args(argv)


def init_task_logging(args: argparse.Namespace, app_name: str) -> None:
    if args.verbose:
        settings.LOG_LEVEL = "DEBUG"
    init_logging(app_name=app_name)


def _ask(input_fn: InputFn, question: str, default: str = "") -> str:
    suffix = f" [{default}]" if default else ""
    answer = input_fn(f"? {question}{suffix}: ").strip()
    return answer or default


def _confirm(input_fn: InputFn, question: str) -> bool:
    return _ask(input_fn, f"{question} (y/N)").lower() in ("y", "yes")


def _ask_required(input_fn: InputFn, question: str, error: str) -> str:
    while True:
        answer = _ask(input_fn, question)
        if answer:
            return answer
        print(error)


def ask_session_config(input_fn: InputFn = input, include_network: bool = False) -> BrowserSessionConfig:
    """
    Ask for the browser session options.

    Args:
        input_fn: Reads one answer per prompt
        include_network: Also ask for a custom proxy and a persistent profile
    """
    print("\n--- Configure Browser Session ---\n")

    session_type = ""
    while session_type not in SESSION_TYPES:
        session_type = _ask(input_fn, f"Select Session Type ({'/'.join(SESSION_TYPES)})", SessionType.HOSTED.value)

    country = _ask(input_fn, "Select Country (e.g. US, Any)", "Any")
    node_id = _ask(input_fn, "Specific Node ID (Optional)")
    window_size = _ask(input_fn, "Window Size", DEFAULT_WINDOW_SIZE)

    proxy_url = None
    profile_name = None
    if include_network:
        if _confirm(input_fn, "Use Custom Proxy?"):
            proxy_url = _ask_required(input_fn, "Proxy URL", "Proxy URL is required")
        if _confirm(input_fn, "Use specific profile?"):
            profile_name = _ask_required(input_fn, "Profile Name", "Profile name is required")

    return BrowserSessionConfig(
        type=session_type,
        country=None if country.lower() == "any" else country,
        node_id=node_id or None,
        window_size=window_size,
        proxy_url=proxy_url,
        profile_name=profile_name,
    )


def resolve_session_config(
    args: argparse.Namespace,
    input_fn: InputFn = input,
    include_network: bool = False,
) -> BrowserSessionConfig:
    if args.cron:
        logger.info("Running in CRON mode (automated)")
        return BrowserSessionConfig.cron()
    return ask_session_config(input_fn, include_network=include_network)
