"""
Crypto Market Index - Configuration
"""
from pathlib import Path
from pydantic_settings import BaseSettings
from pydantic import Field


class ConfigurationError(Exception):
    """Raised when a required setting is missing before a task starts."""


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Paths
    BASE_DIR: Path = Path(__file__).parent
    DATA_DIR: Path = Field(default_factory=lambda: Path(__file__).parent / "data")
    LOG_DIR: Path = Field(default_factory=lambda: Path(__file__).parent / "data" / "logs")
    DATABASE_PATH: Path = Field(default_factory=lambda: Path(__file__).parent / "data" / "market.db")
    DATABASE_URL: str = Field(default="", description="Async SQLAlchemy URL, e.g. postgresql+asyncpg://...")

    # Remote browser service
    API_KEY: str = Field(default="", description="Browser Cash API key")
    BROWSER_API_BASE: str = Field(default="https://api.browser.cash")

    # Scoring oracle
    GEMINI_API_KEY: str = Field(default="", description="Google Gemini API key")
    LLM_PROVIDER: str = Field(default="gemini")
    LLM_MODEL: str = Field(default="gemini-2.5-flash-lite")
    LLM_VERIFY_SSL: bool = Field(default=True)
    LLM_MAX_TOKENS: int = Field(default=500)

    # Market data APIs
    COINGECKO_API_KEY: str = Field(default="", description="Optional CoinGecko demo key")
    COINGECKO_API_BASE: str = Field(default="https://api.coingecko.com")
    DEFILLAMA_API_BASE: str = Field(default="https://api.llama.fi")
    ALTERNATIVE_ME_API_BASE: str = Field(default="https://api.alternative.me")
    MEMBIT_API_KEY: str = Field(default="", description="Optional Membit social data key")
    MEMBIT_API_BASE: str = Field(default="https://api.membit.ai/v1")

    # Telegram
    TELEGRAM_BOT_TOKEN: str = Field(default="")
    TELEGRAM_CHAT_ID: str = Field(default="")

    # Logging
    LOG_LEVEL: str = Field(default="INFO")

    # Rate limiting and scraping
    API_CALL_DELAY: float = Field(default=1.5, description="Seconds between CoinGecko calls")
    SITE_DELAY: float = Field(default=3.0, description="Seconds between scraped sites")
    HEADLINE_TARGET: int = Field(default=5)
    SAVE_RAW: bool = Field(default=True, description="Save raw crawl snapshots under DATA_DIR/raw")

    # Scheduler
    FEAR_GREED_INTERVAL_HOURS: int = Field(default=4)
    ALTCOIN_SEASON_INTERVAL_HOURS: int = Field(default=6)
    NEWS_MONITOR_INTERVAL_MINUTES: int = Field(default=30)

    # API
    API_HOST: str = Field(default="0.0.0.0")
    API_PORT: int = Field(default=8000)
    API_CORS_ORIGINS: list[str] = Field(default=["*"], description="JSON list of dashboard origins")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# Global settings instance
settings = Settings()


def ensure_directories():
    """Ensure all required directories exist."""
    dirs = [
        settings.DATA_DIR,
        settings.DATA_DIR / "raw",
        settings.LOG_DIR,
    ]
    for dir_path in dirs:
        dir_path.mkdir(parents=True, exist_ok=True)


def require_settings(*names: str) -> None:
    """
    Check that every named setting has a value.

    Raises:
        ConfigurationError: listing every missing name
    """
    missing = [name for name in names if not getattr(settings, name, None)]
    if missing:
        raise ConfigurationError(f"Missing required settings: {', '.join(missing)}")
