"""Application configuration using Pydantic v2 Settings.

Centralized configuration that loads from environment variables
and provides type-safe access throughout the application.
"""

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

TRANSPORT_TYPES = ("openrouter", "proxy")
FILL_STRATEGIES = ("batch", "sequential")


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings have sensible defaults and can be overridden via
    environment variables or a .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # OpenRouter
    openrouter_api_key: str = Field(
        default="",
        description="OpenRouter API key used for completions.",
    )
    openrouter_base_url: str = Field(
        default="https://openrouter.ai/api/v1",
        description="OpenRouter API base URL.",
    )
    app_referer: str = Field(
        default="https://github.com/slashfill/slashfill",
        description="Sent to OpenRouter as HTTP-Referer.",
    )
    app_title: str = Field(
        default="SlashFill",
        description="Sent to OpenRouter as X-Title.",
    )

    # Proxy
    proxy_url: str | None = Field(
        default=None,
        description="Base URL of a proxy that holds the API key.",
    )

    # Strategy Selection
    transport_type: str = Field(
        default="openrouter",
        description="Transport to use: 'openrouter' or 'proxy'.",
    )
    fill_strategy: str = Field(
        default="batch",
        description="Batch trigger strategy: 'batch' or 'sequential'.",
    )

    # Models
    fill_model: str = Field(
        default="anthropic/claude-haiku-4.5",
        description="Model used to fill blanks.",
    )
    title_model: str = Field(
        default="google/gemini-2.5-flash-lite",
        description="Model used to generate note titles.",
    )
    inline_temperature: float = Field(default=0.2, ge=0.0, le=2.0)
    inline_max_tokens: int = Field(default=64, gt=0)
    batch_temperature: float = Field(default=0.1, ge=0.0, le=2.0)
    batch_max_tokens: int = Field(default=256, gt=0)
    web_search: bool = Field(
        default=True,
        description="Enable the OpenRouter web search plugin for fills.",
    )
    web_search_max_results: int = Field(default=3, gt=0)
    request_timeout: float = Field(
        default=60.0,
        description="Transport request timeout in seconds.",
    )

    # Context
    prefix_window: int = Field(
        default=1500,
        ge=0,
        description="Characters of text before the cursor sent for inline fills.",
    )
    suffix_window: int = Field(
        default=500,
        ge=0,
        description="Characters of text after the cursor sent for inline fills.",
    )
    batch_context_limit: int = Field(
        default=6000,
        ge=0,
        description="Maximum batch prompt length, 0 for unbounded.",
    )

    # Animation
    tick_ms: float = Field(default=30, ge=0)
    erase_tick_ms: float = Field(default=30, ge=0)
    chunk_size: int = Field(default=1, gt=0)
    easter_egg_message: str = Field(default="Boing boing!")
    easter_egg_delay_ms: float = Field(default=250, ge=0)

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR.",
    )

    @field_validator("transport_type")
    @classmethod
    def validate_transport_type(cls, v: str) -> str:
        """Reject unknown transports."""
        v = v.lower()
        if v not in TRANSPORT_TYPES:
            raise ValueError(f"transport_type must be one of {TRANSPORT_TYPES}")
        return v

    @field_validator("fill_strategy")
    @classmethod
    def validate_fill_strategy(cls, v: str) -> str:
        """Reject unknown fill strategies."""
        v = v.lower()
        if v not in FILL_STRATEGIES:
            raise ValueError(f"fill_strategy must be one of {FILL_STRATEGIES}")
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Normalize log level to uppercase."""
        return v.upper()

    def configure_logging(self) -> None:
        """Configure global logging based on settings."""
        import structlog

        level = getattr(logging, self.log_level, logging.INFO)

        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.stdlib.PositionalArgumentsFormatter(),
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )

        logging.basicConfig(
            format="%(message)s",
            level=level,
        )

        logger.setLevel(level)


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global Settings instance.

    Returns:
        The singleton Settings instance.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
        _settings.configure_logging()
    return _settings
