"""Application configuration using Pydantic v2 Settings.

Centralized configuration that loads from environment variables
and provides type-safe access throughout the application.
"""

import logging
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER_ORDER = "openai,anthropic,groq,gemini,openrouter,huggingface"


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

    # Section catalog
    sections_dir: Path = Field(
        default=Path("./sections"),
        description="Directory holding the .liquid section templates.",
    )
    catalog_type: str = Field(
        default="filesystem",
        description="Catalog strategy to use: 'filesystem'.",
    )
    sink_type: str = Field(
        default="filesystem",
        description="Write-through strategy for generated sections: 'filesystem' or 'null'.",
    )
    default_max_results: int = Field(
        default=10,
        ge=1,
        description="Maximum number of sections returned when the caller does not say.",
    )

    # Generation providers
    ai_api_keys: str = Field(
        default="",
        description="Delimited list of provider credentials, in any order.",
    )
    ai_providers: str = Field(
        default=DEFAULT_PROVIDER_ORDER,
        description="Delimited list of enabled providers; order is the fallback order.",
    )
    ai_models: str = Field(
        default="",
        description="Delimited list of candidate model names.",
    )
    provider_credentials: dict[str, str] = Field(
        default_factory=dict,
        description="Explicit provider -> credential mapping (JSON). Wins over AI_API_KEYS.",
    )

    # Generation behaviour
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=4000, ge=1)
    retry_max_attempts: int = Field(
        default=5,
        ge=1,
        description="Requests per provider before giving up on rate limits.",
    )
    retry_base_delay: float = Field(
        default=1.0,
        ge=0.0,
        description="Backoff base in seconds; attempt n waits base * 2**n.",
    )
    request_timeout: float = Field(
        default=60.0,
        gt=0.0,
        description="Per-request HTTP timeout in seconds.",
    )
    generation_deadline: float = Field(
        default=90.0,
        gt=0.0,
        description="Deadline in seconds spanning the whole provider fallback chain.",
    )
    min_fragment_length: int = Field(
        default=80,
        ge=0,
        description="Generated segments shorter than this are discarded as noise.",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR.",
    )
    log_dir: Path = Field(
        default=Path("./logs"),
        description="Directory for info.log and error.log.",
    )

    @field_validator("sections_dir", "log_dir")
    @classmethod
    def resolve_path(cls, v: Path) -> Path:
        """Resolve directories to absolute paths."""
        return v.expanduser().resolve()

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Normalize log level to uppercase."""
        return v.upper()

    @field_validator("provider_credentials")
    @classmethod
    def normalize_provider_names(cls, v: dict[str, str]) -> dict[str, str]:
        """Lowercase provider names and drop blank credentials."""
        return {name.strip().lower(): key.strip() for name, key in v.items() if key and key.strip()}

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
