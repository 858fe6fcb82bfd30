from pathlib import Path

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_KNOWLEDGE_DIR = Path(__file__).resolve().parent.parent / "knowledge" / "data"

SERVER_NAME = "duracube-contract-mcp"
SERVER_VERSION = "1.0.0"
PROTOCOL_VERSION = "2024-11-05"


class Settings(BaseSettings):
    server_host: str = Field(
        default="127.0.0.1",  # Railway/Render set SERVER_HOST=0.0.0.0
        validation_alias="SERVER_HOST",
    )
    port: int = Field(default=3000, validation_alias="PORT")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: str | None = Field(default=None, validation_alias="LOG_FILE")
    knowledge_dir: Path = Field(
        default=DEFAULT_KNOWLEDGE_DIR,
        validation_alias="KNOWLEDGE_DIR",
        description="Directory holding the five knowledge JSON documents",
    )
    preload_knowledge: bool = Field(
        default=True,
        validation_alias="PRELOAD_KNOWLEDGE",
        description="Load every knowledge document at startup instead of on first use",
    )
    sse_keepalive_seconds: float = Field(
        default=30.0,
        validation_alias="SSE_KEEPALIVE_SECONDS",
        description="Interval between keep-alive comments on the /sse stream",
    )
    server_name: str = SERVER_NAME
    server_version: str = SERVER_VERSION
    protocol_version: str = PROTOCOL_VERSION

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid LOG_LEVEL '{value}'. Valid levels are: {', '.join(sorted(valid_levels))}. Defaulting to INFO.")
            return "INFO"
        return upper_value

    @field_validator("sse_keepalive_seconds")
    @classmethod
    def validate_keepalive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("SSE_KEEPALIVE_SECONDS must be greater than 0")
        return value

    @field_validator("knowledge_dir")
    @classmethod
    def validate_knowledge_dir(cls, value: Path) -> Path:
        """Warn early when the knowledge directory is missing.

        Loading still fails per document with DocumentLoadError; this only
        surfaces the misconfiguration at startup.
        """
        if not value.is_dir():
            logger.warning(f"KNOWLEDGE_DIR does not exist or is not a directory: {value}")
        return value


settings = Settings()
