"""Configuration Management."""

from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Compiler settings from environment."""

    model_config = SettingsConfigDict(
        env_prefix="SPECSTREAM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Use JSON log format")

    # Parsing
    skip_preamble: bool = Field(
        default=True, description="Skip text before the first '{' (e.g. a markdown fence)"
    )
    max_depth: int = Field(default=64, gt=0, le=1024, description="Max JSON nesting depth")

    # Streaming
    stream_batch_size: int = Field(
        default=1, gt=0, description="Characters to batch before each push"
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
