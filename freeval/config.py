"""Library configuration via environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """freeval settings loaded from FREEVAL_* environment variables."""

    # Logging
    DEBUG: bool = False
    LOG_LEVEL: str = "info"

    # Value lookup
    PATH_SEPARATOR: str = "."

    # Rule defaults
    PASSWORD_MIN_LENGTH: int = 8
    PHONE_MIN_DIGITS: int = 7
    PHONE_MAX_DIGITS: int = 15

    model_config = {"env_prefix": "FREEVAL_", "env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
