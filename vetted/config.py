from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False  # True for structured JSON, False for colored console

    # Execution
    MAX_LAZY_DEPTH: int = 64  # Nested lazy resolutions allowed per parse call

    # Issue rendering
    RECEIVED_MAX_STRING: int = 100
    RECEIVED_MAX_ITEMS: int = 5

    model_config = SettingsConfigDict(env_prefix="VETTED_", env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
