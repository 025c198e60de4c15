from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from enum import Enum

class EnvironmentType(str, Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"

class Settings(BaseSettings):
    # Basic Settings
    APP_NAME: str = "BADM554 Course Survey"
    ENVIRONMENT: EnvironmentType = EnvironmentType.DEVELOPMENT
    DEBUG: bool = True
    API_PREFIX: str = "/api"

    # Server Settings
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    LOG_LEVEL: str = "DEBUG"

    # AI Settings
    OPENAI_API_KEY: str | None = None
    AI_MODEL: str = "gpt-4o"
    AI_TEMPERATURE: float = 0.7
    AI_REQUEST_TIMEOUT: float = 60.0

    # Survey Timing
    TARGET_DURATION_MS: int = 10 * 60 * 1000
    IDLE_NUDGE_MS: int = 2 * 60 * 1000
    MIN_EXCHANGES_FOR_COMPLETION: int = 8

    # Prompt Context
    FOLLOW_UP_CONTEXT_MESSAGES: int = 10
    WRAP_UP_CONTEXT_MESSAGES: int = 6

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra='ignore'
    )

@lru_cache
def get_settings() -> Settings:
    return Settings()
