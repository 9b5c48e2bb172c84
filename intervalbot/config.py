from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    bot_token: str = Field(alias="BOT_TOKEN")
    database_url: str = Field(alias="DATABASE_URL")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    lead_in_seconds: int = Field(default=10, ge=0, alias="LEAD_IN_SECONDS")
    countdown_seconds: int = Field(default=3, ge=0, alias="COUNTDOWN_SECONDS")
    refresh_seconds: int = Field(default=5, ge=1, alias="REFRESH_SECONDS")

    max_rounds: int = Field(default=50, ge=1, alias="MAX_ROUNDS")
    max_phase_seconds: int = Field(default=3600, ge=1, alias="MAX_PHASE_SECONDS")

    default_rounds: int = Field(default=5, alias="DEFAULT_ROUNDS")
    default_work_seconds: int = Field(default=30, alias="DEFAULT_WORK_SECONDS")
    default_rest_seconds: int = Field(default=30, alias="DEFAULT_REST_SECONDS")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()  # type: ignore[arg-type]
