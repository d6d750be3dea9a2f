from functools import lru_cache
from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB_NAME: str = "timekeeper"

    # "memory" keeps everything in-process (local runs / tests)
    STORE_BACKEND: Literal["mongo", "memory"] = "mongo"

    HOST: str = "127.0.0.1"
    PORT: int = 8000

    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    TOKEN_LENGTH: int = 128
    RESET_TOKEN_TTL_MINUTES: int = 10

    MAIL_SENDER: str = "no-reply@timekeeper.local"
    FRONTEND_URL: str = "http://localhost:4200"

    ALLOWED_ORIGINS: List[str] = Field(
        default_factory=lambda: ["http://localhost:4200", "http://127.0.0.1:4200"]
    )

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
