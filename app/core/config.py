from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import ClassVar

class Settings(BaseSettings):
    PROJECT_NAME: str = "Bookstore Catalog API"
    API_V1_STR: str = "/api/v1"

    # in-memory SQLite, contents live as long as the process
    DATABASE_URL: str = "sqlite://"
    SEED_SAMPLE_BOOKS: bool = True

    LOG_LEVEL: str = "INFO"
    PORT: int = 8000

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="allow",
    )

@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
