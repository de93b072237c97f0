from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional

class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Studio Invoicing"
    APP_PORT: int = 9210
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    TIMEZONE: str = "Africa/Casablanca"

    # Database
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "studio"
    POSTGRES_PORT: int = 5432
    DATABASE_URI: Optional[str] = None  # Full URL override (e.g. sqlite for local runs)

    # Object storage (Supabase-compatible REST API)
    STORAGE_URL: str = "http://localhost:54321"
    STORAGE_KEY: str = ""
    STORAGE_BUCKET: str = "business-assets"
    STORAGE_TIMEOUT: float = 15.0

    # Invoice display
    CURRENCY_LABEL: str = "Dirhams"
    CURRENCY_CODE: str = "MAD"

    @property
    def DATABASE_URL(self) -> str:
        if self.DATABASE_URI:
            return self.DATABASE_URI
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    class Config:
        env_file = ".env"
        extra = "ignore"

@lru_cache()
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
