from pydantic_settings import BaseSettings
from functools import lru_cache
from pathlib import Path
from typing import Optional

_PACKAGE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    # App
    app_name: str = "FSB Admin Panel"
    debug: bool = False

    # Database
    database_url: str = "sqlite+aiosqlite:///./admin.db"

    # Property alias for Alembic compatibility
    @property
    def DATABASE_URL(self) -> str:
        return self.database_url

    # API
    api_prefix: str = "/api"
    static_dir: str = str(_PACKAGE_DIR / "static")
    cors_origins: list[str] = ["http://localhost:8081", "http://127.0.0.1:8081"]
    max_page_size: int = 500  # Upper bound for /files?limit=

    # Auth - leave unset to keep the API open (single-operator deployments)
    admin_api_key: Optional[str] = None

    # Live stats
    stats_interval_seconds: float = 5.0

    # Cache metrics - directory of the stream cache; None = metrics unknown
    cache_dir: Optional[str] = None

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Server (used by serve() only, the bootstrap may bind elsewhere)
    host: str = "0.0.0.0"
    port: int = 8081

    class Config:
        env_prefix = "FSB_ADMIN_"
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
