"""Application configuration."""
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "development"

    # Either a full URL or the individual DB_* parts
    database_url: Optional[str] = None
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "products"
    db_user: str = "postgres"
    db_password: str = ""

    # Only origin allowed to call the API from a browser
    frontend_url: str = "http://localhost:5173"

    log_level: str = "INFO"
    log_file: Optional[str] = "app.log"

    api_title: str = "Products API"
    api_version: str = "1.0.0"
    api_description: str = "API Docs for Products"

    @property
    def sqlalchemy_database_url(self) -> str:
        """Database URL, assembled from the DB_* parts when not given."""
        if self.database_url:
            return self.database_url
        return URL.create(
            "postgresql+psycopg2",
            username=self.db_user,
            password=self.db_password or None,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        ).render_as_string(hide_password=False)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
