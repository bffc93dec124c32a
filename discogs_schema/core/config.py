import os
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

# The .env file lives at the project root, one level above the package.
_config_dir = os.path.dirname(os.path.abspath(__file__))
_package_dir = os.path.dirname(_config_dir)
_project_root = os.path.dirname(_package_dir)
_dotenv_path = os.path.join(_project_root, '.env')

ASYNC_DRIVER = "postgresql+asyncpg"

# Prefixes seen in hosting providers and docker-compose files.
_SYNC_PREFIXES = ("postgres://", "postgresql://", "postgresql+psycopg2://")


def normalize_database_url(raw_url: str) -> str:
    """Rewrite a plain PostgreSQL URL so it uses the asyncpg driver."""
    for prefix in _SYNC_PREFIXES:
        if raw_url.startswith(prefix):
            return raw_url.replace(prefix, f"{ASYNC_DRIVER}://", 1)
    return raw_url


class Settings(BaseSettings):
    DATABASE_URL: Optional[str] = None

    # Used to build the URL when DATABASE_URL is not set
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "dev"
    DB_PASSWORD: str = "dev_pass"
    DB_NAME: str = "discogs"

    SQL_ECHO: bool = False

    model_config = SettingsConfigDict(
        env_file=_dotenv_path,
        env_file_encoding='utf-8',
        extra='ignore'
    )

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return normalize_database_url(self.DATABASE_URL)
        url = URL.create(
            ASYNC_DRIVER,
            username=self.DB_USER,
            password=self.DB_PASSWORD,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
        )
        return url.render_as_string(hide_password=False)


settings = Settings()
