import logging
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

_DEFAULT_DATABASE_URL = "sqlite:///./data/cemetery.db"


class Settings(BaseSettings):
    APP_ENV: str = "development"
    DATABASE_URL: str = _DEFAULT_DATABASE_URL
    SQL_ECHO: bool = False
    SQLITE_BUSY_TIMEOUT: float = 30.0

    class Config:
        env_file = ".env"


settings = Settings()

if settings.DATABASE_URL.startswith("sqlite"):
    if settings.APP_ENV == "production":
        logger.warning("SQLite locks the whole database for every write, use a server database in production")
    elif settings.DATABASE_URL == _DEFAULT_DATABASE_URL:
        logger.info("Using default database %s", _DEFAULT_DATABASE_URL)
