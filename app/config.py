"""Application configuration loaded from environment variables."""

import os
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Application settings loaded from environment."""

    def __init__(self):
        self.unsplash_access_key: str = os.getenv("UNSPLASH_ACCESS_KEY", "")
        self.database_url: str = os.getenv(
            "DATABASE_URL", "sqlite+aiosqlite:///./sipsnap.db"
        )
        self.session_cookie_name: str = os.getenv("SESSION_COOKIE_NAME", "sipsnap.sid")
        self.session_cookie_secure: bool = _env_flag("SESSION_COOKIE_SECURE", False)
        # connect-mongo style default: two weeks
        self.session_max_age_seconds: int = int(
            os.getenv("SESSION_MAX_AGE_SECONDS", str(14 * 24 * 60 * 60))
        )
        self.rate_limit_enabled: bool = _env_flag("RATE_LIMIT_ENABLED", False)
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO")
        self.log_format: str = os.getenv("LOG_FORMAT", "text")

    @property
    def unsplash_api_base_url(self) -> str:
        return "https://api.unsplash.com"

    @property
    def cocktaildb_api_base_url(self) -> str:
        return "https://www.thecocktaildb.com/api/json/v1/1"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
