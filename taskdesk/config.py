"""Environment configuration for the Taskdesk backend."""

import os
import re
from dataclasses import dataclass, field
from datetime import timedelta
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

# Dev servers the SPA is usually served from
DEFAULT_CORS_ORIGINS = (
    "http://localhost:5173",
    "http://localhost:5174",
    "http://localhost:5175",
)

DURATION_PATTERN = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
DURATION_UNITS = {"": "seconds", "s": "seconds", "m": "minutes", "h": "hours", "d": "days"}


def parse_duration(value: str) -> timedelta:
    """Parse a duration such as ``7d``, ``12h``, ``30m`` or ``3600``."""
    match = DURATION_PATTERN.match(value.lower())
    if match is None:
        raise ValueError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return timedelta(**{DURATION_UNITS[unit]: int(amount)})


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """Application settings.

    Built once at startup and handed to the app; business logic receives
    the values it needs as arguments instead of reading the environment.
    """

    DATABASE_URL: str = "sqlite:///./taskdesk.db"
    DATABASE_SSL: bool = False
    JWT_SECRET: str = ""
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_IN: timedelta = timedelta(days=7)
    BCRYPT_ROUNDS: int = 12
    FRONTEND_URLS: tuple[str, ...] = field(default_factory=tuple)
    FRONTEND_DIST: str = ""
    LOG_LEVEL: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables (and ``.env``)."""
        frontend_urls = tuple(
            url.strip()
            for url in os.getenv("FRONTEND_URL", "").split(",")
            if url.strip()
        )
        return cls(
            DATABASE_URL=os.getenv("DATABASE_URL", "sqlite:///./taskdesk.db"),
            DATABASE_SSL=_env_bool("DATABASE_SSL"),
            JWT_SECRET=os.getenv("JWT_SECRET", ""),
            JWT_EXPIRES_IN=parse_duration(os.getenv("JWT_EXPIRES_IN", "7d")),
            BCRYPT_ROUNDS=int(os.getenv("BCRYPT_ROUNDS", "12")),
            FRONTEND_URLS=frontend_urls,
            FRONTEND_DIST=os.getenv("FRONTEND_DIST", ""),
            LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    @property
    def cors_origins(self) -> list[str]:
        """Configured frontend origins plus the local dev servers, deduplicated."""
        origins = [*self.FRONTEND_URLS, *DEFAULT_CORS_ORIGINS]
        return list(dict.fromkeys(origin for origin in origins if origin))

    def validate(self) -> None:
        """Validate that required settings are present."""
        if not self.DATABASE_URL:
            raise ValueError("DATABASE_URL environment variable is required")
        if not self.JWT_SECRET:
            raise ValueError("JWT_SECRET environment variable is required")
        if not 4 <= self.BCRYPT_ROUNDS <= 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.from_env()
