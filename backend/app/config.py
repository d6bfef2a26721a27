"""
backend/app/config.py

Purpose:
    Central settings loading for the sports odds backend.

Dependencies:
    - pydantic-settings
    - pathlib
"""

from pathlib import Path

from pydantic_settings import BaseSettings

# Prefer backend/.env, fallback to project-root .env.
_BACKEND_ENV_FILE = Path(__file__).resolve().parent.parent / ".env"
_ROOT_ENV_FILE = Path(__file__).resolve().parent.parent.parent / ".env"


class Settings(BaseSettings):
    BACKEND_CORS_ORIGINS: str = "http://localhost:5173"

    # Upstream sports game provider
    SPORTS_GAME_PROVIDER_BASE_URL: str = "http://100.30.62.142"
    SPORTS_PROVIDER_TIMEOUT_SECONDS: float = 10.0

    # Cache TTLs per endpoint class
    SPORTS_SERIES_CACHE_TTL_SECONDS: int = 3 * 60 * 60
    SPORTS_MATCHES_CACHE_TTL_SECONDS: int = 2 * 60 * 60
    SPORTS_MARKETS_CACHE_TTL_SECONDS: int = 4 * 60 * 60
    SPORTS_BOOKMAKERS_CACHE_TTL_SECONDS: int = 4 * 60 * 60

    # Horse racing (7) and greyhound racing (4339)
    SPORTS_RACING_EVENT_TYPE_IDS: str = "7,4339"

    @property
    def racing_event_type_ids(self) -> frozenset[str]:
        return frozenset(
            part.strip()
            for part in self.SPORTS_RACING_EVENT_TYPE_IDS.split(",")
            if part.strip()
        )

    model_config = {
        "env_file": (str(_BACKEND_ENV_FILE), str(_ROOT_ENV_FILE)),
        "extra": "ignore",
    }


settings = Settings()
