"""Settings loader for the closet services."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


def _load_env_file(path: str = ".env") -> None:
    """Populate environment variables from a .env file if present."""

    env_path = Path(path)
    if not env_path.exists():
        return

    for line in env_path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip())


@dataclass(slots=True, frozen=True)
class ClosetSettings:
    """Runtime configuration for the closet store and its upstream services."""

    environment: str = "dev"
    log_level: str = "INFO"
    storage_root: str = "storage/closet"

    weather_base_url: str = "https://api.open-meteo.com/v1"
    geocode_base_url: str = "https://nominatim.openstreetmap.org"
    geocode_user_agent: str = "DigitalClosetApp"
    weather_timeout: float = 10.0

    vision_api_key: str = ""
    vision_base_url: str = "https://api.openai.com/v1"
    vision_model: str = "gpt-4o-mini"
    vision_timeout: float = 60.0


def _build_settings() -> ClosetSettings:
    _load_env_file()
    return ClosetSettings(
        environment=os.getenv("ENVIRONMENT", "dev"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        storage_root=os.getenv("CLOSET_STORAGE_ROOT", "storage/closet"),
        weather_base_url=os.getenv("WEATHER_BASE_URL", "https://api.open-meteo.com/v1"),
        geocode_base_url=os.getenv("GEOCODE_BASE_URL", "https://nominatim.openstreetmap.org"),
        geocode_user_agent=os.getenv("GEOCODE_USER_AGENT", "DigitalClosetApp"),
        weather_timeout=float(os.getenv("WEATHER_TIMEOUT", "10")),
        vision_api_key=os.getenv("VISION_API_KEY", ""),
        vision_base_url=os.getenv("VISION_BASE_URL", "https://api.openai.com/v1"),
        vision_model=os.getenv("VISION_MODEL", "gpt-4o-mini"),
        vision_timeout=float(os.getenv("VISION_TIMEOUT", "60")),
    )


@lru_cache(maxsize=1)
def get_settings() -> ClosetSettings:
    """Return cached settings instance."""

    return _build_settings()
