"""Application configuration and settings management."""

from typing import Annotated, Any

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="SLEIGH_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Sleigh Route API"
    api_prefix: str = "/api"
    geocoder_base_url: str = Field(
        default="https://nominatim.openstreetmap.org",
        description="Base URL of a Nominatim-compatible geocoding service.",
    )
    geocoder_user_agent: str = Field(
        default="sleighroute/0.1",
        description="User-Agent sent with geocoding requests (required by the Nominatim usage policy).",
    )
    geocoder_timeout_seconds: float = Field(default=10.0, gt=0.0)
    geocoder_max_retries: int = Field(default=3, ge=0)
    geocoder_backoff_seconds: float = Field(default=1.0, ge=0.0)
    geocoder_max_parallel_requests: int = Field(default=4, ge=1)
    max_start_candidates: int = Field(
        default=10,
        ge=1,
        description="Number of input positions tried as starting stop when no start is pinned.",
    )
    two_opt_max_iterations: int = Field(
        default=100,
        ge=0,
        description="Upper bound on 2-opt improvement sweeps per tour.",
    )
    sleigh_speed_kmh: float = Field(default=1000.0, gt=0.0)
    frontend_allowed_origins: Annotated[tuple[str, ...], NoDecode] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
