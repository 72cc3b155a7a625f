"""
Application Configuration

Uses Pydantic Settings for type-safe configuration.
"""

from pathlib import Path
from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator, ConfigDict


class Settings(BaseSettings):
    """Application settings with validation."""

    # === Core ===
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # === Route Cache ===
    cache_backend: str = Field(
        default="file",
        description="Where the route cache lives: 'file' or 'sql'"
    )
    cache_dir: Path = Field(
        default_factory=lambda: Path.home() / ".cache" / "workout-map",
        description="Directory for the file cache backend"
    )
    cache_key: str = Field(
        default="workout-routes-cache.json",
        description="Key (file name) of the cached route document"
    )
    cache_database_url: str = Field(
        default="sqlite:///./workout_map_cache.db",
        description="Database URL for the sql cache backend"
    )

    # === Workout Source ===
    workout_source: str = Field(
        default="demo",
        description="Workout data source: 'demo' or 'strava'"
    )
    strava_access_token: Optional[str] = Field(default=None)
    strava_api_url: str = Field(default="https://www.strava.com/api/v3")
    strava_page_size: int = Field(default=50)
    strava_max_pages: int = Field(default=10)

    # === Sync ===
    viewport_debounce_seconds: float = Field(
        default=0.4,
        description="Quiet period before a viewport change is written"
    )
    incremental_fetch: bool = Field(
        default=False,
        description="Only fetch workouts newer than the newest cached route"
    )
    fetch_timeout_seconds: Optional[float] = Field(
        default=None,
        description="Upper bound for each source call (None = transport default)"
    )
    refresh_on_startup: bool = Field(default=True)

    # === CORS ===
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:3000"],
        description="Allowed CORS origins"
    )

    @field_validator('cache_backend', 'workout_source')
    @classmethod
    def normalize_choice(cls, v: str) -> str:
        """Lowercase backend/source names."""
        return v.strip().lower()

    @field_validator('cache_backend')
    @classmethod
    def check_cache_backend(cls, v: str) -> str:
        if v not in ("file", "sql"):
            raise ValueError(f"Unknown cache backend: {v}")
        return v

    @field_validator('workout_source')
    @classmethod
    def check_workout_source(cls, v: str) -> str:
        if v not in ("demo", "strava"):
            raise ValueError(f"Unknown workout source: {v}")
        return v

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(',')]
        return v

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="WORKOUT_MAP_",
        case_sensitive=False,
        extra="ignore"
    )


# Global settings instance
settings = Settings()
