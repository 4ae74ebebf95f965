"""Runtime settings for the stop finder, read from STOPFINDER_* environment variables."""

import os
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "STOPFINDER_"

GTFS_STATIC_URL = "https://catabus.com/wp-content/uploads/google_transit.zip"


class Settings(BaseModel):
    feed_url: str = GTFS_STATIC_URL
    feed_path: Optional[Path] = None
    cache_dir: Path = Path("cache")
    cache_max_age: int = Field(default=86400, ge=0)  # seconds
    download_timeout: float = Field(default=10.0, gt=0)  # seconds
    node_capacity: int = Field(default=4, ge=1)
    max_depth: Optional[int] = Field(default=24, ge=1)
    padding_km: float = Field(default=0.5, ge=0)
    log_level: str = "INFO"

    @field_validator("max_depth", mode="before")
    @classmethod
    def _parse_unbounded(cls, value):
        if isinstance(value, str) and value.strip().lower() in ("", "none", "off"):
            return None
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from the environment, ignoring unset variables."""
        if environ is None:
            environ = os.environ
        values = {}
        for name in cls.model_fields:
            key = ENV_PREFIX + name.upper()
            if key in environ:
                values[name] = environ[key]
        return cls(**values)
