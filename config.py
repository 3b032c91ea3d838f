"""
Application configuration.

Settings are pydantic models grouped by section. Defaults can be overridden
with environment variables (PTF_LOG_LEVEL, PTF_DEBUG, PTF_HOST, PTF_PORT,
PTF_CORS_ORIGINS, PTF_MAX_PIXELS, ENVIRONMENT).
"""

import os
from functools import lru_cache
from typing import Any, Dict, List

from pydantic import BaseModel, Field, field_validator

from core.constants import ImageConstants


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class SystemSettings(BaseModel):
    log_level: str = Field(default="INFO", description="Root logging level")
    debug: bool = Field(default=False, description="Enable debug mode (auto-reload)")

    @field_validator("log_level")
    @classmethod
    def normalize_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {value}")
        return level


class APISettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)
    cors_enabled: bool = True
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])


class EngineSettings(BaseModel):
    max_pixels: int = Field(
        default=ImageConstants.DEFAULT_MAX_PIXELS,
        ge=1,
        description="Largest decoded image accepted, in pixels",
    )


class Settings(BaseModel):
    environment: str = "development"
    system: SystemSettings = Field(default_factory=SystemSettings)
    api: APISettings = Field(default_factory=APISettings)
    engine: EngineSettings = Field(default_factory=EngineSettings)

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from defaults plus environment overrides."""
        system: Dict[str, Any] = {"debug": _env_bool("PTF_DEBUG", False)}
        if os.getenv("PTF_LOG_LEVEL"):
            system["log_level"] = os.getenv("PTF_LOG_LEVEL")

        api: Dict[str, Any] = {}
        if os.getenv("PTF_HOST"):
            api["host"] = os.getenv("PTF_HOST")
        if os.getenv("PTF_PORT"):
            api["port"] = int(os.getenv("PTF_PORT"))
        if os.getenv("PTF_CORS_ORIGINS"):
            api["cors_origins"] = [o.strip() for o in os.getenv("PTF_CORS_ORIGINS").split(",")]

        engine: Dict[str, Any] = {}
        if os.getenv("PTF_MAX_PIXELS"):
            engine["max_pixels"] = int(os.getenv("PTF_MAX_PIXELS"))

        return cls(
            environment=os.getenv("ENVIRONMENT", "development"),
            system=SystemSettings(**system),
            api=APISettings(**api),
            engine=EngineSettings(**engine),
        )

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings.from_env()
