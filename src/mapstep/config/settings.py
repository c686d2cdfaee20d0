"""Runtime configuration for mapstep's logging surface."""

from __future__ import annotations

import logging
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class MapStepSettings(BaseSettings):
    """Logging flags resolved from the environment (or ``.env``)."""

    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
    )

    log_level: LogLevelName = Field(default="WARNING", alias="MAPSTEP_LOG_LEVEL")
    json_logs: bool = Field(default=False, alias="MAPSTEP_JSON_LOGS")
    log_max_items: int = Field(default=200, alias="MAPSTEP_LOG_MAX_ITEMS", gt=0)

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value


def load_settings() -> MapStepSettings:
    instance = MapStepSettings()
    logging.getLogger("mapstep.settings").debug("mapstep settings loaded: %r", instance)
    return instance


__all__ = ["MapStepSettings", "LogLevelName", "load_settings"]
