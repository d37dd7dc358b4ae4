"""Centralized slot map settings using pydantic-settings.

Every field can be overridden from the environment with the ``SLOTMAP_``
prefix and ``__`` between section and field, for example
``SLOTMAP_TABLE__CAPACITY=4096`` or ``SLOTMAP_LOGGING__FORMAT=json``.
"""
from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from slotmap.errors.fatal import ConfigurationError

_SUPPORTED_BITS = (8, 16, 32, 64)


class TableSettings(BaseModel):
    capacity: int = Field(1024, ge=0)
    # Index / generation widths of issued keys, in bits
    index_bits: int = Field(32)
    generation_bits: int = Field(32)

    @field_validator("index_bits", "generation_bits")
    @classmethod
    def _check_bits(cls, value: int) -> int:
        if value not in _SUPPORTED_BITS:
            raise ValueError(f"must be one of {_SUPPORTED_BITS}, got {value}")
        return value


class LoggingSettings(BaseModel):
    level: str = Field("INFO")
    format: Literal["text", "json"] = Field("text")
    log_dir: Optional[str] = Field(None)


class MetricsSettings(BaseModel):
    enabled: bool = Field(False)
    port: int = Field(8000)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SLOTMAP_", env_nested_delimiter="__")

    table: TableSettings = Field(default_factory=TableSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    metrics: MetricsSettings = Field(default_factory=MetricsSettings)


def load_settings() -> Settings:
    """Read a fresh ``Settings`` from the current environment.

    Raises ``ConfigurationError`` when a ``SLOTMAP_*`` variable is invalid.
    """
    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigurationError("Invalid slot map settings", context={"errors": exc.errors()}) from exc
