"""
Configuration models for logbridge using Pydantic v2 Settings.

Settings are read from the environment (``LOGBRIDGE_`` prefix, ``__`` as the
nested delimiter), e.g. ``LOGBRIDGE_CORE__CONTEXT_FACTORY=simple``.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import (  # type: ignore[import-not-found]
    BaseSettings,
    SettingsConfigDict,
)

from .levels import normalize_level

# Keep explicit version to allow schema gating and forward migrations later
LATEST_CONFIG_SCHEMA_VERSION = "1.0"

DEFAULT_PROVIDER_GROUP = "logbridge.providers"
DEFAULT_PLUGIN_GROUP = "logbridge.plugins"


class CoreSettings(BaseModel):
    """Bootstrap, discovery and diagnostics settings."""

    context_factory: str | None = Field(
        default=None,
        description=(
            "Explicit context factory override: a registered factory name or "
            "an import path such as 'package.module:Factory'"
        ),
    )
    provider_entry_point_group: str = Field(
        default=DEFAULT_PROVIDER_GROUP,
        description="Entry point group scanned for provider metadata",
    )
    plugin_entry_point_group: str = Field(
        default=DEFAULT_PLUGIN_GROUP,
        description="Entry point group scanned for component plugins",
    )
    provider_paths: list[str] = Field(
        default_factory=list,
        description=(
            "Extra directories searched for logbridge-provider.properties files"
        ),
    )
    diagnostics_level: Literal["DEBUG", "INFO", "WARN", "ERROR", "FATAL", "OFF"] = (
        Field(
            default="WARN",
            description="Minimum level emitted on the internal diagnostics channel",
        )
    )
    simple_level: str = Field(
        default="ERROR",
        description="Threshold of loggers created by the fallback backend",
    )
    simple_stream: Literal["stderr", "stdout"] = Field(
        default="stderr",
        description="Stream the fallback backend writes to",
    )

    @field_validator("context_factory")
    @classmethod
    def _blank_override_is_unset(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        return value or None

    @field_validator("simple_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        return normalize_level(value)


class Settings(BaseSettings):
    """Top-level configuration model with versioning and core settings."""

    schema_version: str = Field(default=LATEST_CONFIG_SCHEMA_VERSION)

    core: CoreSettings = Field(default_factory=CoreSettings)

    model_config = SettingsConfigDict(
        env_prefix="LOGBRIDGE_",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    def to_dict(self) -> dict[str, object]:
        from typing import cast

        return cast(
            dict[str, object],
            self.model_dump(by_alias=True, exclude_none=True),
        )


__all__ = [
    "CoreSettings",
    "Settings",
    "LATEST_CONFIG_SCHEMA_VERSION",
    "DEFAULT_PROVIDER_GROUP",
    "DEFAULT_PLUGIN_GROUP",
]
