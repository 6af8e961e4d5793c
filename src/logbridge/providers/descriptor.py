"""
Provider metadata records and descriptors.

`ProviderMetadata` is the validated form of the key/value record a discovery
source advertises. `ProviderDescriptor` is what survives discovery: the
instantiated factory plus its declared version and priority.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from ..spi import LoggerContextFactory

DEFAULT_PRIORITY = -1


class ProviderMetadata(BaseModel):
    """Validated provider metadata record.

    Keys (aliases in parentheses):
        context_factory (LoggerContextFactory): registered factory name,
            import path, or the factory class itself
        api_version (APIVersion): facade API version the provider targets
        priority (FactoryPriority): integer weight, higher wins; -1 if absent
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        arbitrary_types_allowed=True,
    )

    context_factory: Any = Field(
        validation_alias=AliasChoices("context_factory", "LoggerContextFactory"),
    )
    api_version: str | None = Field(
        default=None,
        validation_alias=AliasChoices("api_version", "APIVersion"),
    )
    priority: int = Field(
        default=DEFAULT_PRIORITY,
        validation_alias=AliasChoices("priority", "FactoryPriority"),
    )

    @field_validator("context_factory")
    @classmethod
    def _non_empty_ref(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("context_factory is required")
        if isinstance(value, str):
            value = value.strip()
            if not value:
                raise ValueError("context_factory must not be empty")
        return value

    @field_validator("api_version", mode="before")
    @classmethod
    def _malformed_version_is_absent(cls, value: Any) -> Any:
        # Non-string versions fail the version gate rather than parsing
        return value if isinstance(value, str) else None

    @field_validator("priority", mode="before")
    @classmethod
    def _blank_priority_is_default(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_PRIORITY
        return value


@dataclass(frozen=True)
class ProviderDescriptor:
    """A discovered, instantiated provider."""

    factory: LoggerContextFactory
    api_version: str | None = None
    priority: int = DEFAULT_PRIORITY
    source: str = ""

    @property
    def factory_name(self) -> str:
        cls = type(self.factory)
        return f"{cls.__module__}.{cls.__qualname__}"


__all__ = ["DEFAULT_PRIORITY", "ProviderMetadata", "ProviderDescriptor"]
