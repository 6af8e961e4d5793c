"""
Exception hierarchy for logbridge.

Bootstrap and plugin code reports most failures as `Outcome` values and
diagnostics; these exceptions are what those outcomes carry, plus the one
fatal condition (`BootstrapInvariantError`) that does propagate.
"""

from __future__ import annotations

from typing import Any


class LogbridgeError(Exception):
    """Base error carrying an optional cause and free-form context fields."""

    def __init__(
        self,
        message: str,
        *,
        cause: BaseException | None = None,
        **context: Any,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.context: dict[str, Any] = dict(context)
        if cause is not None:
            self.__cause__ = cause

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "error_type": type(self).__name__,
            "error": self.message,
        }
        if self.cause is not None:
            data["cause"] = f"{type(self.cause).__name__}: {self.cause}"
        data.update(self.context)
        return data


class ProviderError(LogbridgeError):
    """A provider source could not be used."""


class ProviderMetadataError(ProviderError):
    """A provider metadata record is unreadable or malformed."""


class ProviderLoadError(ProviderError):
    """A provider's context factory could not be located or instantiated."""


class BootstrapInvariantError(LogbridgeError):
    """No context factory is bound at use time.

    The selector always installs a fallback, so reaching this indicates a
    bootstrap defect rather than a runtime condition.
    """


class PluginError(LogbridgeError):
    """Base class for plugin registration and build failures."""


class PluginNotFoundError(PluginError):
    """No factory binding is registered under the requested name."""


class PluginBuildError(PluginError):
    """A component declaration could not be turned into an instance."""


class CoercionError(PluginBuildError):
    """An attribute string could not be converted to its declared type."""


__all__ = [
    "LogbridgeError",
    "ProviderError",
    "ProviderMetadataError",
    "ProviderLoadError",
    "BootstrapInvariantError",
    "PluginError",
    "PluginNotFoundError",
    "PluginBuildError",
    "CoercionError",
]
