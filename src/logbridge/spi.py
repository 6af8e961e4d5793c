"""
Backend service-provider interface.

A logging backend plugs into the facade by shipping a `LoggerContextFactory`.
The facade only ever talks to a backend through these protocols.
"""

from __future__ import annotations

from typing import Any, Hashable, Protocol, runtime_checkable

from .message import MessageFactory


@runtime_checkable
class Logger(Protocol):
    """Named logger handle returned by a backend context."""

    name: str

    def is_enabled(self, level: str) -> bool: ...

    def log(self, level: str, message: Any, *args: Any, **kwargs: Any) -> None: ...

    def debug(self, message: Any, *args: Any, **kwargs: Any) -> None: ...

    def info(self, message: Any, *args: Any, **kwargs: Any) -> None: ...

    def warn(self, message: Any, *args: Any, **kwargs: Any) -> None: ...

    def error(self, message: Any, *args: Any, **kwargs: Any) -> None: ...

    def fatal(self, message: Any, *args: Any, **kwargs: Any) -> None: ...


@runtime_checkable
class LoggerContext(Protocol):
    """Isolation-scoped source of named loggers."""

    def get_logger(
        self, name: str, message_factory: MessageFactory | None = None
    ) -> Logger: ...

    def has_logger(self, name: str) -> bool: ...


@runtime_checkable
class LoggerContextFactory(Protocol):
    """Entry point of a backend.

    Args of ``get_context``:
        fqcn: Identity of the calling component, for diagnostics only.
        boundary: Explicit isolation domain, or None to let the backend
            infer one.
        current_context: True asks for the single process-wide context.
    """

    def get_context(
        self,
        fqcn: str,
        boundary: Hashable | None,
        current_context: bool,
    ) -> LoggerContext: ...


__all__ = ["Logger", "LoggerContext", "LoggerContextFactory"]
