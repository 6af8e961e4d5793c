"""
Log event model handed from loggers to layouts and appenders.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Any, Mapping

from .levels import normalize_level


@dataclass(frozen=True)
class SourceLocation:
    """Call site captured when location information is requested."""

    module: str
    function: str
    filename: str
    lineno: int


@dataclass(frozen=True)
class LogEvent:
    """A single log record as seen by layouts.

    ``message`` is either a plain string or a message object exposing
    ``get_formatted_message()`` (see `logbridge.message`).
    """

    logger_name: str
    level: str
    message: Any
    timestamp_ms: int = field(default_factory=lambda: int(time.time() * 1000))
    thread_name: str = field(default_factory=lambda: threading.current_thread().name)
    context_stack: tuple[str, ...] = ()
    context_map: Mapping[str, Any] = field(default_factory=dict)
    thrown: BaseException | None = None
    source: SourceLocation | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "level", normalize_level(self.level))
        if self.logger_name is None:
            object.__setattr__(self, "logger_name", "")

    def formatted_message(self) -> str:
        """Render the message body as text."""
        msg = self.message
        if msg is None:
            return ""
        render = getattr(msg, "get_formatted_message", None)
        if callable(render):
            return str(render())
        return str(msg)


__all__ = ["LogEvent", "SourceLocation"]
