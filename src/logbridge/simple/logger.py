from __future__ import annotations

import sys
import threading
import time
import traceback
from typing import IO, Any, Callable

from ..core.levels import get_level_priority, normalize_level
from ..message import DEFAULT_MESSAGE_FACTORY, MessageFactory


class SimpleLogger:
    """Line-oriented logger used when no real backend is available.

    - Writes ``<time> <LEVEL> <name> <message>`` lines, followed by the
      traceback when an exception is attached
    - Extra keyword fields are appended as ``key=value`` pairs; ``exc_info``
      is accepted as an alias for ``exc``
    - Never raises upstream; write errors are contained
    """

    def __init__(
        self,
        name: str,
        *,
        level: str,
        stream: Callable[[], IO[str]],
        message_factory: MessageFactory | None = None,
        lock: threading.Lock | None = None,
    ) -> None:
        self.name = name
        self.level = normalize_level(level)
        self.message_factory = message_factory or DEFAULT_MESSAGE_FACTORY
        self._threshold = get_level_priority(self.level)
        self._stream = stream
        self._lock = lock or threading.Lock()

    def is_enabled(self, level: str) -> bool:
        return get_level_priority(level) >= self._threshold

    def log(
        self,
        level: str,
        message: Any,
        /,
        *args: Any,
        exc: BaseException | None = None,
        **fields: Any,
    ) -> None:
        if not self.is_enabled(level):
            return
        try:
            exc_info = fields.pop("exc_info", None)
            if exc is None:
                exc = _exception_from(exc_info)
            text = self.message_factory.new_message(message, *args)
            stamp = time.strftime("%Y-%m-%d %H:%M:%S")
            line = (
                f"{stamp} {normalize_level(level)} {self.name or 'root'} "
                f"{text.get_formatted_message()}"
            )
            if fields:
                line += " " + " ".join(f"{k}={v!r}" for k, v in fields.items())
            line += "\n"
            if exc is not None:
                line += "".join(
                    traceback.format_exception(type(exc), exc, exc.__traceback__)
                )
            with self._lock:
                out = self._stream()
                out.write(line)
                out.flush()
        except Exception:
            # Contain write errors; do not propagate
            return None

    def trace(self, message: Any, /, *args: Any, **kwargs: Any) -> None:
        self.log("TRACE", message, *args, **kwargs)

    def debug(self, message: Any, /, *args: Any, **kwargs: Any) -> None:
        self.log("DEBUG", message, *args, **kwargs)

    def info(self, message: Any, /, *args: Any, **kwargs: Any) -> None:
        self.log("INFO", message, *args, **kwargs)

    def warn(self, message: Any, /, *args: Any, **kwargs: Any) -> None:
        self.log("WARN", message, *args, **kwargs)

    def error(self, message: Any, /, *args: Any, **kwargs: Any) -> None:
        self.log("ERROR", message, *args, **kwargs)

    def fatal(self, message: Any, /, *args: Any, **kwargs: Any) -> None:
        self.log("FATAL", message, *args, **kwargs)

    def __repr__(self) -> str:
        return f"SimpleLogger(name={self.name!r}, level={self.level!r})"


def _exception_from(exc_info: Any) -> BaseException | None:
    """Accept ``exc_info`` the way the stdlib logging module does."""
    if isinstance(exc_info, BaseException):
        return exc_info
    if isinstance(exc_info, tuple):
        return exc_info[1] if len(exc_info) > 1 else None
    if exc_info:
        return sys.exc_info()[1]
    return None
