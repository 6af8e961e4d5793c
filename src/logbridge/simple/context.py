from __future__ import annotations

import sys
import threading
from typing import IO, Hashable

from ..core.settings import Settings
from ..isolation import ContextCache
from ..message import MessageFactory
from .logger import SimpleLogger


class SimpleLoggerContext:
    """Logger cache for one isolation boundary of the fallback backend."""

    def __init__(
        self,
        boundary: Hashable | None = None,
        *,
        level: str = "ERROR",
        stream_name: str = "stderr",
    ) -> None:
        self.boundary = boundary
        self.level = level
        self._stream_name = stream_name
        self._loggers: dict[str, SimpleLogger] = {}
        self._lock = threading.Lock()
        self._write_lock = threading.Lock()

    def _stream(self) -> IO[str]:
        # Resolved per write so redirected stdio (e.g. capsys) is honoured
        return sys.stdout if self._stream_name == "stdout" else sys.stderr

    def get_logger(
        self, name: str, message_factory: MessageFactory | None = None
    ) -> SimpleLogger:
        # The first request for a name fixes its message factory
        name = name or ""
        logger = self._loggers.get(name)
        if logger is not None:
            return logger
        with self._lock:
            logger = self._loggers.get(name)
            if logger is None:
                logger = SimpleLogger(
                    name,
                    level=self.level,
                    stream=self._stream,
                    message_factory=message_factory,
                    lock=self._write_lock,
                )
                self._loggers[name] = logger
            return logger

    def has_logger(self, name: str) -> bool:
        return (name or "") in self._loggers

    def __repr__(self) -> str:
        return f"SimpleLoggerContext(boundary={self.boundary!r})"


class SimpleLoggerContextFactory:
    """Fallback backend: plain text lines on stderr, one context per boundary."""

    name = "simple"

    def __init__(self, settings: Settings | None = None) -> None:
        cfg = (settings or Settings()).core
        self._level = cfg.simple_level
        self._stream_name = cfg.simple_stream
        self._contexts: ContextCache[SimpleLoggerContext] = ContextCache(
            self._new_context
        )

    def _new_context(self, boundary: Hashable | None) -> SimpleLoggerContext:
        return SimpleLoggerContext(
            boundary, level=self._level, stream_name=self._stream_name
        )

    def get_context(
        self,
        fqcn: str,
        boundary: Hashable | None,
        current_context: bool,
    ) -> SimpleLoggerContext:
        return self._contexts.locate(boundary, current_context)

    def __repr__(self) -> str:
        return f"SimpleLoggerContextFactory(level={self._level!r})"
