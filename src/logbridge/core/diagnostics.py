"""
Internal diagnostics channel.

Bootstrap and plugin code report their own problems here rather than through
the logging backend they are in the middle of selecting or building. Each
call produces a structured payload written as a single JSON line to stderr,
or handed to a writer installed for tests.

Diagnostics must never break the caller: every failure inside this module is
contained.
"""

from __future__ import annotations

import sys
import time
from typing import Any, Callable

import orjson

from .levels import get_level_priority

Writer = Callable[[dict[str, Any]], None]

# Cached threshold; None means "read settings on next emit"
_min_level: int | None = None
_writer: Writer | None = None


def _threshold() -> int:
    global _min_level
    if _min_level is None:
        try:
            from .settings import Settings

            _min_level = get_level_priority(Settings().core.diagnostics_level)
        except Exception:
            _min_level = get_level_priority("WARN")
    return _min_level


def set_writer_for_tests(writer: Writer | None) -> None:
    """Route payloads to ``writer`` instead of stderr (``None`` restores)."""
    global _writer
    _writer = writer


def set_level(level: str | None) -> None:
    """Override the threshold; ``None`` re-reads settings on next use."""
    global _min_level
    _min_level = None if level is None else get_level_priority(level)


def _default_writer(payload: dict[str, Any]) -> None:
    data = orjson.dumps(payload, default=str)
    stream = sys.stderr
    stream.write(data.decode("utf-8"))
    stream.write("\n")
    stream.flush()


def emit(level: str, component: str, message: str, **fields: Any) -> None:
    """Emit one diagnostic payload at ``level`` if above the threshold."""
    try:
        if get_level_priority(level) < _threshold():
            return
        payload: dict[str, Any] = {
            "ts": time.time(),
            "level": level,
            "component": component,
            "message": message,
        }
        payload.update(fields)
        (_writer or _default_writer)(payload)
    except Exception:
        # Contain diagnostics failures
        return


def debug(component: str, message: str, **fields: Any) -> None:
    emit("DEBUG", component, message, **fields)


def info(component: str, message: str, **fields: Any) -> None:
    emit("INFO", component, message, **fields)


def warn(component: str, message: str, **fields: Any) -> None:
    emit("WARN", component, message, **fields)


def error(component: str, message: str, **fields: Any) -> None:
    emit("ERROR", component, message, **fields)


def fatal(component: str, message: str, **fields: Any) -> None:
    emit("FATAL", component, message, **fields)


def exception(
    component: str, message: str, exc: BaseException, **fields: Any
) -> None:
    """Emit an ERROR payload describing ``exc``."""
    try:
        detail = str(exc)
    except Exception:
        detail = repr(type(exc))
    error(
        component,
        message,
        error_type=type(exc).__name__,
        error=detail,
        **fields,
    )


__all__ = [
    "emit",
    "debug",
    "info",
    "warn",
    "error",
    "fatal",
    "exception",
    "set_level",
    "set_writer_for_tests",
]
