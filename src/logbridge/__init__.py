"""
Public entrypoints for logbridge.

logbridge binds exactly one logging backend per process and hands out
backend-agnostic logger contexts. The backend is chosen on first use:
an explicit ``LOGBRIDGE_CORE__CONTEXT_FACTORY`` override, otherwise the
highest-priority discovered provider, otherwise the built-in simple backend.

Example:
    >>> import logbridge
    >>> logger = logbridge.get_logger(__name__)
    >>> logger.error("payment failed for order %s", order_id)
"""

from __future__ import annotations

from typing import Any, Hashable

from . import plugins as plugins
from . import simple as simple
from ._version import __version__
from .core.settings import Settings
from .isolation import current_boundary, isolation_scope
from .message import MessageFactory
from .providers import LoggerContextLocator, get_factory, get_selector
from .spi import Logger, LoggerContext, LoggerContextFactory

__all__ = [
    "ROOT_LOGGER_NAME",
    "get_factory",
    "get_selector",
    "get_context",
    "get_logger",
    "isolation_scope",
    "current_boundary",
    "Settings",
    "Logger",
    "LoggerContext",
    "LoggerContextFactory",
    "__version__",
    "VERSION",
]

ROOT_LOGGER_NAME = ""

_FQCN = __name__
_locator = LoggerContextLocator()


def _logger_name(target: Any) -> str:
    if target is None:
        return ROOT_LOGGER_NAME
    if isinstance(target, str):
        return target
    cls = target if isinstance(target, type) else type(target)
    return f"{cls.__module__}.{cls.__qualname__}"


def get_context(
    current_context: bool = True,
    *,
    boundary: Hashable | None = None,
    caller: str | None = None,
) -> LoggerContext:
    """Return a logger context from the selected backend.

    Args:
        current_context: True for the single process-wide context; False for
            the context of the caller's isolation boundary.
        boundary: Explicit isolation boundary instead of the inferred one.
        caller: Identity of the calling component, for backend diagnostics.
    """
    return _locator.get_context(caller or _FQCN, boundary, current_context)


def get_logger(
    name: Any = None,
    message_factory: MessageFactory | None = None,
    *,
    caller: str | None = None,
) -> Logger:
    """Return a named logger from the caller's isolation boundary.

    ``name`` may be a string, a class (``module.QualName``), any other object
    (its class is used) or None for the root logger.
    """
    context = _locator.get_context(caller or _FQCN, None, False)
    if message_factory is None:
        return context.get_logger(_logger_name(name))
    return context.get_logger(_logger_name(name), message_factory)


VERSION = __version__
