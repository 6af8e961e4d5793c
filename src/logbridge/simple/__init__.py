"""
Minimal built-in backend installed when no provider can be bound.
"""

from __future__ import annotations

from ..providers.registry import register_context_factory
from .context import SimpleLoggerContext, SimpleLoggerContextFactory
from .logger import SimpleLogger

register_context_factory("simple", SimpleLoggerContextFactory)

__all__ = [
    "SimpleLogger",
    "SimpleLoggerContext",
    "SimpleLoggerContextFactory",
]
