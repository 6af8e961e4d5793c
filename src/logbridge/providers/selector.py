"""
One-time selection of the process-wide logging backend.

Selection rules, first match wins:

1. An explicit override (``LOGBRIDGE_CORE__CONTEXT_FACTORY``) that can be
   loaded and instantiated.
2. The highest-priority provider found by `ProviderRegistry`.
3. The built-in fallback backend, in degraded mode.

The result is fixed for the lifetime of the selector. Callers cache context
handles, so the backend identity must never change under them.
"""

from __future__ import annotations

import threading
from enum import Enum
from typing import Callable

from pydantic import ValidationError

from ..core import diagnostics
from ..core.settings import Settings
from ..spi import LoggerContextFactory
from .descriptor import ProviderDescriptor
from .registry import ProviderRegistry, instantiate_factory

FallbackFactory = Callable[[Settings], LoggerContextFactory]


class SelectionState(str, Enum):
    UNRESOLVED = "unresolved"
    OVERRIDE = "override"
    DISCOVERED = "discovered"
    FALLBACK = "fallback"


def _default_fallback(settings: Settings) -> LoggerContextFactory:
    from ..simple import SimpleLoggerContextFactory

    return SimpleLoggerContextFactory(settings)


class ContextFactorySelector:
    """Write-once cell holding the selected `LoggerContextFactory`.

    `resolve()` runs selection at most once even when many threads race on
    first use; afterwards it returns the stored factory without locking.
    Nothing raised during selection escapes: the worst outcome is the
    fallback backend.
    """

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        registry: ProviderRegistry | None = None,
        fallback: FallbackFactory | None = None,
    ) -> None:
        self._settings = settings
        self._registry = registry
        self._fallback = fallback or _default_fallback
        self._factory: LoggerContextFactory | None = None
        self._state = SelectionState.UNRESOLVED
        self._candidates: tuple[ProviderDescriptor, ...] = ()
        self._resolved = threading.Event()
        self._lock = threading.Lock()

    @property
    def factory(self) -> LoggerContextFactory | None:
        """The selected factory, or None before `resolve()` has run."""
        return self._factory

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def candidates(self) -> tuple[ProviderDescriptor, ...]:
        """Descriptors found by discovery, ascending priority."""
        return self._candidates

    @property
    def is_resolved(self) -> bool:
        return self._resolved.is_set()

    def resolve(self) -> LoggerContextFactory:
        if not self._resolved.is_set():
            with self._lock:
                if not self._resolved.is_set():
                    factory, state = self._select()
                    self._factory = factory
                    self._state = state
                    self._resolved.set()
        assert self._factory is not None
        return self._factory

    def _load_settings(self) -> Settings:
        if self._settings is not None:
            return self._settings
        try:
            return Settings()
        except ValidationError as exc:
            diagnostics.exception(
                "providers", "invalid logbridge settings, using defaults", exc
            )
            return Settings.model_construct()

    def _select(self) -> tuple[LoggerContextFactory, SelectionState]:
        settings = self._load_settings()

        override = settings.core.context_factory
        if override:
            created = instantiate_factory(override, source="override")
            if created.ok and created.value is not None:
                diagnostics.debug(
                    "providers", "using configured context factory", factory=override
                )
                return created.value, SelectionState.OVERRIDE
            diagnostics.error(
                "providers",
                "unable to create configured context factory",
                factory=override,
                error=str(created.error),
            )

        registry = self._registry or ProviderRegistry(settings=settings)
        try:
            candidates = registry.discover()
        except Exception as exc:
            diagnostics.exception("providers", "provider discovery failed", exc)
            candidates = []
        self._candidates = tuple(candidates)

        if candidates:
            winner = candidates[-1]
            if len(candidates) > 1:
                diagnostics.warn(
                    "providers",
                    "multiple logging implementations found",
                    candidates=[
                        {
                            "factory": d.factory_name,
                            "priority": d.priority,
                            "source": d.source,
                        }
                        for d in candidates
                    ],
                    selected=winner.factory_name,
                )
            return winner.factory, SelectionState.DISCOVERED

        fallback = self._fallback(settings)
        diagnostics.error(
            "providers",
            "unable to locate a logging implementation, using fallback",
            fallback=f"{type(fallback).__module__}.{type(fallback).__qualname__}",
        )
        return fallback, SelectionState.FALLBACK


# Process-wide selector
_selector = ContextFactorySelector()


def get_selector() -> ContextFactorySelector:
    return _selector


def get_factory() -> LoggerContextFactory:
    """Return the process-wide factory, selecting it on first use."""
    return _selector.resolve()


def _reset_selector(selector: ContextFactorySelector | None = None) -> None:
    """Replace the process-wide selector (for testing only).

    Warning:
        Production code must never call this; loggers already handed out
        keep pointing at the previous backend.
    """
    global _selector
    _selector = selector or ContextFactorySelector()


__all__ = [
    "SelectionState",
    "ContextFactorySelector",
    "get_selector",
    "get_factory",
]
