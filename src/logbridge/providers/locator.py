"""Per-call resolution of logger contexts through the selected backend."""

from __future__ import annotations

from typing import Callable, Hashable

from ..core.errors import BootstrapInvariantError
from ..spi import LoggerContext, LoggerContextFactory
from .selector import get_factory

FactoryProvider = Callable[[], "LoggerContextFactory | None"]


class LoggerContextLocator:
    """Stateless router from context requests to the selected backend.

    The locator neither caches nor mutates anything; reference stability of
    contexts is the backend's job.
    """

    def __init__(self, factory_provider: FactoryProvider | None = None) -> None:
        self._factory_provider = factory_provider or get_factory

    def get_context(
        self,
        caller_realm: str,
        isolation_boundary: Hashable | None = None,
        current_context_only: bool = False,
    ) -> LoggerContext:
        """Return the backend context for the caller.

        Args:
            caller_realm: Identity of the calling component, for diagnostics.
            isolation_boundary: Explicit isolation domain; None lets the
                backend infer it.
            current_context_only: True requests the single process-wide
                context regardless of isolation domain.

        Raises:
            BootstrapInvariantError: If no backend is bound.
        """
        factory = self._factory_provider()
        if factory is None:
            raise BootstrapInvariantError(
                "No LoggerContextFactory is bound; bootstrap did not complete",
                caller=caller_realm,
            )
        return factory.get_context(
            caller_realm, isolation_boundary, current_context_only
        )


__all__ = ["LoggerContextLocator"]
