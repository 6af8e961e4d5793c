"""Isolation boundaries for logger contexts.

An isolation boundary is any hashable value naming a domain that should get
its own logger context, e.g. one sub-application in a multi-tenant process.
Code running inside ``isolation_scope(boundary)`` is inferred to belong to
that boundary when it asks for a context without naming one explicitly.

Example:
    >>> from logbridge.isolation import isolation_scope
    >>> with isolation_scope("tenant-a"):
    ...     logger = logbridge.get_logger("orders")  # tenant-a's context
"""

from __future__ import annotations

import contextvars
import threading
from contextlib import contextmanager
from typing import Callable, Generic, Hashable, Iterator, TypeVar

__all__ = ["isolation_scope", "current_boundary", "ContextCache"]

C = TypeVar("C")

_boundary_var: contextvars.ContextVar[Hashable | None] = contextvars.ContextVar(
    "logbridge_isolation_boundary", default=None
)


@contextmanager
def isolation_scope(boundary: Hashable) -> Iterator[Hashable]:
    """Mark the enclosed code as running inside ``boundary``."""
    token = _boundary_var.set(boundary)
    try:
        yield boundary
    finally:
        _boundary_var.reset(token)


def current_boundary() -> Hashable | None:
    """Return the inferred boundary of the caller, or None."""
    return _boundary_var.get()


class ContextCache(Generic[C]):
    """Per-boundary context store for backends.

    One context per boundary key, created on first request and returned
    unchanged afterwards. Requests for the current context only, or with no
    explicit or inferred boundary, share a single process-wide context.
    """

    def __init__(self, create: Callable[[Hashable | None], C]) -> None:
        self._create = create
        self._contexts: dict[Hashable, C] = {}
        self._default: C | None = None
        self._lock = threading.Lock()

    def locate(self, boundary: Hashable | None, current_context_only: bool) -> C:
        if current_context_only:
            return self.default()
        key = boundary if boundary is not None else current_boundary()
        if key is None:
            return self.default()
        ctx = self._contexts.get(key)
        if ctx is not None:
            return ctx
        with self._lock:
            ctx = self._contexts.get(key)
            if ctx is None:
                ctx = self._create(key)
                self._contexts[key] = ctx
            return ctx

    def default(self) -> C:
        ctx = self._default
        if ctx is not None:
            return ctx
        with self._lock:
            if self._default is None:
                self._default = self._create(None)
            return self._default

    def boundaries(self) -> list[Hashable]:
        with self._lock:
            return list(self._contexts)
