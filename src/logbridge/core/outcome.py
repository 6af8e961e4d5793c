"""
Typed results for fallible bootstrap and build steps.

Discovery, instantiation and component builds return an `Outcome` instead
of raising, so a caller iterating many sources or declarations decides per
item whether to keep, skip or report it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from .errors import LogbridgeError

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result of one fallible step, scoped to a single source or declaration."""

    value: T | None = None
    error: LogbridgeError | None = None
    source: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T, *, source: str = "") -> Outcome[T]:
        return cls(value=value, source=source)

    @classmethod
    def failure(cls, error: LogbridgeError, *, source: str = "") -> Outcome[T]:
        return cls(error=error, source=source)

    def unwrap(self) -> T:
        """Return the value or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


__all__ = ["Outcome"]
