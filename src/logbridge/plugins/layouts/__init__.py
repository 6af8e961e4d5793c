from __future__ import annotations

from typing import Protocol, runtime_checkable

from ...core.events import LogEvent
from .xml import XmlLayout, create_layout


@runtime_checkable
class BaseLayout(Protocol):
    """Formatter contract used by appenders.

    Layouts are immutable after construction. ``header()`` and ``footer()``
    return None when the layout does not frame its output; otherwise the
    appender writes each exactly once around the event fragments.
    """

    @property
    def charset(self) -> str: ...

    @property
    def content_type(self) -> str: ...

    def header(self) -> bytes | None: ...

    def footer(self) -> bytes | None: ...

    def to_serializable(self, event: LogEvent) -> str: ...

    def to_bytes(self, event: LogEvent) -> bytes: ...


__all__ = ["BaseLayout", "XmlLayout", "create_layout"]
