"""
Appender components: the ``appenders`` collection and an in-memory appender.

The ``appenders`` plugin gathers every appender child into a name->appender
mapping. The mapping is filled completely in a private dict and only then
published as a read-only view, so logging threads dispatching through it
never observe a partially built collection. A configuration reload builds a
new mapping rather than editing the published one.
"""

from __future__ import annotations

import threading
from types import MappingProxyType
from typing import Iterable, Mapping, Protocol, runtime_checkable

from ..core.errors import PluginBuildError
from ..core.events import LogEvent
from .convert import to_str
from .layouts import BaseLayout
from .registry import plugin
from .schema import PluginAttribute, PluginElement


@runtime_checkable
class Appender(Protocol):
    name: str

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def append(self, event: LogEvent) -> None: ...


class MemoryAppender:
    """Keeps serialized events in memory.

    The layout header is written once before the first event and the footer
    once when the appender stops; events appended after stop are dropped.
    """

    def __init__(self, name: str, layout: BaseLayout | None = None) -> None:
        self.name = name
        self.layout = layout
        self._chunks: list[bytes] = []
        self._events = 0
        self._header_written = False
        self._stopped = False
        self._lock = threading.Lock()

    def start(self) -> None:
        with self._lock:
            self._write_header()

    def stop(self) -> None:
        with self._lock:
            if self._stopped:
                return
            self._write_header()
            footer = self.layout.footer() if self.layout is not None else None
            if footer:
                self._chunks.append(footer)
            self._stopped = True

    def append(self, event: LogEvent) -> None:
        data = self._serialize(event)
        with self._lock:
            if self._stopped:
                return
            self._write_header()
            self._chunks.append(data)
            self._events += 1

    @property
    def event_count(self) -> int:
        return self._events

    @property
    def chunks(self) -> list[bytes]:
        with self._lock:
            return list(self._chunks)

    def getvalue(self) -> bytes:
        with self._lock:
            return b"".join(self._chunks)

    def _write_header(self) -> None:
        if self._header_written:
            return
        self._header_written = True
        header = self.layout.header() if self.layout is not None else None
        if header:
            self._chunks.append(header)

    def _serialize(self, event: LogEvent) -> bytes:
        if self.layout is not None:
            return self.layout.to_bytes(event)
        line = f"{event.level} {event.logger_name or 'root'} {event.formatted_message()}\n"
        return line.encode("utf-8")

    def __repr__(self) -> str:
        return f"MemoryAppender(name={self.name!r}, events={self._events})"


@plugin(
    "Memory",
    element_type="appender",
    parameters=(
        PluginAttribute("name", to_str, None),
        PluginElement("layout", element_type="layout", many=False),
    ),
)
def create_memory_appender(
    *, name: str | None = None, layout: BaseLayout | None = None
) -> MemoryAppender:
    if not name:
        raise PluginBuildError("Memory appender requires a name")
    return MemoryAppender(name, layout)


@plugin(
    "appenders",
    parameters=(PluginElement("appenders", element_type="appender", many=True),),
)
def create_appenders(*, appenders: Iterable[Appender] = ()) -> Mapping[str, Appender]:
    """Build the name->appender map; for duplicate names the last one wins."""
    built: dict[str, Appender] = {}
    for appender in appenders:
        built[appender.name] = appender
    return MappingProxyType(built)


__all__ = [
    "Appender",
    "MemoryAppender",
    "create_appenders",
    "create_memory_appender",
]
