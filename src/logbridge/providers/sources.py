"""
Provider discovery sources.

A source is anything that can hand back one provider metadata record:

- an entry point in the ``logbridge.providers`` group (installed packages)
- a ``logbridge-provider.properties`` file under a configured directory
- a record registered in-process with `register_provider`

Enumeration is best-effort: an enumerator that fails contributes zero
sources and is reported on the diagnostics channel.
"""

from __future__ import annotations

import importlib.metadata
import threading
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Protocol, runtime_checkable

from ..core import diagnostics
from ..core.errors import ProviderMetadataError
from ..core.settings import Settings

PROVIDER_RESOURCE = "logbridge-provider.properties"


@runtime_checkable
class ProviderSource(Protocol):
    """One discoverable provider metadata record."""

    name: str

    def read(self) -> Mapping[str, Any]:
        """Return the raw key/value record; raise if it cannot be read."""
        ...


class MappingSource:
    """In-process record, typically registered by an embedding application."""

    def __init__(self, name: str, record: Mapping[str, Any]) -> None:
        self.name = name
        self._record = dict(record)

    def read(self) -> Mapping[str, Any]:
        return dict(self._record)

    def __repr__(self) -> str:
        return f"MappingSource({self.name!r})"


class EntryPointSource:
    """Entry point whose target is a mapping or exposes ``PROVIDER_METADATA``."""

    def __init__(self, entry_point: Any) -> None:
        self.entry_point = entry_point
        self.name = f"entry_point:{getattr(entry_point, 'name', entry_point)}"

    def read(self) -> Mapping[str, Any]:
        target = self.entry_point.load()
        if isinstance(target, Mapping):
            return target
        metadata = getattr(target, "PROVIDER_METADATA", None)
        if isinstance(metadata, Mapping):
            return metadata
        raise ProviderMetadataError(
            f"{self.name} does not expose PROVIDER_METADATA",
            source=self.name,
        )

    def __repr__(self) -> str:
        return f"EntryPointSource({self.name!r})"


class PropertiesFileSource:
    """A ``key=value`` properties file on disk."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.name = str(self.path)

    def read(self) -> Mapping[str, Any]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ProviderMetadataError(
                f"Unable to read {self.path}", cause=exc, source=self.name
            ) from exc
        return parse_properties(text, source=self.name)

    def __repr__(self) -> str:
        return f"PropertiesFileSource({self.name!r})"


def parse_properties(text: str, *, source: str = "<string>") -> dict[str, str]:
    """Parse a small properties document.

    Supports ``key=value`` and ``key: value`` lines, ``#``/``!`` comments and
    blank lines. Any other line is a parse error.
    """
    record: dict[str, str] = {}
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line[0] in "#!":
            continue
        seps = [i for i in (line.find("="), line.find(":")) if i > 0]
        if not seps:
            raise ProviderMetadataError(
                f"Malformed line {lineno} in {source}: {raw!r}",
                source=source,
                line=lineno,
            )
        idx = min(seps)
        record[line[:idx].strip()] = line[idx + 1 :].strip()
    return record


# In-process registrations, in registration order
_REGISTERED: list[MappingSource] = []
_registered_lock = threading.Lock()


def register_provider(record: Mapping[str, Any], *, name: str | None = None) -> None:
    """Register a provider metadata record for the next discovery run."""
    with _registered_lock:
        source_name = name or f"registered:{len(_REGISTERED)}"
        _REGISTERED.append(MappingSource(source_name, record))


def registered_sources() -> list[ProviderSource]:
    with _registered_lock:
        return list(_REGISTERED)


def _clear_registered() -> None:
    """Drop in-process registrations (for testing only)."""
    with _registered_lock:
        _REGISTERED.clear()


def _select_entry_points(eps: Any, group: str) -> list[Any]:
    """Support both modern and legacy entry_points APIs."""
    if hasattr(eps, "select"):
        return list(eps.select(group=group))
    return list(eps.get(group, []))


def entry_point_sources(group: str) -> list[ProviderSource]:
    eps = importlib.metadata.entry_points()
    return [EntryPointSource(ep) for ep in _select_entry_points(eps, group)]


def path_sources(paths: Iterable[str | Path]) -> list[ProviderSource]:
    found: list[ProviderSource] = []
    for base in paths:
        directory = Path(base)
        if not directory.is_dir():
            diagnostics.debug(
                "providers", "provider path is not a directory", path=str(directory)
            )
            continue
        for file in sorted(directory.rglob(PROVIDER_RESOURCE)):
            found.append(PropertiesFileSource(file))
    return found


def enumerate_sources(settings: Settings | None = None) -> list[ProviderSource]:
    """Collect sources from every enumerator, isolating enumerator failures."""
    cfg = (settings or Settings()).core
    enumerators: list[tuple[str, Callable[[], list[ProviderSource]]]] = [
        ("entry_points", lambda: entry_point_sources(cfg.provider_entry_point_group)),
        ("paths", lambda: path_sources(cfg.provider_paths)),
        ("registered", registered_sources),
    ]
    sources: list[ProviderSource] = []
    for label, enumerate_fn in enumerators:
        try:
            sources.extend(enumerate_fn())
        except Exception as exc:
            diagnostics.exception(
                "providers", "unable to enumerate provider sources", exc, kind=label
            )
    return sources


__all__ = [
    "PROVIDER_RESOURCE",
    "ProviderSource",
    "MappingSource",
    "EntryPointSource",
    "PropertiesFileSource",
    "parse_properties",
    "register_provider",
    "registered_sources",
    "entry_point_sources",
    "path_sources",
    "enumerate_sources",
]
