"""
Factory bindings for pluggable components.

Components register themselves at import time, either with the `plugin`
decorator on their factory function or with `register_plugin`. Names are
normalized (hyphens/underscores, case) so configuration can use either
style. Lookups that miss the table fall back to the ``logbridge.plugins``
entry point group: loading a matching entry point imports the module, which
registers its components.
"""

from __future__ import annotations

import importlib.metadata
import threading
from dataclasses import dataclass
from typing import Any, Callable, Iterable, TypeVar

from ..core import diagnostics
from ..core.errors import PluginNotFoundError
from ..core.settings import DEFAULT_PLUGIN_GROUP, Settings
from .schema import PluginParameter, normalize_key

F = TypeVar("F", bound=Callable[..., Any])


@dataclass(frozen=True)
class FactoryBinding:
    """A component type name bound to its factory and parameter schema."""

    name: str
    factory: Callable[..., Any]
    parameters: tuple[PluginParameter, ...] = ()
    category: str = "core"
    element_type: str | None = None


# normalized name -> binding
_BINDINGS: dict[str, FactoryBinding] = {}
# normalized alias -> normalized canonical name
_ALIASES: dict[str, str] = {}
_lock = threading.RLock()


def register_plugin(
    name: str,
    factory: Callable[..., Any],
    *,
    parameters: Iterable[PluginParameter] = (),
    category: str = "core",
    element_type: str | None = None,
    aliases: Iterable[str] = (),
) -> FactoryBinding:
    """Bind ``name`` (and ``aliases``) to ``factory``; later bindings replace earlier."""
    binding = FactoryBinding(
        name=name,
        factory=factory,
        parameters=tuple(parameters),
        category=category,
        element_type=element_type,
    )
    canonical = normalize_key(name)
    with _lock:
        _BINDINGS[canonical] = binding
        for alias in aliases:
            _ALIASES[normalize_key(alias)] = canonical
    return binding


def plugin(
    name: str,
    *,
    parameters: Iterable[PluginParameter] = (),
    category: str = "core",
    element_type: str | None = None,
    aliases: Iterable[str] = (),
) -> Callable[[F], F]:
    """Decorator form of `register_plugin` for factory functions."""

    def decorator(factory: F) -> F:
        register_plugin(
            name,
            factory,
            parameters=parameters,
            category=category,
            element_type=element_type,
            aliases=aliases,
        )
        return factory

    return decorator


def _lookup(canonical: str) -> FactoryBinding | None:
    with _lock:
        target = _ALIASES.get(canonical, canonical)
        return _BINDINGS.get(target)


def _select_entry_points(eps: Any, group: str) -> list[Any]:
    """Support both modern and legacy entry_points APIs."""
    if hasattr(eps, "select"):
        return list(eps.select(group=group))
    return list(eps.get(group, []))


def _load_from_entry_points(canonical: str, group: str) -> None:
    try:
        candidates = _select_entry_points(importlib.metadata.entry_points(), group)
    except Exception as exc:
        diagnostics.exception(
            "plugins", "unable to enumerate plugin entry points", exc, group=group
        )
        return
    for ep in candidates:
        if normalize_key(ep.name) != canonical:
            continue
        try:
            ep.load()
        except Exception as exc:
            diagnostics.exception(
                "plugins", "plugin entry point failed to load", exc, plugin=ep.name
            )


def _configured_group() -> str:
    try:
        return Settings().core.plugin_entry_point_group
    except Exception:
        return DEFAULT_PLUGIN_GROUP


def get_binding(name: str, *, group: str | None = None) -> FactoryBinding:
    """Return the binding for ``name``.

    ``group`` defaults to the configured plugin entry point group.

    Raises:
        PluginNotFoundError: If neither the table nor the entry points provide it.
    """
    canonical = normalize_key(name)
    binding = _lookup(canonical)
    if binding is None:
        _load_from_entry_points(canonical, group or _configured_group())
        binding = _lookup(canonical)
    if binding is None:
        raise PluginNotFoundError(f"Plugin '{name}' not found", plugin=name)
    return binding


def list_plugins(category: str | None = None) -> list[str]:
    """List registered plugin names (canonical form), optionally by category."""
    with _lock:
        return sorted(
            key
            for key, binding in _BINDINGS.items()
            if category is None or binding.category == category
        )


__all__ = [
    "FactoryBinding",
    "register_plugin",
    "plugin",
    "get_binding",
    "list_plugins",
]
