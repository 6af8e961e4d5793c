"""
Parameter schema of a pluggable component.

A component advertises its construction parameters as a tuple of
`PluginAttribute` (scalar values read from the declaration's attributes)
and `PluginElement` (nested components built from its children). The
resolver binds declarations against this schema; the component never sees
the configuration format.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Union

from .convert import to_str


def normalize_key(name: str) -> str:
    """Normalize attribute and plugin names: case-insensitive, '-' == '_'."""
    return name.strip().replace("-", "_").lower()


@dataclass(frozen=True)
class PluginAttribute:
    """Scalar parameter bound from a declaration attribute.

    Attributes:
        name: Attribute name in configuration data.
        converter: Callable turning the raw string into the typed value.
        default: Value used when the attribute is absent.
        arg: Keyword argument name for the factory (defaults to ``name``).
        aliases: Alternative attribute names accepted in configuration.
    """

    name: str
    converter: Callable[[str], Any] = to_str
    default: Any = None
    arg: str | None = None
    aliases: tuple[str, ...] = ()

    @property
    def keyword(self) -> str:
        return self.arg or self.name

    def keys(self) -> tuple[str, ...]:
        return tuple(normalize_key(n) for n in (self.name, *self.aliases))

    def lookup(self, attributes: Mapping[str, str]) -> tuple[bool, Any]:
        """Find the raw value in normalized ``attributes``; (found, raw)."""
        for key in self.keys():
            if key in attributes:
                return True, attributes[key]
        return False, None


@dataclass(frozen=True)
class PluginElement:
    """Nested-component parameter bound from a declaration's children.

    A child matches when its plugin's element type equals ``element_type``
    or its type name equals ``name``. With ``many=True`` the factory gets a
    tuple of every match; otherwise the first match or None.
    """

    name: str
    element_type: str | None = None
    many: bool = True
    arg: str | None = None

    @property
    def keyword(self) -> str:
        return self.arg or self.name

    def matches(self, type_name: str, element_type: str | None) -> bool:
        if self.element_type is not None and element_type is not None:
            if normalize_key(self.element_type) == normalize_key(element_type):
                return True
        return normalize_key(type_name) == normalize_key(self.name)


PluginParameter = Union[PluginAttribute, PluginElement]

__all__ = [
    "normalize_key",
    "PluginAttribute",
    "PluginElement",
    "PluginParameter",
]
