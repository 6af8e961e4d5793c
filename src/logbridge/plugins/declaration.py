from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass(frozen=True)
class ComponentDeclaration:
    """Format-agnostic description of one component to build.

    Produced by whatever reads the configuration document; consumed by
    `PluginFactoryResolver`. Attribute values are raw strings.
    """

    type_name: str
    attributes: Mapping[str, str] = field(default_factory=dict)
    children: tuple[ComponentDeclaration, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "attributes", dict(self.attributes))
        object.__setattr__(self, "children", tuple(self.children))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ComponentDeclaration:
        """Build a declaration tree from plain data.

        Expected shape::

            {"type": "Memory", "attributes": {"name": "mem"},
             "children": [{"type": "XmlLayout", "attributes": {...}}]}

        Attribute values are stringified; booleans become ``"true"``/``"false"``.
        """
        type_name = data.get("type") or data.get("type_name")
        if not type_name:
            raise ValueError("component declaration requires a 'type'")
        attributes = {
            str(k): _attr_text(v) for k, v in (data.get("attributes") or {}).items()
        }
        children = tuple(cls.from_dict(c) for c in (data.get("children") or ()))
        return cls(str(type_name), attributes, children)


def _attr_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


__all__ = ["ComponentDeclaration"]
