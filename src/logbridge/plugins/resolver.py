"""
Generic builder turning component declarations into instances.

For each declaration the resolver looks up the factory binding, binds
attributes (case-insensitive, with aliases and defaults) and built children
against the binding's schema, and calls the factory with keyword arguments.
Failures are scoped to the declaration that caused them: a bad sibling or a
bad child is reported and skipped, the rest still gets built.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable

from ..core import diagnostics
from ..core.errors import CoercionError, PluginBuildError, PluginError
from ..core.outcome import Outcome
from .declaration import ComponentDeclaration
from .registry import FactoryBinding, get_binding
from .schema import PluginAttribute, PluginElement, normalize_key

Lookup = Callable[[str], FactoryBinding]

_Built = tuple[ComponentDeclaration, FactoryBinding, Any]


class PluginFactoryResolver:
    """Builds components from `ComponentDeclaration` trees."""

    def __init__(self, lookup: Lookup | None = None) -> None:
        self._lookup = lookup or get_binding

    def build(self, declaration: ComponentDeclaration) -> Outcome[Any]:
        """Build one declaration (and its children)."""
        outcome, _ = self._build(declaration)
        return outcome

    def build_all(
        self, declarations: Iterable[ComponentDeclaration]
    ) -> list[Outcome[Any]]:
        """Build sibling declarations independently, preserving order."""
        return [self.build(d) for d in declarations]

    def _build(
        self, declaration: ComponentDeclaration
    ) -> tuple[Outcome[Any], FactoryBinding | None]:
        name = declaration.type_name
        try:
            binding = self._lookup(name)
        except PluginError as exc:
            return self._fail(name, exc), None
        except Exception as exc:
            err = PluginBuildError(
                f"Lookup of '{name}' raised {type(exc).__name__}: {exc}",
                cause=exc,
                plugin=name,
            )
            return self._fail(name, err), None

        try:
            kwargs = self._bind(binding, declaration)
        except PluginBuildError as exc:
            return self._fail(name, exc), binding

        try:
            instance = binding.factory(**kwargs)
        except Exception as exc:
            err = PluginBuildError(
                f"Factory for '{binding.name}' raised {type(exc).__name__}: {exc}",
                cause=exc,
                plugin=binding.name,
            )
            return self._fail(name, err), binding
        if instance is None:
            err = PluginBuildError(
                f"Factory for '{binding.name}' returned None", plugin=binding.name
            )
            return self._fail(name, err), binding
        return Outcome.success(instance, source=name), binding

    def _bind(
        self, binding: FactoryBinding, declaration: ComponentDeclaration
    ) -> dict[str, Any]:
        attributes = {normalize_key(k): v for k, v in declaration.attributes.items()}
        used_attrs: set[str] = set()
        built = self._build_children(declaration)
        used_children: set[int] = set()
        kwargs: dict[str, Any] = {}

        for param in binding.parameters:
            if isinstance(param, PluginAttribute):
                kwargs[param.keyword] = self._bind_attribute(
                    binding, param, attributes, used_attrs
                )
            elif isinstance(param, PluginElement):
                kwargs[param.keyword] = self._bind_element(
                    binding, param, built, used_children
                )

        unused = sorted(set(attributes) - used_attrs)
        if unused:
            diagnostics.warn(
                "plugins",
                "unknown attributes ignored",
                plugin=binding.name,
                attributes=unused,
            )
        for idx, (child, _, _) in enumerate(built):
            if idx not in used_children:
                diagnostics.warn(
                    "plugins",
                    "child component not accepted by parent",
                    plugin=binding.name,
                    child=child.type_name,
                )
        return kwargs

    def _bind_attribute(
        self,
        binding: FactoryBinding,
        param: PluginAttribute,
        attributes: dict[str, str],
        used: set[str],
    ) -> Any:
        used.update(k for k in param.keys() if k in attributes)
        found, raw = param.lookup(attributes)
        if not found or raw is None:
            return param.default
        try:
            return param.converter(raw)
        except CoercionError as exc:
            exc.context.setdefault("attribute", param.name)
            exc.context.setdefault("plugin", binding.name)
            raise
        except PluginBuildError:
            raise
        except Exception as exc:
            raise CoercionError(
                f"Invalid value {raw!r} for attribute '{param.name}'",
                cause=exc,
                attribute=param.name,
                plugin=binding.name,
            ) from exc

    def _bind_element(
        self,
        binding: FactoryBinding,
        param: PluginElement,
        built: list[_Built],
        used: set[int],
    ) -> Any:
        matches: list[Any] = []
        for idx, (child, child_binding, instance) in enumerate(built):
            if idx in used:
                continue
            if param.matches(child.type_name, child_binding.element_type):
                used.add(idx)
                matches.append(instance)
        if param.many:
            return tuple(matches)
        if len(matches) > 1:
            diagnostics.warn(
                "plugins",
                "multiple children for single element, using first",
                plugin=binding.name,
                element=param.name,
                count=len(matches),
            )
        return matches[0] if matches else None

    def _build_children(self, declaration: ComponentDeclaration) -> list[_Built]:
        built: list[_Built] = []
        for child in declaration.children:
            outcome, child_binding = self._build(child)
            if outcome.ok and child_binding is not None:
                built.append((child, child_binding, outcome.value))
        return built

    def _fail(self, name: str, error: PluginError) -> Outcome[Any]:
        details = error.to_dict()
        diagnostics.error(
            "plugins",
            "component build failed",
            plugin=name,
            error_type=details["error_type"],
            error=details["error"],
            cause=details.get("cause"),
        )
        return Outcome.failure(error, source=name)


__all__ = ["PluginFactoryResolver"]
