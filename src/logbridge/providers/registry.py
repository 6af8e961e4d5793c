"""
Provider registry: turns discovery sources into ranked provider descriptors.

Context factories are referenced by name. Named registrations made with
`register_context_factory` are consulted first; anything else is treated as
an import path (``package.module:Attr`` or ``package.module.Attr``) so that
third-party backends work without registering up front.
"""

from __future__ import annotations

import importlib
import threading
from typing import Any, Callable, Iterable

from pydantic import ValidationError

from ..core import diagnostics
from ..core.errors import ProviderLoadError, ProviderMetadataError
from ..core.outcome import Outcome
from ..core.settings import Settings
from ..spi import LoggerContextFactory
from .descriptor import ProviderDescriptor, ProviderMetadata
from .sources import ProviderSource, enumerate_sources
from .version import is_compatible

FactoryRef = Callable[[], Any]

# Named context factories (normalized name -> zero-argument constructor)
_FACTORIES: dict[str, FactoryRef] = {}
_factories_lock = threading.Lock()


def _normalize_name(name: str) -> str:
    return name.strip().replace("-", "_").lower()


def register_context_factory(name: str, factory: FactoryRef) -> None:
    """Register a context factory constructor under a stable name."""
    with _factories_lock:
        _FACTORIES[_normalize_name(name)] = factory


def registered_factory_names() -> list[str]:
    with _factories_lock:
        return sorted(_FACTORIES)


def resolve_factory_ref(ref: Any) -> FactoryRef:
    """Resolve a factory reference to a zero-argument constructor.

    Raises:
        ProviderLoadError: If the name is neither registered nor importable.
    """
    if not isinstance(ref, str):
        if callable(ref):
            return ref  # type: ignore[no-any-return]
        raise ProviderLoadError(f"Unusable context factory reference {ref!r}")

    with _factories_lock:
        registered = _FACTORIES.get(_normalize_name(ref))
    if registered is not None:
        return registered

    if ":" in ref:
        module_name, _, attr_path = ref.partition(":")
    else:
        module_name, _, attr_path = ref.rpartition(".")
    if not module_name or not attr_path:
        raise ProviderLoadError(f"Unable to locate context factory '{ref}'")
    try:
        target: Any = importlib.import_module(module_name)
        for part in attr_path.split("."):
            target = getattr(target, part)
    except (ImportError, AttributeError) as exc:
        raise ProviderLoadError(
            f"Unable to locate context factory '{ref}'", cause=exc
        ) from exc
    if not callable(target):
        raise ProviderLoadError(f"Context factory '{ref}' is not callable")
    return target  # type: ignore[no-any-return]


def instantiate_factory(ref: Any, *, source: str = "") -> Outcome[LoggerContextFactory]:
    """Locate and construct a context factory, reporting failure as an Outcome."""
    try:
        constructor = resolve_factory_ref(ref)
    except ProviderLoadError as exc:
        exc.context.setdefault("source", source)
        return Outcome.failure(exc, source=source)
    try:
        instance = constructor()
    except Exception as exc:
        return Outcome.failure(
            ProviderLoadError(
                f"Unable to create context factory {ref!r} specified in {source}",
                cause=exc,
                source=source,
            ),
            source=source,
        )
    if not isinstance(instance, LoggerContextFactory):
        return Outcome.failure(
            ProviderLoadError(
                f"{ref!r} does not implement LoggerContextFactory",
                source=source,
            ),
            source=source,
        )
    return Outcome.success(instance, source=source)


class ProviderRegistry:
    """Discovers, validates and ranks provider descriptors.

    One bad source never affects the others: unreadable or malformed
    metadata and factories that fail to load are reported and dropped,
    incompatible API versions are dropped quietly.
    """

    def __init__(
        self,
        sources: Iterable[ProviderSource] | None = None,
        *,
        settings: Settings | None = None,
    ) -> None:
        self._sources = list(sources) if sources is not None else None
        self._settings = settings

    def sources(self) -> list[ProviderSource]:
        if self._sources is not None:
            return list(self._sources)
        return enumerate_sources(self._settings)

    def load(self) -> list[Outcome[ProviderDescriptor]]:
        """Return one outcome per version-compatible source, in source order."""
        outcomes: list[Outcome[ProviderDescriptor]] = []
        for source in self.sources():
            outcome = self._load_source(source)
            if outcome is None:
                continue
            if not outcome.ok:
                assert outcome.error is not None
                details = outcome.error.to_dict()
                diagnostics.error(
                    "providers",
                    "provider dropped",
                    source=source.name,
                    error_type=details["error_type"],
                    error=details["error"],
                    cause=details.get("cause"),
                )
            outcomes.append(outcome)
        return outcomes

    def discover(self) -> list[ProviderDescriptor]:
        """Return surviving descriptors in ascending priority order.

        One descriptor is kept per priority; for equal priorities the source
        enumerated last wins.
        """
        buckets: dict[int, ProviderDescriptor] = {}
        for outcome in self.load():
            if outcome.ok and outcome.value is not None:
                buckets[outcome.value.priority] = outcome.value
        return [buckets[p] for p in sorted(buckets)]

    def _load_source(self, source: ProviderSource) -> Outcome[ProviderDescriptor] | None:
        name = source.name
        try:
            metadata = ProviderMetadata.model_validate(dict(source.read()))
        except ValidationError as exc:
            return Outcome.failure(
                ProviderMetadataError(
                    f"Invalid provider metadata in {name}", cause=exc, source=name
                ),
                source=name,
            )
        except ProviderMetadataError as exc:
            exc.context.setdefault("source", name)
            return Outcome.failure(exc, source=name)
        except Exception as exc:
            return Outcome.failure(
                ProviderMetadataError(f"Unable to read {name}", cause=exc, source=name),
                source=name,
            )

        if not is_compatible(metadata.api_version):
            diagnostics.debug(
                "providers",
                "incompatible provider skipped",
                source=name,
                api_version=metadata.api_version,
            )
            return None

        created = instantiate_factory(metadata.context_factory, source=name)
        if not created.ok:
            return Outcome.failure(created.error, source=name)  # type: ignore[arg-type]
        assert created.value is not None
        return Outcome.success(
            ProviderDescriptor(
                factory=created.value,
                api_version=metadata.api_version,
                priority=metadata.priority,
                source=name,
            ),
            source=name,
        )


__all__ = [
    "ProviderRegistry",
    "register_context_factory",
    "registered_factory_names",
    "resolve_factory_ref",
    "instantiate_factory",
]
