"""
Backend discovery and selection.

This package provides:
- The API version gate applied to provider metadata
- Discovery sources (entry points, properties files, in-process records)
- The provider registry that validates and ranks candidates
- The one-time, process-wide backend selector
- The stateless logger context locator
"""

from .descriptor import ProviderDescriptor, ProviderMetadata
from .locator import LoggerContextLocator
from .registry import (
    ProviderRegistry,
    instantiate_factory,
    register_context_factory,
    registered_factory_names,
    resolve_factory_ref,
)
from .selector import (
    ContextFactorySelector,
    SelectionState,
    get_factory,
    get_selector,
)
from .sources import (
    EntryPointSource,
    MappingSource,
    PropertiesFileSource,
    ProviderSource,
    enumerate_sources,
    register_provider,
)
from .version import API_VERSION, COMPATIBLE_API_VERSIONS, is_compatible

__all__ = [
    # Version gate
    "API_VERSION",
    "COMPATIBLE_API_VERSIONS",
    "is_compatible",
    # Descriptors
    "ProviderDescriptor",
    "ProviderMetadata",
    # Sources
    "ProviderSource",
    "EntryPointSource",
    "MappingSource",
    "PropertiesFileSource",
    "enumerate_sources",
    "register_provider",
    # Registry
    "ProviderRegistry",
    "instantiate_factory",
    "register_context_factory",
    "registered_factory_names",
    "resolve_factory_ref",
    # Selection
    "ContextFactorySelector",
    "SelectionState",
    "get_factory",
    "get_selector",
    "LoggerContextLocator",
]
