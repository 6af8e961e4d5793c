"""
Declarative component plugins.

This package provides:
- The parameter schema components use to advertise construction arguments
- The factory binding registry components self-register into
- The resolver that builds components from configuration declarations
- Built-in components: the XML layout and the appender collection
"""

from .appenders import Appender, MemoryAppender, create_appenders
from .convert import to_bool, to_charset, to_enum, to_int, to_str
from .declaration import ComponentDeclaration
from .layouts import BaseLayout, XmlLayout
from .registry import (
    FactoryBinding,
    get_binding,
    list_plugins,
    plugin,
    register_plugin,
)
from .resolver import PluginFactoryResolver
from .schema import PluginAttribute, PluginElement

__all__ = [
    # Schema and converters
    "PluginAttribute",
    "PluginElement",
    "to_bool",
    "to_charset",
    "to_enum",
    "to_int",
    "to_str",
    # Registry
    "FactoryBinding",
    "get_binding",
    "list_plugins",
    "plugin",
    "register_plugin",
    # Building
    "ComponentDeclaration",
    "PluginFactoryResolver",
    # Built-in components
    "Appender",
    "MemoryAppender",
    "create_appenders",
    "BaseLayout",
    "XmlLayout",
]
