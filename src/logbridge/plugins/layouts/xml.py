"""
XML layout producing ``log4j:event`` elements.

Each event renders as one ``<log4j:event>`` element compatible with the
log4j.dtd event schema, so existing viewers can read the output. With
``complete=true`` the stream is a standalone document: a header opens the
``log4j:eventSet`` root before the first event and a footer closes it after
the last one. Without it the output is meant to be included as an external
entity, and no header or footer is produced.

Example declaration::

    {"type": "XmlLayout",
     "attributes": {"complete": "true", "properties": "true"}}
"""

from __future__ import annotations

import codecs
import re
import traceback
from typing import Any
from xml.sax.saxutils import escape

from ...core.events import LogEvent
from ..convert import DEFAULT_CHARSET, to_bool, to_charset
from ..registry import plugin
from ..schema import PluginAttribute

XML_NAMESPACE = "http://logging.apache.org/log4j/"
ROOT_LABEL = "root"

_EOL = "\r\n"
# Whitespace is escaped so attribute-value normalization keeps it intact
_ATTR_ENTITIES = {'"': "&quot;", "\n": "&#10;", "\r": "&#13;", "\t": "&#9;"}
_CDATA_END = "]]>"
_CDATA_EMBEDDED_END = "]]>]]&gt;<![CDATA["


# Anything outside the XML 1.0 Char production, e.g. C0 controls or lone surrogates
_INVALID_XML_CHARS = re.compile(
    "[^\u0009\u000A\u000D\u0020-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]"
)
REPLACEMENT_CHAR = "\uFFFD"

# Fixed-endian codecs for charsets whose Python codec writes a BOM per call
_BOM_CODECS = {
    "utf-16": ("utf-16-be", codecs.BOM_UTF16_BE),
    "utf-32": ("utf-32-be", codecs.BOM_UTF32_BE),
}


def sanitize(text: Any) -> str:
    """Replace characters XML 1.0 cannot carry with U+FFFD."""
    return _INVALID_XML_CHARS.sub(REPLACEMENT_CHAR, str(text))


def escape_tags(text: Any) -> str:
    """Escape markup-reserved characters for use in element text or attributes."""
    return escape(sanitize(text), _ATTR_ENTITIES)


def escape_cdata(text: str) -> str:
    """Make text safe inside a CDATA section.

    Invalid characters are replaced and any embedded terminator is split.
    """
    return sanitize(text).replace(_CDATA_END, _CDATA_EMBEDDED_END)


def _describe(thrown: BaseException) -> str:
    try:
        return f"{type(thrown).__name__}: {thrown}"
    except Exception:
        return type(thrown).__name__


class XmlLayout:
    """Stateless XML formatter; all options are fixed at construction."""

    name = "XmlLayout"

    __slots__ = (
        "_location_info",
        "_properties",
        "_complete",
        "_charset",
        "_codec",
        "_bom",
    )

    def __init__(
        self,
        *,
        location_info: bool = False,
        properties: bool = False,
        complete: bool = False,
        charset: str = DEFAULT_CHARSET,
    ) -> None:
        self._location_info = bool(location_info)
        self._properties = bool(properties)
        self._complete = bool(complete)
        self._charset = to_charset(charset) if charset else DEFAULT_CHARSET
        codec = codecs.lookup(self._charset).name
        self._codec, self._bom = _BOM_CODECS.get(codec, (codec, b""))

    @property
    def location_info(self) -> bool:
        return self._location_info

    @property
    def properties(self) -> bool:
        return self._properties

    @property
    def complete(self) -> bool:
        return self._complete

    @property
    def charset(self) -> str:
        return self._charset

    @property
    def content_type(self) -> str:
        return f"text/xml; charset={self._charset}"

    def header(self) -> bytes | None:
        if not self._complete:
            return None
        text = (
            f'<?xml version="1.0" encoding="{self._charset}"?>{_EOL}'
            f'<log4j:eventSet xmlns:log4j="{XML_NAMESPACE}">{_EOL}'
        )
        return self._bom + self._encode(text)

    def footer(self) -> bytes | None:
        if not self._complete:
            return None
        return self._encode(f"</log4j:eventSet>{_EOL}")

    def to_bytes(self, event: LogEvent) -> bytes:
        return self._encode(self.to_serializable(event))

    def to_serializable(self, event: LogEvent) -> str:
        parts: list[str] = []
        name = event.logger_name or ROOT_LABEL
        parts.append(
            f'<log4j:event logger="{escape_tags(name)}"'
            f' timestamp="{event.timestamp_ms}"'
            f' level="{escape_tags(event.level)}"'
            f' thread="{escape_tags(event.thread_name)}">{_EOL}'
        )

        if event.message is not None:
            parts.append(self._message(event))

        if event.context_stack:
            ndc = " ".join(str(item) for item in event.context_stack)
            parts.append(f"<log4j:NDC><![CDATA[{escape_cdata(ndc)}]]></log4j:NDC>{_EOL}")

        if event.thrown is not None:
            parts.append("<log4j:throwable><![CDATA[")
            for line in self.throwable_lines(event.thrown):
                parts.append(escape_cdata(line))
                parts.append(_EOL)
            parts.append(f"]]></log4j:throwable>{_EOL}")

        if self._location_info and event.source is not None:
            src = event.source
            parts.append(
                f'<log4j:locationInfo class="{escape_tags(src.module)}"'
                f' method="{escape_tags(src.function)}"'
                f' file="{escape_tags(src.filename)}"'
                f' line="{src.lineno}"/>{_EOL}'
            )

        if self._properties and event.context_map:
            parts.append(f"<log4j:properties>{_EOL}")
            for key, value in event.context_map.items():
                parts.append(
                    f'<log4j:data name="{escape_tags(key)}"'
                    f' value="{escape_tags(value)}"/>{_EOL}'
                )
            parts.append(f"</log4j:properties>{_EOL}")

        parts.append(f"</log4j:event>{_EOL}{_EOL}")
        return "".join(parts)

    def throwable_lines(self, thrown: BaseException) -> list[str]:
        """Render a traceback as lines; falls back to the exception's description."""
        try:
            text = "".join(
                traceback.format_exception(type(thrown), thrown, thrown.__traceback__)
            )
        except Exception:
            text = _describe(thrown)
        return text.splitlines()

    def _message(self, event: LogEvent) -> str:
        msg = event.message
        get_formats = getattr(msg, "get_formats", None)
        if callable(get_formats):
            try:
                formats = [str(f).lower() for f in get_formats()]
            except Exception:
                formats = []
            if "xml" in formats:
                # The message renders its own well-formed XML
                body = sanitize(msg.get_formatted_message(["xml"]))
                return f"<log4j:message>{body}</log4j:message>{_EOL}"
        text = event.formatted_message()
        return f"<log4j:message><![CDATA[{escape_cdata(text)}]]></log4j:message>{_EOL}"

    def _encode(self, text: str) -> bytes:
        return text.encode(self._codec, errors="xmlcharrefreplace")

    def __repr__(self) -> str:
        return (
            f"XmlLayout(location_info={self._location_info}, "
            f"properties={self._properties}, complete={self._complete}, "
            f"charset={self._charset!r})"
        )


@plugin(
    "XmlLayout",
    element_type="layout",
    aliases=("xml",),
    parameters=(
        PluginAttribute("locationInfo", to_bool, False, arg="location_info"),
        PluginAttribute("properties", to_bool, False),
        PluginAttribute(
            "complete", to_bool, False, aliases=("standalone-document", "standalone")
        ),
        PluginAttribute("charset", to_charset, DEFAULT_CHARSET),
    ),
)
def create_layout(
    *,
    location_info: bool = False,
    properties: bool = False,
    complete: bool = False,
    charset: str = DEFAULT_CHARSET,
) -> XmlLayout:
    """Create an XML layout from bound configuration values."""
    return XmlLayout(
        location_info=location_info,
        properties=properties,
        complete=complete,
        charset=charset,
    )


__all__ = [
    "XmlLayout",
    "create_layout",
    "escape_tags",
    "escape_cdata",
    "sanitize",
    "XML_NAMESPACE",
]
