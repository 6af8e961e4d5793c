"""
String-to-value converters for plugin attributes.

Every converter takes the raw attribute string and either returns the typed
value or raises `CoercionError`.
"""

from __future__ import annotations

import codecs
import re
from enum import Enum
from typing import Callable, TypeVar

from ..core import diagnostics
from ..core.errors import CoercionError

E = TypeVar("E", bound=Enum)

DEFAULT_CHARSET = "UTF-8"

# Python codec name -> IANA charset name
_IANA_NAMES = {
    "ascii": "US-ASCII",
    "utf-8": "UTF-8",
    "utf-8-sig": "UTF-8",
    "utf-16": "UTF-16",
    "utf-16-le": "UTF-16LE",
    "utf-16-be": "UTF-16BE",
    "utf-32": "UTF-32",
    "utf-32-le": "UTF-32LE",
    "utf-32-be": "UTF-32BE",
    "shift_jis": "Shift_JIS",
    "euc_jp": "EUC-JP",
    "euc_kr": "EUC-KR",
    "iso2022_jp": "ISO-2022-JP",
    "big5": "Big5",
    "koi8-r": "KOI8-R",
    "koi8-u": "KOI8-U",
    "mac-roman": "macintosh",
}
_ISO_8859 = re.compile(r"^iso8859-(\d+)$")
_WINDOWS_CP = re.compile(r"^cp(125\d)$")
_IBM_CP = re.compile(r"^cp(\d+)$")

_TRUE = {"true", "yes", "on", "1"}
_FALSE = {"false", "no", "off", "0"}


def to_str(value: str) -> str:
    return str(value)


def to_bool(value: str) -> bool:
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise CoercionError(f"Expected a boolean, got {value!r}", value=value)


def to_int(value: str) -> int:
    try:
        return int(str(value).strip())
    except ValueError as exc:
        raise CoercionError(
            f"Expected an integer, got {value!r}", cause=exc, value=value
        ) from exc


def to_charset(value: str) -> str:
    """Return the IANA name of a supported charset.

    Unsupported names are reported and replaced with UTF-8 rather than
    failing the whole component.
    """
    try:
        info = codecs.lookup(str(value).strip())
    except LookupError:
        diagnostics.error(
            "plugins",
            "charset is not supported, using default",
            charset=value,
            default=DEFAULT_CHARSET,
        )
        return DEFAULT_CHARSET
    return iana_name(info.name)


def iana_name(codec_name: str) -> str:
    """Map a Python codec name to the IANA name used in XML declarations.

    Names Python cannot look up again are returned in upper case unchanged.
    """
    candidate = _iana_candidate(codec_name.lower())
    try:
        codecs.lookup(candidate)
    except LookupError:
        return codec_name.upper()
    return candidate


def _iana_candidate(name: str) -> str:
    if name in _IANA_NAMES:
        return _IANA_NAMES[name]
    match = _ISO_8859.match(name)
    if match:
        return f"ISO-8859-{match.group(1)}"
    match = _WINDOWS_CP.match(name)
    if match:
        return f"windows-{match.group(1)}"
    match = _IBM_CP.match(name)
    if match:
        return f"IBM{match.group(1)}"
    return name.upper().replace("_", "-")


def to_enum(enum_cls: type[E]) -> Callable[[str], E]:
    """Build a converter accepting an enum member's name or value."""

    def _convert(value: str) -> E:
        text = str(value).strip()
        for member in enum_cls:
            if text.lower() in (member.name.lower(), str(member.value).lower()):
                return member
        allowed = ", ".join(m.name for m in enum_cls)
        raise CoercionError(
            f"Expected one of {allowed}, got {value!r}", value=value
        )

    _convert.__name__ = f"to_{enum_cls.__name__.lower()}"
    return _convert


__all__ = [
    "DEFAULT_CHARSET",
    "to_str",
    "to_bool",
    "to_int",
    "to_charset",
    "iana_name",
    "to_enum",
]
