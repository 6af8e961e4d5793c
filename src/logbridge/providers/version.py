"""API version gate applied to provider metadata before any provider code runs.

Compatibility is plain prefix matching against a fixed list; there is no
range logic. A missing or malformed version is incompatible, never an error.
"""

from __future__ import annotations

from typing import Final

# Version of the facade API this package implements
API_VERSION: Final[str] = "2.0.1"

COMPATIBLE_API_VERSIONS: Final[tuple[str, ...]] = ("2.0.0", "2.0.1")


def is_compatible(version: object) -> bool:
    """Return True if ``version`` starts with an accepted API version."""
    if not isinstance(version, str) or not version:
        return False
    return version.strip().startswith(COMPATIBLE_API_VERSIONS)


__all__ = ["API_VERSION", "COMPATIBLE_API_VERSIONS", "is_compatible"]
