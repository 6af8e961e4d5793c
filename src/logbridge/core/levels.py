"""Log level names and priorities.

Lower priority means more verbose. ``OFF`` sits above every real level so a
threshold of ``OFF`` disables output entirely.
"""

from __future__ import annotations

from typing import Final

_LEVELS: Final[dict[str, int]] = {
    "TRACE": 5,
    "DEBUG": 10,
    "INFO": 20,
    "WARN": 30,
    "ERROR": 40,
    "FATAL": 50,
    "OFF": 100,
}

_ALIASES: Final[dict[str, str]] = {
    "WARNING": "WARN",
    "CRITICAL": "FATAL",
}


def normalize_level(level: str) -> str:
    """Return the canonical upper-case name for a level or alias.

    Raises:
        ValueError: If the name is not a known level.
    """
    name = str(level).strip().upper()
    name = _ALIASES.get(name, name)
    if name not in _LEVELS:
        raise ValueError(f"Unknown level '{level}'")
    return name


def get_level_priority(level: str) -> int:
    """Get priority for a level name (case-insensitive).

    Unknown levels default to INFO (20).
    """
    name = str(level).strip().upper()
    name = _ALIASES.get(name, name)
    return _LEVELS.get(name, 20)


def get_all_levels() -> dict[str, int]:
    return dict(_LEVELS)
