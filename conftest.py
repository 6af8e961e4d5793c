"""
Root pytest configuration.
"""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

import pytest


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line(
        "markers",
        "critical: Tests that must never fail - core functionality",
    )
    config.addinivalue_line(
        "markers",
        "standard: Default risk category for typical unit tests",
    )
    config.addinivalue_line(
        "markers",
        "slow: Tests that take >1 second",
    )
    config.addinivalue_line(
        "markers",
        "property: Property-based tests (may be slow)",
    )


@pytest.fixture(autouse=True)
def reset_diagnostics_cache() -> Generator[None, None, None]:
    """Reset the diagnostics threshold and writer around each test.

    The diagnostics module caches its threshold at first emit, so tests that
    change ``LOGBRIDGE_CORE__DIAGNOSTICS_LEVEL`` would otherwise inherit the
    value cached by an earlier test.
    """
    import logbridge.core.diagnostics as diag

    diag._min_level = None
    diag.set_writer_for_tests(None)
    yield
    diag._min_level = None
    diag.set_writer_for_tests(None)


@pytest.fixture(autouse=True)
def _reset_bootstrap_state(
    monkeypatch: pytest.MonkeyPatch,
) -> Generator[None, None, None]:
    """Give each test a fresh backend selector and no in-process providers."""
    from logbridge.providers import selector, sources

    for name in (
        "LOGBRIDGE_CORE__CONTEXT_FACTORY",
        "LOGBRIDGE_CORE__PROVIDER_PATHS",
        "LOGBRIDGE_CORE__DIAGNOSTICS_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    sources._clear_registered()
    selector._reset_selector()
    yield
    sources._clear_registered()
    selector._reset_selector()


@pytest.fixture
def diagnostics_capture() -> Generator[list[dict[str, Any]], None, None]:
    """Collect diagnostics payloads emitted during the test (DEBUG and up).

    Example:
        def test_warns(diagnostics_capture):
            do_something()
            assert diagnostics_capture[0]["message"] == "..."
    """
    import logbridge.core.diagnostics as diag

    captured: list[dict[str, Any]] = []
    diag.set_level("DEBUG")
    diag.set_writer_for_tests(captured.append)
    yield captured
    diag.set_writer_for_tests(None)
    diag.set_level(None)
