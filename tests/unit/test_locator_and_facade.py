from __future__ import annotations

from typing import Any, Hashable

import pytest

import logbridge
from logbridge.core.errors import BootstrapInvariantError
from logbridge.message import ParameterizedMessageFactory
from logbridge.providers.locator import LoggerContextLocator
from logbridge.providers.sources import register_provider
from logbridge.simple import SimpleLoggerContext


class _RecordingFactory:
    def __init__(self) -> None:
        self.calls: list[tuple[str, Hashable | None, bool]] = []
        self.contexts: dict[Any, SimpleLoggerContext] = {}

    def get_context(
        self, fqcn: str, boundary: Hashable | None, current_context: bool
    ) -> SimpleLoggerContext:
        self.calls.append((fqcn, boundary, current_context))
        key = None if current_context else boundary
        return self.contexts.setdefault(key, SimpleLoggerContext(key))


class _Service:
    pass


def _install(factory: _RecordingFactory) -> None:
    register_provider(
        {"LoggerContextFactory": lambda: factory, "APIVersion": "2.0.1"},
        name="recording",
    )


def test_locator_without_backend_raises() -> None:
    locator = LoggerContextLocator(lambda: None)
    with pytest.raises(BootstrapInvariantError) as info:
        locator.get_context("tests.caller")
    assert info.value.context["caller"] == "tests.caller"


def test_locator_delegates_arguments() -> None:
    factory = _RecordingFactory()
    locator = LoggerContextLocator(lambda: factory)
    ctx = locator.get_context("tests.caller", "tenant-a", False)
    assert isinstance(ctx, SimpleLoggerContext)
    assert factory.calls == [("tests.caller", "tenant-a", False)]


def test_locator_is_stateless() -> None:
    factory = _RecordingFactory()
    locator = LoggerContextLocator(lambda: factory)
    locator.get_context("a")
    locator.get_context("a")
    assert len(factory.calls) == 2


def test_get_logger_names() -> None:
    factory = _RecordingFactory()
    _install(factory)

    assert logbridge.get_logger("orders").name == "orders"
    assert logbridge.get_logger().name == logbridge.ROOT_LOGGER_NAME
    expected = f"{__name__}._Service"
    assert logbridge.get_logger(_Service).name == expected
    assert logbridge.get_logger(_Service()).name == expected


def test_get_logger_uses_caller_boundary() -> None:
    factory = _RecordingFactory()
    _install(factory)

    logbridge.get_logger("orders", caller="tests.facade")
    assert factory.calls[-1] == ("tests.facade", None, False)


def test_get_logger_returns_same_logger_within_context() -> None:
    _install(_RecordingFactory())
    assert logbridge.get_logger("orders") is logbridge.get_logger("orders")


def test_get_logger_with_message_factory() -> None:
    _install(_RecordingFactory())
    custom = ParameterizedMessageFactory()
    logger = logbridge.get_logger("custom", custom)
    assert logger.message_factory is custom  # type: ignore[attr-defined]


def test_get_context_current_and_boundary() -> None:
    factory = _RecordingFactory()
    _install(factory)

    current = logbridge.get_context()
    assert factory.calls[-1][2] is True
    scoped = logbridge.get_context(False, boundary="tenant-b")
    assert factory.calls[-1][1:] == ("tenant-b", False)
    assert scoped is not current


def test_get_factory_is_stable() -> None:
    factory = _RecordingFactory()
    _install(factory)
    assert logbridge.get_factory() is factory
    assert logbridge.get_factory() is factory
