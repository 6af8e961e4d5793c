from __future__ import annotations

import io
import threading

import pytest

from logbridge.core.settings import CoreSettings, Settings
from logbridge.isolation import ContextCache, current_boundary, isolation_scope
from logbridge.simple import (
    SimpleLogger,
    SimpleLoggerContext,
    SimpleLoggerContextFactory,
)


def _factory(**core: str) -> SimpleLoggerContextFactory:
    return SimpleLoggerContextFactory(Settings(core=CoreSettings(**core)))


def test_same_boundary_same_context() -> None:
    factory = _factory()
    first = factory.get_context("t", "tenant-a", False)
    assert factory.get_context("t", "tenant-a", False) is first
    assert factory.get_context("t", "tenant-b", False) is not first


def test_current_context_is_process_wide() -> None:
    factory = _factory()
    current = factory.get_context("t", None, True)
    assert factory.get_context("t", "tenant-a", True) is current
    assert factory.get_context("t", None, False) is current


def test_boundary_inferred_from_scope() -> None:
    factory = _factory()
    with isolation_scope("tenant-c") as boundary:
        assert current_boundary() == "tenant-c"
        inferred = factory.get_context("t", None, False)
    assert boundary == "tenant-c"
    assert current_boundary() is None
    assert inferred is factory.get_context("t", "tenant-c", False)
    assert inferred.boundary == "tenant-c"


def test_context_cache_creates_once_under_contention() -> None:
    created: list[object] = []

    def create(boundary: object) -> object:
        created.append(boundary)
        return object()

    cache: ContextCache[object] = ContextCache(create)
    barrier = threading.Barrier(8)
    results: list[object] = []

    def worker() -> None:
        barrier.wait()
        results.append(cache.locate("shared", False))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert created == ["shared"]
    assert all(r is results[0] for r in results)
    assert cache.boundaries() == ["shared"]


def test_context_caches_loggers_by_name() -> None:
    ctx = SimpleLoggerContext()
    assert not ctx.has_logger("orders")
    logger = ctx.get_logger("orders")
    assert ctx.has_logger("orders")
    assert ctx.get_logger("orders") is logger


def test_simple_logger_writes_enabled_levels(capsys: pytest.CaptureFixture[str]) -> None:
    logger = _factory(simple_level="INFO").get_context("t", None, True).get_logger(
        "orders"
    )
    logger.debug("hidden")
    logger.info("order %s placed", 42)
    err = capsys.readouterr().err
    assert "hidden" not in err
    assert "INFO orders order 42 placed" in err


def test_simple_logger_default_threshold_is_error(
    capsys: pytest.CaptureFixture[str],
) -> None:
    logger = _factory().get_context("t", None, True).get_logger("")
    logger.warn("not shown")
    logger.error("shown")
    err = capsys.readouterr().err
    assert "not shown" not in err
    assert "ERROR root shown" in err


def test_simple_logger_stdout_stream(capsys: pytest.CaptureFixture[str]) -> None:
    logger = _factory(simple_stream="stdout").get_context("t", None, True).get_logger(
        "svc"
    )
    logger.fatal("down")
    captured = capsys.readouterr()
    assert "FATAL svc down" in captured.out
    assert captured.err == ""


def test_simple_logger_includes_traceback() -> None:
    buffer = io.StringIO()
    logger = SimpleLogger("svc", level="ERROR", stream=lambda: buffer)
    try:
        raise ValueError("broken invariant")
    except ValueError as exc:
        logger.error("request failed", exc=exc)
    text = buffer.getvalue()
    assert "ERROR svc request failed" in text
    assert "ValueError: broken invariant" in text


def test_simple_logger_contains_stream_errors() -> None:
    class _Broken(io.StringIO):
        def write(self, s: str) -> int:
            raise OSError("closed")

    logger = SimpleLogger("svc", level="TRACE", stream=lambda: _Broken())
    logger.trace("ignored")
    assert logger.is_enabled("TRACE")


def test_simple_logger_rejects_unknown_level() -> None:
    with pytest.raises(ValueError):
        SimpleLogger("svc", level="LOUD", stream=io.StringIO)


def test_simple_logger_accepts_exc_info_and_extra_fields() -> None:
    buffer = io.StringIO()
    logger = SimpleLogger("svc", level="ERROR", stream=lambda: buffer)
    try:
        raise KeyError("order-7")
    except KeyError:
        logger.error("lookup failed", exc_info=True)
    logger.error("payment declined", order_id=7, level="gold", message="card")

    text = buffer.getvalue()
    assert "ERROR svc lookup failed" in text
    assert "KeyError: 'order-7'" in text
    assert "payment declined order_id=7 level='gold' message='card'" in text


def test_simple_logger_exc_info_forms() -> None:
    buffer = io.StringIO()
    logger = SimpleLogger("svc", level="ERROR", stream=lambda: buffer)
    err = ValueError("explicit")
    logger.error("instance", exc_info=err)
    logger.error("tuple", exc_info=(type(err), err, None))
    logger.error("nothing active", exc_info=True)
    logger.error("disabled", exc_info=False)

    text = buffer.getvalue()
    assert text.count("ValueError: explicit") == 2
    assert "ERROR svc nothing active\n" in text
    assert "ERROR svc disabled\n" in text
