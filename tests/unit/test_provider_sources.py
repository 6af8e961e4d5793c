from __future__ import annotations

import types
from pathlib import Path
from typing import Any

import pytest

from logbridge.core.errors import ProviderMetadataError
from logbridge.core.settings import CoreSettings, Settings
from logbridge.providers import sources
from logbridge.providers.sources import (
    PROVIDER_RESOURCE,
    EntryPointSource,
    MappingSource,
    PropertiesFileSource,
    enumerate_sources,
    parse_properties,
    path_sources,
    register_provider,
    registered_sources,
)


def _fake_entry_point(name: str, target: Any) -> Any:
    ep = types.SimpleNamespace()
    ep.name = name
    ep.load = lambda: target
    return ep


class _FakeEntryPoints:
    def __init__(self, group: str, eps: list[Any]) -> None:
        self._group = group
        self._eps = eps

    def select(self, group: str) -> list[Any]:
        return self._eps if group == self._group else []


def test_parse_properties_separators_and_comments() -> None:
    text = """
    # provider for the test backend
    ! legacy comment style
    LoggerContextFactory = pkg.module:Factory
    APIVersion: 2.0.1
    FactoryPriority=10
    """
    assert parse_properties(text) == {
        "LoggerContextFactory": "pkg.module:Factory",
        "APIVersion": "2.0.1",
        "FactoryPriority": "10",
    }


def test_parse_properties_first_separator_wins() -> None:
    record = parse_properties("LoggerContextFactory=pkg.module:Factory")
    assert record["LoggerContextFactory"] == "pkg.module:Factory"


def test_parse_properties_rejects_malformed_line() -> None:
    with pytest.raises(ProviderMetadataError) as info:
        parse_properties("APIVersion 2.0.1", source="broken.properties")
    assert info.value.context["line"] == 1
    assert "broken.properties" in str(info.value)


def test_properties_file_source_reads_file(tmp_path: Path) -> None:
    path = tmp_path / PROVIDER_RESOURCE
    path.write_text("APIVersion=2.0.1\n", encoding="utf-8")
    source = PropertiesFileSource(path)
    assert source.name == str(path)
    assert source.read() == {"APIVersion": "2.0.1"}


def test_properties_file_source_missing_file(tmp_path: Path) -> None:
    source = PropertiesFileSource(tmp_path / "missing.properties")
    with pytest.raises(ProviderMetadataError) as info:
        source.read()
    assert isinstance(info.value.cause, OSError)


def test_entry_point_source_mapping_and_module_metadata() -> None:
    record = {"APIVersion": "2.0.1"}
    module = types.SimpleNamespace(PROVIDER_METADATA=record)
    assert EntryPointSource(_fake_entry_point("a", record)).read() == record
    assert EntryPointSource(_fake_entry_point("b", module)).read() == record


def test_entry_point_source_without_metadata() -> None:
    source = EntryPointSource(_fake_entry_point("bare", object()))
    assert source.name == "entry_point:bare"
    with pytest.raises(ProviderMetadataError):
        source.read()


def test_mapping_source_returns_copy() -> None:
    source = MappingSource("inline", {"APIVersion": "2.0.1"})
    record = dict(source.read())
    record["APIVersion"] = "9"
    assert source.read()["APIVersion"] == "2.0.1"


def test_register_provider_keeps_order() -> None:
    register_provider({"APIVersion": "2.0.1"})
    register_provider({"APIVersion": "2.0.0"}, name="second")
    names = [s.name for s in registered_sources()]
    assert names == ["registered:0", "second"]


def test_path_sources_searches_recursively(tmp_path: Path) -> None:
    (tmp_path / "a").mkdir()
    (tmp_path / "b" / "nested").mkdir(parents=True)
    (tmp_path / "a" / PROVIDER_RESOURCE).write_text("APIVersion=2.0.1\n")
    (tmp_path / "b" / "nested" / PROVIDER_RESOURCE).write_text("APIVersion=2.0.0\n")
    (tmp_path / "b" / "other.properties").write_text("APIVersion=2.0.0\n")
    found = path_sources([tmp_path])
    assert [Path(s.name).parent.name for s in found] == ["a", "nested"]


def test_path_sources_skips_missing_directory(
    tmp_path: Path, diagnostics_capture: list[dict[str, Any]]
) -> None:
    assert path_sources([tmp_path / "nope"]) == []
    assert diagnostics_capture[0]["level"] == "DEBUG"


def test_enumerate_sources_combines_enumerators(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    (tmp_path / PROVIDER_RESOURCE).write_text("APIVersion=2.0.1\n")
    eps = _FakeEntryPoints(
        "logbridge.providers", [_fake_entry_point("ep", {"APIVersion": "2.0.1"})]
    )
    monkeypatch.setattr(sources.importlib.metadata, "entry_points", lambda: eps)
    register_provider({"APIVersion": "2.0.1"}, name="inline")

    settings = Settings(core=CoreSettings(provider_paths=[str(tmp_path)]))
    names = [s.name for s in enumerate_sources(settings)]
    assert names == [
        "entry_point:ep",
        str(tmp_path / PROVIDER_RESOURCE),
        "inline",
    ]


def test_enumerate_sources_isolates_failing_enumerator(
    monkeypatch: pytest.MonkeyPatch, diagnostics_capture: list[dict[str, Any]]
) -> None:
    def _boom() -> Any:
        raise RuntimeError("metadata index corrupt")

    monkeypatch.setattr(sources.importlib.metadata, "entry_points", _boom)
    register_provider({"APIVersion": "2.0.1"}, name="inline")

    names = [s.name for s in enumerate_sources(Settings())]
    assert names == ["inline"]
    errors = [p for p in diagnostics_capture if p["level"] == "ERROR"]
    assert errors[0]["kind"] == "entry_points"
    assert errors[0]["error"] == "metadata index corrupt"


def test_provider_paths_from_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    (tmp_path / PROVIDER_RESOURCE).write_text("APIVersion=2.0.1\n")
    monkeypatch.setenv("LOGBRIDGE_CORE__PROVIDER_PATHS", f'["{tmp_path}"]')
    monkeypatch.setattr(
        sources.importlib.metadata,
        "entry_points",
        lambda: _FakeEntryPoints("logbridge.providers", []),
    )
    names = [s.name for s in enumerate_sources()]
    assert names == [str(tmp_path / PROVIDER_RESOURCE)]
