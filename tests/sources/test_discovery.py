"""Tests for source discovery utilities."""

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from partialgen.models import Snapshot
from partialgen.sources import CSharpSource, Source, SnapshotSource, discover_sources


class DummySource(Source):
    """Test source used for plugin discovery validation."""

    name = "dummy"

    def supports(self, path: Path) -> bool:  # pragma: no cover - unused
        return False

    def load(self, path: Path) -> Snapshot:  # pragma: no cover - unused
        return Snapshot(declarations=[])


def test_discover_sources_returns_builtin_sources() -> None:
    sources = discover_sources()
    classes = [type(source) for source in sources]
    assert classes[:2] == [SnapshotSource, CSharpSource]


def test_discover_sources_respects_enabled_filter() -> None:
    sources = discover_sources(["CSharp"])
    assert len(sources) == 1
    assert isinstance(sources[0], CSharpSource)


def test_discover_sources_loads_entry_points(monkeypatch: pytest.MonkeyPatch) -> None:
    dummy_entry = SimpleNamespace(name="dummy", load=lambda: DummySource)

    class DummyEntryPoints(list):
        def select(self, **kwargs):
            if kwargs.get("group") == "partialgen.sources":
                return self
            return []

    monkeypatch.setattr(
        "partialgen.sources.metadata.entry_points",
        lambda: DummyEntryPoints([dummy_entry]),
    )

    sources = discover_sources(["dummy"])
    assert len(sources) == 1
    assert isinstance(sources[0], DummySource)


def test_discover_sources_rejects_non_source_entry_points(monkeypatch: pytest.MonkeyPatch) -> None:
    bogus_entry = SimpleNamespace(name="bogus", load=lambda: object)

    class DummyEntryPoints(list):
        def select(self, **kwargs):
            return self

    monkeypatch.setattr("partialgen.sources.metadata.entry_points", lambda: DummyEntryPoints([bogus_entry]))

    with pytest.raises(TypeError):
        discover_sources(["bogus"])


def test_discover_sources_raises_for_unknown_name() -> None:
    with pytest.raises(ValueError):
        discover_sources(["does-not-exist"])
