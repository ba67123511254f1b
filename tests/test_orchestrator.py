"""Integration tests for the generation orchestrator."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import pytest

from partialgen.orchestrator import Orchestrator
from partialgen.sources import SourceError
from tests._fixtures.snapshot_builder import SnapshotBuilder, annotation, observable_field, prop, theme


def _card(builder: SnapshotBuilder) -> None:
    builder.add("Card", members=[observable_field("_title", "string")])


def test_generate_keeps_snapshot_order_and_isolates_failures(builder: SnapshotBuilder) -> None:
    _card(builder)
    builder.add("Tile", base_type="UserControl", annotations=[annotation("DataContextConfig", "GhostModel")])
    builder.add(
        "Panel",
        members=[observable_field("_background", "Brush", theme("Dark"), theme("Light"), canHover=True)],
    )

    result = Orchestrator().generate(builder.snapshot())

    assert [unit.hint_name for unit in result.units] == ["Demo_Card.g.cs", "Demo_Panel.g.cs"]
    assert result.units_for("Demo.Tile") == []
    assert result.has_errors
    assert [(item.code, item.severity, item.declaration) for item in result.diagnostics] == [
        ("unresolved-model", "fatal", "Demo.Tile")
    ]


def test_classification_error_only_fails_its_declaration(builder: SnapshotBuilder) -> None:
    _card(builder)
    builder.add(
        "Broken",
        annotations=[annotation("ModelConfig", "CardDto"), annotation("ModelConfig", "OtherDto")],
        members=[observable_field("_value", "int")],
    )

    result = Orchestrator().generate(builder.snapshot())

    assert [unit.declaration for unit in result.units] == ["Demo.Card"]
    assert len(result.diagnostics) == 1
    diagnostic = result.diagnostics[0]
    assert diagnostic.code == "classification"
    assert diagnostic.declaration == "Demo.Broken"
    assert "only be declared once" in diagnostic.message


def test_name_collision_is_reported_without_unit(builder: SnapshotBuilder) -> None:
    builder.add(
        "Gauge",
        members=[
            observable_field("_hoveredOpacity", "double"),
            observable_field("_opacity", "double", canHover=True),
        ],
    )

    result = Orchestrator().generate(builder.snapshot())

    assert result.units == []
    assert [item.code for item in result.diagnostics] == ["name-collision"]
    assert result.diagnostics[0].declaration == "Demo.Gauge"


def test_non_partial_declarations_are_skipped(builder: SnapshotBuilder) -> None:
    builder.add("Sealed", modifiers=(), members=[observable_field("_title", "string")])

    result = Orchestrator().generate(builder.snapshot())

    assert result.units == []
    assert result.diagnostics == []


def test_run_writes_units_and_reuses_cache(builder: SnapshotBuilder) -> None:
    _card(builder)
    snapshot_path = builder.write_snapshot()
    root = builder.path().resolve()

    first = Orchestrator().run(snapshot_path)

    target = root / "Generated" / "Demo_Card.g.cs"
    assert first.written == [target]
    assert target.read_text(encoding="utf-8") == first.units[0].text
    assert (root / ".partialgen" / "cache.json").exists()
    assert first.cached == 0

    second = Orchestrator().run(snapshot_path)

    assert second.cached == 1
    assert second.units == first.units


def test_changed_declaration_misses_cache(builder: SnapshotBuilder) -> None:
    _card(builder)
    snapshot_path = builder.write_snapshot()
    Orchestrator().run(snapshot_path)

    card = builder.declarations[0]
    builder.declarations[0] = replace(card, members=card.members + (observable_field("_count", "int"),))
    builder.write_snapshot()
    result = Orchestrator().run(snapshot_path)

    assert result.cached == 0
    assert "public int Count" in result.units[0].text


def test_changed_base_in_own_namespace_misses_cache(builder: SnapshotBuilder) -> None:
    builder.add("Base", namespace="Other", modifiers=(), members=[prop("Background", "OtherBrush")])
    builder.add(
        "Base",
        modifiers=(),
        base_type="global::System.Windows.UIElement",
        members=[prop("Background", "BrushV1")],
    )
    builder.add("Card", base_type="Base", annotations=[annotation("Hover", "Background")])
    snapshot_path = builder.write_snapshot()
    first = Orchestrator().run(snapshot_path)
    assert "BrushV1" in first.units[0].text

    base = builder.declarations[1]
    builder.declarations[1] = replace(base, members=(prop("Background", "BrushV2"),))
    builder.write_snapshot()
    second = Orchestrator().run(snapshot_path)
    fresh = Orchestrator().run(snapshot_path, dry_run=True, use_cache=False)

    assert second.cached == 0
    assert "BrushV2" in second.units[0].text
    assert "OtherBrush" not in second.units[0].text
    assert second.units == fresh.units


def test_no_cache_leaves_no_cache_file(builder: SnapshotBuilder) -> None:
    _card(builder)

    result = Orchestrator().run(builder.write_snapshot(), use_cache=False)

    assert result.written
    assert not (builder.path() / ".partialgen").exists()


def test_dry_run_writes_nothing(builder: SnapshotBuilder) -> None:
    _card(builder)

    result = Orchestrator().run(builder.write_snapshot(), dry_run=True)

    assert result.dry_run
    assert result.written == []
    assert [unit.hint_name for unit in result.units] == ["Demo_Card.g.cs"]
    assert not (builder.path() / "Generated").exists()
    assert not (builder.path() / ".partialgen" / "cache.json").exists()


def test_clean_output_removes_stale_units(builder: SnapshotBuilder, tmp_path: Path) -> None:
    _card(builder)
    builder.write({".partialgen.yml": "output:\n  clean: true\n"})
    out = tmp_path / "out"
    out.mkdir()
    (out / "Demo_Old.g.cs").write_text("// stale", encoding="utf-8")
    (out / "notes.txt").write_text("keep", encoding="utf-8")

    result = Orchestrator().run(builder.write_snapshot(), out=out)

    assert sorted(path.name for path in out.iterdir()) == ["Demo_Card.g.cs", "notes.txt"]
    assert [path.name for path in result.written] == ["Demo_Card.g.cs"]


def test_run_over_csharp_project_ignores_previous_output(builder: SnapshotBuilder) -> None:
    builder.write(
        {
            "Models/Card.cs": """
            namespace Demo
            {
                public partial class Card
                {
                    [Observable]
                    private string _title = "Untitled";
                }
            }
            """,
            "obj/Debug/Skipped.cs": "public partial class Skipped { [Observable] private int _x; }",
        }
    )

    first = Orchestrator().run(builder.path())
    second = Orchestrator().run(builder.path())

    assert [unit.hint_name for unit in first.units] == ["Demo_Card.g.cs"]
    assert "public string Title" in first.units[0].text
    assert not second.has_errors
    assert second.units == first.units


def test_inspect_resolves_view_links(builder: SnapshotBuilder) -> None:
    builder.add("TileModel", members=[observable_field("_title", "string", canDependency=True)])
    builder.add("Tile", base_type="UserControl", annotations=[annotation("DataContextConfig", "TileModel")])

    inspection = Orchestrator().inspect(builder.snapshot())

    assert [item.display_name for item in inspection.descriptors] == ["Demo.TileModel", "Demo.Tile"]
    tile = inspection.descriptors[1]
    assert tile.flags.is_context_config
    assert tile.view_link is not None and tile.view_link.resolved is not None
    assert tile.view_link.resolved.qualified_name == "global::Demo.TileModel"
    assert inspection.diagnostics == []


def test_missing_input_raises_source_error(tmp_path: Path) -> None:
    with pytest.raises(SourceError):
        Orchestrator().run(tmp_path / "missing.json")
