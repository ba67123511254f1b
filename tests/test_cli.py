"""CLI parser and command behaviour tests."""

from __future__ import annotations

import pytest

from partialgen.cli import _build_parser, main
from tests._fixtures.snapshot_builder import SnapshotBuilder, annotation, observable_field


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "generate"])
    assert args.verbose is True
    assert args.command == "generate"
    assert args.path == "."


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["inspect", "--verbose"])
    assert args.verbose is True
    assert args.command == "inspect"


def test_cli_generate_flags() -> None:
    parser = _build_parser()
    args = parser.parse_args(["generate", "project", "--out", "gen", "--dry-run", "--no-cache"])
    assert args.path == "project"
    assert args.out == "gen"
    assert args.dry_run is True
    assert args.no_cache is True


def test_cli_serve_defaults() -> None:
    parser = _build_parser()
    args = parser.parse_args(["serve"])
    assert args.host == "127.0.0.1"
    assert args.port == 8000
    assert args.verbose is False


def test_generate_reports_written_units(builder: SnapshotBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    builder.add("Card", members=[observable_field("_title", "string")])
    path = builder.write_snapshot()

    main(["generate", str(path)])

    out = capsys.readouterr().out
    assert "Generated 1 unit(s) in" in out
    assert "(0 from cache)" in out
    assert (builder.path() / "Generated" / "Demo_Card.g.cs").exists()


def test_generate_dry_run_prints_units(builder: SnapshotBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    builder.add("Card", members=[observable_field("_title", "string")])

    main(["generate", str(builder.write_snapshot()), "--dry-run"])

    out = capsys.readouterr().out
    assert out.startswith("// ---- Demo_Card.g.cs\n// <auto-generated/>")
    assert "public partial class Card" in out
    assert not (builder.path() / "Generated").exists()


def test_generate_exits_non_zero_on_errors(builder: SnapshotBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    builder.add("Tile", base_type="UserControl", annotations=[annotation("DataContextConfig", "GhostModel")])

    with pytest.raises(SystemExit) as excinfo:
        main(["generate", str(builder.write_snapshot())])

    assert excinfo.value.code == 1
    captured = capsys.readouterr()
    assert "No units generated" in captured.out
    assert "fatal: unresolved-model [Demo.Tile]" in captured.err
    assert "Generation finished with errors" in captured.err


def test_invalid_config_exits_with_message(builder: SnapshotBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    builder.add("Card", members=[observable_field("_title", "string")])
    builder.write({".partialgen.yml": "workers: 0\n"})

    with pytest.raises(SystemExit) as excinfo:
        main(["generate", str(builder.write_snapshot())])

    assert excinfo.value.code == 1
    assert "Invalid configuration: workers must be a positive integer" in capsys.readouterr().err


def test_inspect_lists_flags_and_members(builder: SnapshotBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    builder.add("UserDto", modifiers=(), members=[])
    builder.add(
        "User",
        annotations=[annotation("ModelConfig", "UserDto")],
        members=[observable_field("_name", "string")],
    )

    main(["inspect", str(builder.write_snapshot())])

    out = capsys.readouterr().out.splitlines()
    assert out == [
        "Demo.User: is_observable_model, has_model_mapping",
        "  member Name: string",
        "  model_reader -> global::Demo.UserDto",
    ]
