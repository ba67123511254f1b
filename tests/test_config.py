"""Tests for partialgen.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from partialgen.config import ConfigError, PartialGenConfig, load_config
from partialgen.constants import DEFAULT_VISUAL_ROOT


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, PartialGenConfig)
    assert config.root == tmp_path.resolve()
    assert config.output.directory == "Generated"
    assert config.output.clean is False
    assert config.analysis.private_prefix == "_"
    assert config.analysis.max_base_depth == 32
    assert config.analysis.visual_root == DEFAULT_VISUAL_ROOT
    assert "UserControl" in config.analysis.visual_types
    assert config.analysis.theme_variants == ["Dark", "Light"]
    assert config.cache.enabled is True
    assert config.sources.include == ["**/*.cs"]
    assert config.workers == 4


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".partialgen.yml"
    config_file.write_text(
        """
output:
  directory: "obj/Generated"
  clean: true
analysis:
  private_prefix: "m_"
  max_base_depth: 8
  visual_types: [MyPanel]
  property_types:
    Glow: "global::System.Windows.Media.Brush"
  theme_variants: [Dark, Light, Contrast]
cache:
  enabled: false
sources:
  include: ["src/**/*.cs"]
  exclude_paths: ["tests/"]
workers: 2
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.output.directory == "obj/Generated"
    assert config.output.clean is True
    assert config.analysis.private_prefix == "m_"
    assert config.analysis.max_base_depth == 8
    assert "MyPanel" in config.analysis.visual_types
    assert "Button" in config.analysis.visual_types
    assert config.analysis.property_types["Glow"] == "global::System.Windows.Media.Brush"
    assert config.analysis.property_types["Background"] == "global::System.Windows.Media.Brush"
    assert config.analysis.theme_variants == ["Dark", "Light", "Contrast"]
    assert config.cache.enabled is False
    assert config.sources.include == ["src/**/*.cs"]
    assert config.sources.exclude_paths == ["bin/", "obj/", ".git/", "tests/"]
    assert config.workers == 2


def test_load_config_resolves_directory_of_input_file(tmp_path: Path) -> None:
    (tmp_path / ".partialgen.yml").write_text("workers: 3\n", encoding="utf-8")
    snapshot = tmp_path / "snapshot.yml"
    snapshot.write_text("declarations: []\n", encoding="utf-8")

    config = load_config(snapshot)

    assert config.workers == 3
    assert config.root == tmp_path.resolve()


def test_load_config_rejects_non_mapping(tmp_path: Path) -> None:
    (tmp_path / ".partialgen.yml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_invalid_yaml(tmp_path: Path) -> None:
    (tmp_path / ".partialgen.yml").write_text("analysis: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


@pytest.mark.parametrize("content", ["analysis:\n  max_base_depth: 0\n", "workers: 0\n"])
def test_load_config_rejects_non_positive_limits(tmp_path: Path, content: str) -> None:
    (tmp_path / ".partialgen.yml").write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_signature_changes_with_output_relevant_settings(tmp_path: Path) -> None:
    first = PartialGenConfig(root=tmp_path)
    second = PartialGenConfig(root=tmp_path)
    second.analysis.private_prefix = "m_"

    assert first.signature() == PartialGenConfig(root=tmp_path).signature()
    assert first.signature() != second.signature()
