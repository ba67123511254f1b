"""Configuration loading for partialgen (.partialgen.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .constants import (
    DEFAULT_THEME_NAMESPACE,
    DEFAULT_THEME_VARIANTS,
    DEFAULT_VISUAL_ROOT,
    KNOWN_PROPERTY_TYPES,
    KNOWN_VISUAL_TYPES,
)

CONFIG_FILENAME = ".partialgen.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class OutputConfig:
    """Where generated units are written."""

    directory: str = "Generated"
    clean: bool = False


@dataclass
class AnalysisConfig:
    """Knobs for classification and naming."""

    private_prefix: str = "_"
    max_base_depth: int = 32
    visual_root: str = DEFAULT_VISUAL_ROOT
    visual_types: List[str] = field(default_factory=lambda: list(KNOWN_VISUAL_TYPES))
    property_types: Dict[str, str] = field(default_factory=lambda: dict(KNOWN_PROPERTY_TYPES))
    theme_variants: List[str] = field(default_factory=lambda: list(DEFAULT_THEME_VARIANTS))
    theme_namespace: str = DEFAULT_THEME_NAMESPACE


@dataclass
class CacheConfig:
    """Incremental generation cache settings."""

    enabled: bool = True
    path: str = ".partialgen/cache.json"


@dataclass
class SourcesConfig:
    """Source discovery for the C# front end."""

    include: List[str] = field(default_factory=lambda: ["**/*.cs"])
    exclude_paths: List[str] = field(default_factory=lambda: ["bin/", "obj/", ".git/"])


@dataclass
class PartialGenConfig:
    """Represents the settings defined in .partialgen.yml."""

    root: Path
    output: OutputConfig = field(default_factory=OutputConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    sources: SourcesConfig = field(default_factory=SourcesConfig)
    workers: int = 4

    def signature(self) -> str:
        """Stable text capturing every setting that changes generated output."""
        analysis = self.analysis
        parts = [
            analysis.private_prefix,
            str(analysis.max_base_depth),
            analysis.visual_root,
            ",".join(sorted(analysis.visual_types)),
            ",".join(f"{key}={value}" for key, value in sorted(analysis.property_types.items())),
            ",".join(sorted(analysis.theme_variants)),
            analysis.theme_namespace,
        ]
        return "|".join(parts)


def load_config(config_path: Path) -> PartialGenConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return PartialGenConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    output = OutputConfig()
    output_data = _as_dict(data.get("output"))
    if output_data:
        output.directory = _as_str(output_data.get("directory")) or output.directory
        output.clean = _as_bool(output_data.get("clean")) or False

    analysis = AnalysisConfig()
    analysis_data = _as_dict(data.get("analysis"))
    if analysis_data:
        prefix = analysis_data.get("private_prefix")
        if prefix is not None:
            analysis.private_prefix = str(prefix)
        depth = _as_int(analysis_data.get("max_base_depth"))
        if depth is not None:
            if depth < 1:
                raise ConfigError("analysis.max_base_depth must be a positive integer")
            analysis.max_base_depth = depth
        analysis.visual_root = _as_str(analysis_data.get("visual_root")) or analysis.visual_root
        analysis.visual_types.extend(
            name for name in _as_str_list(analysis_data.get("visual_types")) if name not in analysis.visual_types
        )
        for key, value in _as_dict(analysis_data.get("property_types")).items():
            analysis.property_types[str(key)] = str(value)
        variants = _as_str_list(analysis_data.get("theme_variants"))
        if variants:
            analysis.theme_variants = variants
        analysis.theme_namespace = _as_str(analysis_data.get("theme_namespace")) or analysis.theme_namespace

    cache = CacheConfig()
    cache_data = data.get("cache")
    if isinstance(cache_data, bool):
        cache.enabled = cache_data
    elif isinstance(cache_data, dict):
        enabled = _as_bool(cache_data.get("enabled"))
        if enabled is not None:
            cache.enabled = enabled
        cache.path = _as_str(cache_data.get("path")) or cache.path

    sources = SourcesConfig()
    sources_data = _as_dict(data.get("sources"))
    if sources_data:
        include = _as_str_list(sources_data.get("include"))
        if include:
            sources.include = include
        sources.exclude_paths.extend(
            path for path in _as_str_list(sources_data.get("exclude_paths")) if path not in sources.exclude_paths
        )

    workers = _as_int(data.get("workers"))
    if workers is not None and workers < 1:
        raise ConfigError("workers must be a positive integer")

    return PartialGenConfig(
        root=root,
        output=output,
        analysis=analysis,
        cache=cache,
        sources=sources,
        workers=workers or 4,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "AnalysisConfig",
    "CONFIG_FILENAME",
    "CacheConfig",
    "ConfigError",
    "OutputConfig",
    "PartialGenConfig",
    "SourcesConfig",
    "load_config",
]
