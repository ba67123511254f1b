"""Snapshot sources and discovery utilities."""

from __future__ import annotations

from dataclasses import replace
from importlib import metadata
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Set

from ..config import AnalysisConfig, PartialGenConfig
from ..constants import THEME_CAPABILITY
from ..models import Annotation, Declaration, Snapshot
from .base import Source, SourceError
from .csharp import CSharpSource
from .snapshot import SnapshotSource, parse_snapshot

_ENTRY_POINT_GROUP = "partialgen.sources"

_BUILTIN_FACTORIES: dict[str, Callable[[], Source]] = {
    "snapshot": SnapshotSource,
    "csharp": CSharpSource,
}


def discover_sources(enabled: Sequence[str] | None = None) -> List[Source]:
    """Return instantiated sources, honoring optional enabled names."""

    enabled_set: Set[str] | None = None
    if enabled is not None:
        enabled_set = {name.lower() for name in enabled}

    sources: List[Source] = []
    seen: Set[str] = set()

    def _add(name: str, factory: Callable[[], Source]) -> None:
        key = name.lower()
        if enabled_set is not None and key not in enabled_set:
            return
        if key in seen:
            return
        instance = factory()
        if not isinstance(instance, Source):
            raise TypeError(f"Source factory for '{name}' did not return a Source instance")
        sources.append(instance)
        seen.add(key)
        if enabled_set is not None:
            enabled_set.discard(key)

    for name, factory in _BUILTIN_FACTORIES.items():
        _add(name, factory)

    for entry in _iter_entry_points():
        name = entry.name
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover - depends on installed plugins
            raise RuntimeError(f"Failed to load source entry point '{name}': {exc}") from exc

        def _factory(obj: object = loaded) -> Source:
            return _coerce_source(obj)

        _add(name, _factory)

    if enabled_set:
        missing = ", ".join(sorted(enabled_set))
        raise ValueError(f"Unknown sources requested: {missing}")

    return sources


def load_snapshot(
    path: Path,
    config: Optional[PartialGenConfig] = None,
    sources: Optional[Sequence[Source]] = None,
) -> Snapshot:
    """Load ``path`` with the first source that supports it.

    Annotations named after a configured theme variant are marked as
    implementing the theme capability when the source could not tell.
    """
    if not path.exists():
        raise SourceError(f"Input path does not exist: {path}")
    candidates = list(sources) if sources is not None else discover_sources()
    for source in candidates:
        if not source.supports(path):
            continue
        if config is not None:
            source.configure(config)
        snapshot = source.load(path)
        analysis = config.analysis if config is not None else AnalysisConfig()
        return mark_theme_annotations(snapshot, analysis)
    raise SourceError(f"No source can read {path}")


def mark_theme_annotations(snapshot: Snapshot, analysis: AnalysisConfig) -> Snapshot:
    variants = set(analysis.theme_variants)
    if not variants:
        return snapshot
    declarations = [_mark_declaration(item, variants) for item in snapshot.declarations]
    return Snapshot(declarations=declarations, origin=snapshot.origin)


def _mark_declaration(declaration: Declaration, variants: Set[str]) -> Declaration:
    members = tuple(
        replace(member, annotations=_mark(member.annotations, variants)) for member in declaration.members
    )
    return replace(declaration, members=members)


def _mark(annotations: Iterable[Annotation], variants: Set[str]) -> tuple[Annotation, ...]:
    marked = []
    for annotation in annotations:
        if annotation.name in variants and not annotation.implements(THEME_CAPABILITY):
            annotation = replace(annotation, interfaces=annotation.interfaces + (THEME_CAPABILITY,))
        marked.append(annotation)
    return tuple(marked)


def _coerce_source(obj: object) -> Source:
    if isinstance(obj, Source):
        return obj
    if isinstance(obj, type) and issubclass(obj, Source):
        return obj()
    if callable(obj):
        instance = obj()
        if isinstance(instance, Source):
            return instance
    raise TypeError("Source entry point must be a Source subclass or factory")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=_ENTRY_POINT_GROUP)


__all__ = [
    "CSharpSource",
    "Source",
    "SourceError",
    "SnapshotSource",
    "discover_sources",
    "load_snapshot",
    "mark_theme_annotations",
    "parse_snapshot",
]
