"""Load declaration snapshots serialised as YAML or JSON."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple

import yaml

from ..logging import get_logger
from ..models import Annotation, Declaration, Member, Parameter, Snapshot
from ..naming import annotation_short_name
from .base import Source, SourceError

logger = get_logger("sources.snapshot")

_SUFFIXES = {".yml", ".yaml", ".json"}
_MEMBER_KINDS = {"field", "property", "method"}


class SnapshotSource(Source):
    """Reads a pre-extracted snapshot document.

    The document is a mapping with an optional ``origin`` and a
    ``declarations`` list. Annotations may be written as a bare name or as a
    mapping with ``name``, ``arguments``, ``named``, ``argument_text`` and
    ``interfaces``.
    """

    name = "snapshot"

    def supports(self, path: Path) -> bool:
        return path.is_file() and path.suffix.lower() in _SUFFIXES

    def load(self, path: Path) -> Snapshot:
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise SourceError(f"Failed to read snapshot {path}: {exc}") from exc

        try:
            if path.suffix.lower() == ".json":
                data = json.loads(text)
            else:
                data = yaml.safe_load(text)
        except (json.JSONDecodeError, yaml.YAMLError) as exc:
            raise SourceError(f"Failed to parse snapshot {path}: {exc}") from exc

        snapshot = parse_snapshot(data, origin=str(path))
        logger.debug("Loaded %d declaration(s) from %s", len(snapshot.declarations), path)
        return snapshot


def parse_snapshot(data: Any, *, origin: str = "") -> Snapshot:
    """Convert a decoded snapshot document into model objects."""
    if data is None:
        return Snapshot(declarations=[], origin=origin)
    if isinstance(data, list):
        data = {"declarations": data}
    if not isinstance(data, dict):
        raise SourceError("Snapshot root must be a mapping or a list of declarations")
    raw_declarations = data.get("declarations") or []
    if not isinstance(raw_declarations, list):
        raise SourceError("'declarations' must be a list")

    declarations = [
        _declaration(item, index, origin) for index, item in enumerate(raw_declarations)
    ]
    return Snapshot(declarations=declarations, origin=str(data.get("origin") or origin))


def _declaration(raw: Any, index: int, origin: str) -> Declaration:
    if not isinstance(raw, dict):
        raise SourceError(f"Declaration #{index} must be a mapping")
    name = _text(raw, "name", f"declaration #{index}")
    if not name:
        raise SourceError(f"Declaration #{index} has no name")
    where = f"declaration '{name}'"
    return Declaration(
        name=name,
        namespace=_text(raw, "namespace", where),
        kind=_text(raw, "kind", where) or "class",
        accessibility=_text(raw, "accessibility", where) or "internal",
        modifiers=_strings(raw.get("modifiers"), f"{where} modifiers"),
        base_type=_text(raw, "base_type", where) or None,
        annotations=_annotations(raw.get("annotations"), where),
        members=tuple(_member(item, where) for item in _list(raw.get("members"), f"{where} members")),
        origin=_text(raw, "origin", where) or origin,
    )


def _member(raw: Any, owner: str) -> Member:
    if not isinstance(raw, dict):
        raise SourceError(f"Members of {owner} must be mappings")
    name = _text(raw, "name", owner)
    if not name:
        raise SourceError(f"A member of {owner} has no name")
    where = f"member '{name}' of {owner}"
    kind = (_text(raw, "kind", where) or "field").lower()
    if kind not in _MEMBER_KINDS:
        raise SourceError(f"Unknown kind '{kind}' for {where}")
    initializer = _text(raw, "initializer", where)
    if initializer and not initializer.lstrip().startswith("="):
        initializer = f"= {initializer}"
    return Member(
        kind=kind,
        name=name,
        type=_text(raw, "type", where),
        accessibility=_text(raw, "accessibility", where) or "private",
        initializer=initializer,
        annotations=_annotations(raw.get("annotations"), where),
        parameters=tuple(_parameter(item, where) for item in _list(raw.get("parameters"), where)),
        has_getter=bool(raw.get("has_getter", True)),
        has_setter=bool(raw.get("has_setter", kind != "method")),
        is_static=bool(raw.get("is_static", False)),
    )


def _parameter(raw: Any, owner: str) -> Parameter:
    if isinstance(raw, dict):
        return Parameter(name=str(raw.get("name", "")), type=str(raw.get("type", "")))
    if isinstance(raw, str) and " " in raw.strip():
        type_name, name = raw.strip().rsplit(" ", 1)
        return Parameter(name=name, type=type_name.strip())
    raise SourceError(f"Invalid parameter {raw!r} on {owner}")


def _annotations(raw: Any, owner: str) -> Tuple[Annotation, ...]:
    annotations: List[Annotation] = []
    for item in _list(raw, f"{owner} annotations"):
        if isinstance(item, str):
            annotations.append(Annotation(name=annotation_short_name(item), qualified_name=item))
            continue
        if not isinstance(item, dict) or not item.get("name"):
            raise SourceError(f"Invalid annotation {item!r} on {owner}")
        written = str(item["name"])
        named = item.get("named") or {}
        if not isinstance(named, Mapping):
            raise SourceError(f"Named arguments of '{written}' on {owner} must be a mapping")
        annotations.append(
            Annotation(
                name=annotation_short_name(written),
                qualified_name=str(item.get("qualified_name") or written),
                arguments=tuple(_list(item.get("arguments"), f"'{written}' arguments")),
                named=dict(named),
                argument_text=str(item.get("argument_text") or ""),
                interfaces=_strings(item.get("interfaces"), f"'{written}' interfaces"),
            )
        )
    return tuple(annotations)


def _text(raw: Dict[str, Any], key: str, where: str) -> str:
    value = raw.get(key)
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        raise SourceError(f"'{key}' of {where} must be text")
    return str(value)


def _list(value: Any, where: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise SourceError(f"{where} must be a list")
    return value


def _strings(value: Any, where: str) -> Tuple[str, ...]:
    if isinstance(value, str):
        return tuple(part for part in value.split() if part)
    return tuple(str(item) for item in _list(value, where))


__all__ = ["SnapshotSource", "parse_snapshot"]
