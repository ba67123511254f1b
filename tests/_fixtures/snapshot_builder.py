"""Helper utilities for constructing declaration snapshots in tests."""

from __future__ import annotations

from dataclasses import asdict
import json
import textwrap
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence

from partialgen.constants import THEME_CAPABILITY
from partialgen.models import Annotation, Declaration, Member, Parameter, Snapshot
from partialgen.query import SnapshotQuery


def annotation(name: str, *arguments: Any, interfaces: Sequence[str] = (), **named: Any) -> Annotation:
    return Annotation(
        name=name,
        qualified_name=name,
        arguments=tuple(arguments),
        named=dict(named),
        interfaces=tuple(interfaces),
    )


def theme(variant: str, *arguments: Any) -> Annotation:
    """A member-level theme variant annotation such as ``[Dark("#1e1e1e")]``."""
    return annotation(variant, *arguments, interfaces=(THEME_CAPABILITY,))


def observable_field(
    name: str,
    type_name: str,
    *annotations: Annotation,
    initializer: str = "",
    **observable: Any,
) -> Member:
    return Member(
        kind="field",
        name=name,
        type=type_name,
        initializer=initializer,
        annotations=(annotation("Observable", **observable), *annotations),
    )


def prop(name: str, type_name: str, *, accessibility: str = "public", has_setter: bool = True) -> Member:
    return Member(kind="property", name=name, type=type_name, accessibility=accessibility, has_setter=has_setter)


def method(
    name: str,
    *parameters: tuple[str, str],
    returns: str = "void",
    accessibility: str = "private",
    annotations: Sequence[Annotation] = (),
) -> Member:
    return Member(
        kind="method",
        name=name,
        type=returns,
        accessibility=accessibility,
        annotations=tuple(annotations),
        parameters=tuple(Parameter(name=param, type=type_name) for type_name, param in parameters),
        has_getter=False,
        has_setter=False,
    )


class SnapshotBuilder:
    """Utility collecting declarations and writing project files for a run."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "project"
        self.root.mkdir()
        self.declarations: List[Declaration] = []

    def add(
        self,
        name: str,
        *,
        namespace: str = "Demo",
        base_type: Optional[str] = None,
        annotations: Sequence[Annotation] = (),
        members: Sequence[Member] = (),
        modifiers: Sequence[str] = ("partial",),
        accessibility: str = "public",
    ) -> Declaration:
        declaration = Declaration(
            name=name,
            namespace=namespace,
            accessibility=accessibility,
            modifiers=tuple(modifiers),
            base_type=base_type,
            annotations=tuple(annotations),
            members=tuple(members),
            origin=f"{name}.cs",
        )
        self.declarations.append(declaration)
        return declaration

    def snapshot(self) -> Snapshot:
        return Snapshot(declarations=list(self.declarations), origin="tests")

    def query(self) -> SnapshotQuery:
        return SnapshotQuery(self.snapshot())

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the project."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def write_snapshot(self, name: str = "snapshot.json") -> Path:
        """Serialise the collected declarations as a JSON snapshot document."""
        payload = {
            "origin": "tests",
            "declarations": [asdict(declaration) for declaration in self.declarations],
        }
        path = self.root / name
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        return path

    def path(self) -> Path:
        return self.root


__all__ = [
    "SnapshotBuilder",
    "annotation",
    "method",
    "observable_field",
    "prop",
    "theme",
]
