"""Read-only semantic lookups over one declaration snapshot."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Dict, List, Optional, Sequence, Tuple

from .models import Annotation, Declaration, Member, Snapshot
from .naming import split_qualified


class SemanticQuery(ABC):
    """Contract for the host's declaration and annotation inspection service."""

    @abstractmethod
    def declarations(self) -> Sequence[Declaration]:
        """Return every declaration in snapshot order."""

    @abstractmethod
    def annotations_of(self, declaration: Declaration) -> Tuple[Annotation, ...]:
        """Return the class-level annotations of a declaration."""

    @abstractmethod
    def members_of(self, declaration: Declaration) -> Tuple[Member, ...]:
        """Return the members declared directly on a declaration."""

    @abstractmethod
    def base_type_of(self, declaration: Declaration) -> Optional[str]:
        """Return the base type name as written, or None for the implicit root."""

    @abstractmethod
    def find_declaration(self, name: str, namespace: Optional[str] = None) -> Optional[Declaration]:
        """Find a declaration by simple or qualified name, honoring a namespace filter."""

    def resolve_base(self, declaration: Declaration) -> Optional[Declaration]:
        """Look up the declaration named as the base type, preferring the same namespace."""
        base = self.base_type_of(declaration)
        if not base:
            return None
        base_namespace, _ = split_qualified(base)
        if not base_namespace and declaration.namespace:
            local = self.find_declaration(base, declaration.namespace)
            if local is not None:
                return local
        return self.find_declaration(base)


class SnapshotQuery(SemanticQuery):
    """Query service backed by an in-memory :class:`Snapshot`.

    Partial parts of one type are merged on construction so every later phase
    sees a single declaration with annotations and members in source order.
    """

    def __init__(self, snapshot: Snapshot) -> None:
        self._snapshot = snapshot
        self._declarations = _merge_partials(snapshot.declarations)
        self._by_name: Dict[str, List[Declaration]] = {}
        for declaration in self._declarations:
            self._by_name.setdefault(declaration.name, []).append(declaration)

    @property
    def origin(self) -> str:
        return self._snapshot.origin

    def declarations(self) -> Sequence[Declaration]:
        return tuple(self._declarations)

    def annotations_of(self, declaration: Declaration) -> Tuple[Annotation, ...]:
        return declaration.annotations

    def members_of(self, declaration: Declaration) -> Tuple[Member, ...]:
        return declaration.members

    def base_type_of(self, declaration: Declaration) -> Optional[str]:
        return declaration.base_type or None

    def find_declaration(self, name: str, namespace: Optional[str] = None) -> Optional[Declaration]:
        qualified_namespace, simple_name = split_qualified(name)
        for candidate in self._by_name.get(simple_name, []):
            if qualified_namespace and candidate.namespace != qualified_namespace:
                continue
            if namespace and candidate.namespace != namespace:
                continue
            return candidate
        return None


def _merge_partials(declarations: Sequence[Declaration]) -> List[Declaration]:
    merged: Dict[Tuple[str, str], Declaration] = {}
    order: List[Tuple[str, str]] = []
    for declaration in declarations:
        key = (declaration.namespace, declaration.name)
        existing = merged.get(key)
        if existing is None:
            merged[key] = declaration
            order.append(key)
            continue
        merged[key] = _combine(existing, declaration)
    return [merged[key] for key in order]


def _combine(first: Declaration, second: Declaration) -> Declaration:
    modifiers = first.modifiers + tuple(item for item in second.modifiers if item not in first.modifiers)
    accessibility = first.accessibility
    if "public" in (first.accessibility, second.accessibility):
        accessibility = "public"
    origin = first.origin
    if second.origin and second.origin != first.origin:
        origin = f"{first.origin};{second.origin}" if first.origin else second.origin
    return replace(
        first,
        accessibility=accessibility,
        modifiers=modifiers,
        base_type=first.base_type or second.base_type,
        annotations=first.annotations + second.annotations,
        members=first.members + second.members,
        origin=origin,
    )


__all__ = ["SemanticQuery", "SnapshotQuery"]
