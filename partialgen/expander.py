"""Hover x theme combinatorial expansion of reactive members."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Set

from .descriptors import MemberDescriptor, ThemeVariantTag
from .diagnostics import ExpansionError
from .naming import is_identifier


class CompanionKind(str, Enum):
    HOVERED = "hovered"
    NO_HOVERED = "no_hovered"
    THEMED = "themed"


class StorageScope(str, Enum):
    """Where a companion's value lives between theme switches."""

    INSTANCE = "instance"
    SHARED = "shared"
    ISOLATED = "isolated"


@dataclass(frozen=True)
class Companion:
    """One generated member derived from a reactive base member."""

    name: str
    member: MemberDescriptor
    kind: CompanionKind
    theme: Optional[ThemeVariantTag] = None
    storage: StorageScope = StorageScope.INSTANCE

    @property
    def declared_type(self) -> str:
        return self.member.declared_type

    @property
    def persists(self) -> bool:
        # Hovered values are recomputed from the board; only resting values persist.
        return self.storage is not StorageScope.INSTANCE and self.kind is not CompanionKind.HOVERED


def expand_member(member: MemberDescriptor, *, declaration: str = "") -> List[Companion]:
    """Expand one member into its companions, in theme tag order."""
    if not member.can_hover and not member.themes:
        return []
    _check_tags(member, declaration)
    name = member.public_name

    if not member.themes:
        return [
            Companion(f"Hovered{name}", member, CompanionKind.HOVERED),
            Companion(f"NoHovered{name}", member, CompanionKind.NO_HOVERED),
        ]

    scope = StorageScope.ISOLATED if member.can_isolated_storage else StorageScope.SHARED
    companions: List[Companion] = []
    for tag in member.themes:
        if member.can_hover:
            companions.append(Companion(f"{tag.name}Hovered{name}", member, CompanionKind.HOVERED, tag, scope))
            companions.append(Companion(f"{tag.name}NoHovered{name}", member, CompanionKind.NO_HOVERED, tag, scope))
        else:
            companions.append(Companion(f"{tag.name}{name}", member, CompanionKind.THEMED, tag, scope))
    return companions


def expand(members: Iterable[MemberDescriptor], *, declaration: str = "") -> List[Companion]:
    """Expand every member, preserving member order and tag order within a member."""
    companions: List[Companion] = []
    for member in members:
        companions.extend(expand_member(member, declaration=declaration))
    return companions


def _check_tags(member: MemberDescriptor, declaration: str) -> None:
    seen: Set[str] = set()
    for tag in member.themes:
        if not tag.name or not is_identifier(tag.name):
            raise ExpansionError(member.public_name, tag.type_reference, declaration=declaration)
        if tag.name in seen:
            raise ExpansionError(
                member.public_name,
                tag.type_reference,
                declaration=declaration,
                reason=f"variant '{tag.name}' is declared more than once",
            )
        seen.add(tag.name)


__all__ = ["Companion", "CompanionKind", "StorageScope", "expand", "expand_member"]
