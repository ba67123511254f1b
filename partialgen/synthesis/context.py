"""Per-declaration facts shared by the section builders."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from ..constants import DYNAMIC_THEME, NAMESPACE_TRANSITION
from ..descriptors import DeclarationDescriptor, MemberDescriptor

TRANSITION_BOARD = f"{NAMESPACE_TRANSITION}TransitionBoard"
TRANSITION_FACTORY = f"{NAMESPACE_TRANSITION}Transition"
SYSTEM_TYPE = "global::System.Type"


@dataclass(frozen=True)
class UnitContext:
    descriptor: DeclarationDescriptor

    @property
    def self_type(self) -> str:
        return self.descriptor.qualified_name

    @property
    def is_context_config(self) -> bool:
        return self.descriptor.flags.is_context_config

    @property
    def model_members(self) -> Tuple[MemberDescriptor, ...]:
        """Observable members synthesised on this declaration."""
        if self.is_context_config:
            return ()
        return self.descriptor.members

    @property
    def view_members(self) -> Tuple[MemberDescriptor, ...]:
        """The view's own hover/theme targets (inherited visual properties)."""
        if self.is_context_config or not self.descriptor.flags.is_view_bound:
            return ()
        return self.descriptor.view_members

    @property
    def hover_members(self) -> Tuple[MemberDescriptor, ...]:
        return tuple(member for member in self.model_members + self.view_members if member.can_hover)

    @property
    def has_hover(self) -> bool:
        return bool(self.hover_members)

    @property
    def theme_aware(self) -> bool:
        return self.descriptor.flags.is_theme_aware

    @property
    def builds_constructors(self) -> bool:
        return not self.is_context_config

    @property
    def linked_model(self) -> Optional[DeclarationDescriptor]:
        """Resolved model descriptor of a context-config view."""
        link = self.descriptor.view_link
        if link is None or link.resolved is None:
            return None
        return link.resolved.descriptor

    @property
    def overridable(self) -> str:
        """Modifiers for generated members derived types may replace."""
        if {"sealed", "static"} & set(self.descriptor.modifiers):
            return "private"
        return "protected virtual"


def shared_value(owner_type: str, theme_type: str, property_name: str) -> str:
    return f'{DYNAMIC_THEME}.GetSharedValue(typeof({owner_type}), typeof({theme_type}), "{property_name}")'


def persist_statement(
    isolated: bool,
    instance: str,
    owner_type: str,
    theme_type: str,
    property_name: str,
    value: str,
) -> str:
    """Statement storing a theme value in isolated (instance) or shared (type) storage."""
    if isolated:
        return f'{DYNAMIC_THEME}.SetIsolatedValue({instance}, typeof({theme_type}), "{property_name}", {value});'
    return f'{DYNAMIC_THEME}.SetSharedValue(typeof({owner_type}), typeof({theme_type}), "{property_name}", {value});'


def pattern_type(type_name: str) -> str:
    """Type usable in an ``is T x`` pattern (nullable annotations are not allowed there)."""
    return type_name[:-1] if type_name.endswith("?") else type_name


def changed_parameters(type_name: str) -> Tuple[Tuple[str, str], ...]:
    return ((type_name, "oldValue"), (type_name, "newValue"))


__all__ = [
    "SYSTEM_TYPE",
    "TRANSITION_BOARD",
    "TRANSITION_FACTORY",
    "UnitContext",
    "changed_parameters",
    "pattern_type",
    "persist_statement",
    "shared_value",
]
