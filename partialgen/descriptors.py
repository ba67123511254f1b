"""Classification results produced by the analysis phases.

Descriptors are frozen: a phase that needs to add information (the resolver)
returns a new descriptor via :func:`dataclasses.replace` instead of mutating.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from .models import Member, Parameter
from .naming import default_expression, hint_name, interface_name, qualified_name

LINK_VIEW_MODEL = "view_model"
LINK_MODEL_READER = "model_reader"

VALIDATION_NONE = 0
VALIDATION_COMPARE = 1
VALIDATION_INTERCEPT = 2


@dataclass(frozen=True)
class ClassificationFlags:
    is_proxy_target: bool = False
    is_observable_model: bool = False
    is_theme_aware: bool = False
    is_view_bound: bool = False
    is_clickable: bool = False
    is_periodic_update: bool = False
    has_model_mapping: bool = False
    is_context_config: bool = False

    def enabled(self) -> Tuple[str, ...]:
        return tuple(name for name, value in vars(self).items() if value)


@dataclass(frozen=True)
class ThemeVariantTag:
    """A named theme variant attached to a member."""

    name: str
    type_reference: str
    arguments: str = ""

    @property
    def attribute_text(self) -> str:
        return f"{self.type_reference}{self.arguments}"


@dataclass(frozen=True)
class MemberDescriptor:
    storage_name: str
    public_name: str
    declared_type: str
    initializer: str = ""
    can_hover: bool = False
    can_dependency: bool = False
    can_isolated_storage: bool = False
    themes: Tuple[ThemeVariantTag, ...] = ()
    setter_validation: int = VALIDATION_NONE
    can_override: bool = False
    cascades: Tuple[str, ...] = ()
    model_alias: str = ""

    @property
    def default_expression(self) -> str:
        return default_expression(self.initializer)

    @property
    def is_theme_reactive(self) -> bool:
        return bool(self.themes)

    @property
    def model_property(self) -> str:
        return self.model_alias or self.public_name


@dataclass(frozen=True)
class LinkTarget:
    """Resolved side of a model link."""

    name: str
    namespace: str
    property_names: Tuple[str, ...] = ()
    descriptor: Optional["DeclarationDescriptor"] = field(default=None, compare=False, repr=False)

    @property
    def qualified_name(self) -> str:
        return qualified_name(self.namespace, self.name)


@dataclass(frozen=True)
class ModelLink:
    kind: str
    target_name: str
    namespace: Optional[str] = None
    resolved: Optional[LinkTarget] = None

    @property
    def is_resolved(self) -> bool:
        return self.resolved is not None


@dataclass(frozen=True)
class ConstructorHook:
    """A method annotated to run during construction."""

    name: str
    parameters: Tuple[Parameter, ...] = ()

    @property
    def signature_key(self) -> Tuple[str, ...]:
        return tuple(parameter.type for parameter in self.parameters)


@dataclass(frozen=True)
class DeclarationDescriptor:
    name: str
    namespace: str
    accessibility: str
    modifiers: Tuple[str, ...]
    base_chain: Tuple[str, ...]
    flags: ClassificationFlags
    members: Tuple[MemberDescriptor, ...] = ()
    view_members: Tuple[MemberDescriptor, ...] = ()
    model_link: Optional[ModelLink] = None
    constructor_hooks: Tuple[ConstructorHook, ...] = ()
    public_properties: Tuple[Member, ...] = ()
    public_methods: Tuple[Member, ...] = ()
    update_interval: float = 17.0

    @property
    def qualified_name(self) -> str:
        return qualified_name(self.namespace, self.name)

    @property
    def display_name(self) -> str:
        return f"{self.namespace}.{self.name}" if self.namespace else self.name

    @property
    def interface_name(self) -> str:
        return interface_name(self.namespace, self.name)

    @property
    def hint_name(self) -> str:
        return hint_name(self.namespace, self.name)

    @property
    def hover_members(self) -> Tuple[MemberDescriptor, ...]:
        return tuple(member for member in self.members if member.can_hover)

    @property
    def reader_link(self) -> Optional[ModelLink]:
        if self.model_link is not None and self.model_link.kind == LINK_MODEL_READER:
            return self.model_link
        return None

    @property
    def view_link(self) -> Optional[ModelLink]:
        if self.model_link is not None and self.model_link.kind == LINK_VIEW_MODEL:
            return self.model_link
        return None


__all__ = [
    "ClassificationFlags",
    "ConstructorHook",
    "DeclarationDescriptor",
    "LINK_MODEL_READER",
    "LINK_VIEW_MODEL",
    "LinkTarget",
    "MemberDescriptor",
    "ModelLink",
    "ThemeVariantTag",
    "VALIDATION_COMPARE",
    "VALIDATION_INTERCEPT",
    "VALIDATION_NONE",
]
