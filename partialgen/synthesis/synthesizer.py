"""Compose every section of a declaration into compilation units."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..constants import (
    NAMESPACE_MODEL,
    NAMESPACE_THEME,
    USING_PROXY,
    USING_TRANSITION,
)
from ..descriptors import DeclarationDescriptor
from ..diagnostics import Diagnostic, NameCollisionError, warning
from ..logging import declaration_logger, get_logger
from .behaviours import click_members, periodic_members, pointer_members
from .bindings import forwarded_companions, forwarded_members
from .companions import companion_members, hover_state_members, hover_update_members
from .constructors import constructors
from .context import UnitContext
from .contracts import notification_members, theme_lifecycle_members
from .formatter import CSharpFormatter
from .ir import CompilationUnit, TypeHeader
from .properties import forwarding_reader_method, member_properties, model_reader_method
from .proxy import interface_unit, proxy_interface_type, proxy_members

logger = get_logger("synthesis")

_ACCESSIBILITY_WORDS = {"public", "internal", "protected", "private", "file"}


@dataclass(frozen=True)
class GeneratedUnit:
    """A rendered compilation unit ready to be written or cached."""

    hint_name: str
    declaration: str
    text: str

    def to_dict(self) -> Dict[str, str]:
        return {"hint_name": self.hint_name, "declaration": self.declaration, "text": self.text}

    @classmethod
    def from_dict(cls, payload: object) -> Optional["GeneratedUnit"]:
        if not isinstance(payload, dict):
            return None
        values = [payload.get(key) for key in ("hint_name", "declaration", "text")]
        if not all(isinstance(value, str) for value in values):
            return None
        return cls(*values)  # type: ignore[arg-type]


@dataclass
class SynthesisResult:
    units: List[GeneratedUnit] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)


class Synthesizer:
    """Builds the IR for one resolved descriptor and renders it once."""

    def __init__(self, formatter: Optional[CSharpFormatter] = None) -> None:
        self.formatter = formatter or CSharpFormatter()

    def synthesize(self, descriptor: DeclarationDescriptor) -> SynthesisResult:
        units, diagnostics = self.build(descriptor)
        rendered = [
            GeneratedUnit(unit.hint_name, descriptor.display_name, self.formatter.render(unit))
            for unit in units
        ]
        declaration_logger(logger, descriptor.display_name).debug("Synthesized %d unit(s)", len(rendered))
        return SynthesisResult(units=rendered, diagnostics=diagnostics)

    def build(self, descriptor: DeclarationDescriptor) -> Tuple[List[CompilationUnit], List[Diagnostic]]:
        """Return the IR units for ``descriptor`` plus any warnings.

        Raises :class:`NameCollisionError` or :class:`ExpansionError`; a failing
        declaration yields no unit at all.
        """
        context = UnitContext(descriptor)
        diagnostics = _context_config_warnings(context)
        unit = self._class_unit(context)
        _check_unique_names(unit, descriptor.display_name)
        if not unit.members():
            return [], diagnostics
        units = [unit]
        if descriptor.flags.is_proxy_target and not context.is_context_config:
            units.append(interface_unit(descriptor))
        return units, diagnostics

    def _class_unit(self, context: UnitContext) -> CompilationUnit:
        descriptor = context.descriptor
        flags = descriptor.flags
        proxy = flags.is_proxy_target and not context.is_context_config
        observable = flags.is_observable_model and not context.is_context_config

        imports: List[str] = []
        if context.has_hover:
            imports.append(USING_TRANSITION)
        if proxy:
            imports.append(USING_PROXY)

        bases: List[str] = []
        if observable:
            bases.append(f"{NAMESPACE_MODEL}INotifyPropertyChanged")
        if proxy:
            bases.append(proxy_interface_type(descriptor))
        if flags.is_theme_aware:
            bases.append(f"{NAMESPACE_THEME}IThemeApplied")

        unit = CompilationUnit(
            hint_name=descriptor.hint_name,
            namespace=descriptor.namespace,
            imports=tuple(imports),
            header=TypeHeader(descriptor.name, _header_modifiers(descriptor), tuple(bases)),
        )

        unit.section("constructors").add(*constructors(context))
        if observable:
            unit.section("notification").add(*notification_members())
        if flags.is_theme_aware:
            unit.section("theme_lifecycle").add(*theme_lifecycle_members(context))
        if proxy:
            unit.section("proxy").add(*proxy_members(descriptor))

        members = unit.section("members")
        for member in context.model_members:
            members.add(*member_properties(context, member))

        companions = unit.section("companions")
        if context.has_hover:
            companions.add(*hover_state_members(context))
        companions.add(*companion_members(context, context.model_members, bindable=False))
        companions.add(*companion_members(context, context.view_members, bindable=True))
        if context.has_hover:
            companions.add(*hover_update_members(context))

        model = context.linked_model
        if model is not None:
            members.add(*forwarded_members(context, model))
            companions.add(*forwarded_companions(context, model))

        behaviours = unit.section("behaviours")
        if flags.is_clickable:
            behaviours.add(*click_members())
        if flags.is_periodic_update and not context.is_context_config:
            behaviours.add(*periodic_members(context))
        behaviours.add(*pointer_members(context))

        reader = model_reader_method(context)
        if reader is None and model is not None:
            reader = forwarding_reader_method(model)
        if reader is not None:
            unit.section("model_reader").add(reader)

        unit.sections = [section for section in unit.sections if section.members]
        return unit

    def render(self, unit: CompilationUnit) -> str:
        return self.formatter.render(unit)


def _header_modifiers(descriptor: DeclarationDescriptor) -> Tuple[str, ...]:
    words: List[str] = []
    if not _ACCESSIBILITY_WORDS & set(descriptor.modifiers) and descriptor.accessibility:
        words.extend(descriptor.accessibility.split())
    words.extend(item for item in descriptor.modifiers if item != "partial")
    words.append("partial")
    return tuple(words)


def _check_unique_names(unit: CompilationUnit, declaration: str) -> None:
    seen: Dict[str, str] = {}
    for section in unit.sections:
        for member in section.members:
            for name in member.declared_names():
                if name in seen:
                    where = (
                        f"section '{section.key}'"
                        if seen[name] == section.key
                        else f"sections '{seen[name]}' and '{section.key}'"
                    )
                    raise NameCollisionError(name, declaration=declaration, detail=f"generated twice in {where}")
                seen[name] = section.key


def _context_config_warnings(context: UnitContext) -> List[Diagnostic]:
    if not context.is_context_config:
        return []
    descriptor = context.descriptor
    owner = descriptor.display_name
    ignored: List[str] = []
    if descriptor.members:
        ignored.append("observable members " + ", ".join(member.public_name for member in descriptor.members))
    if descriptor.view_members:
        ignored.append("view members " + ", ".join(member.public_name for member in descriptor.view_members))
    if descriptor.flags.is_proxy_target:
        ignored.append("proxy creation")
    if descriptor.flags.is_periodic_update:
        ignored.append("periodic update")
    return [
        warning(
            "context-config-ignored",
            owner,
            f"Ignored {item} on a context-config declaration (no members or constructor are generated for it)",
        )
        for item in ignored
    ]


__all__ = ["GeneratedUnit", "SynthesisResult", "Synthesizer"]
