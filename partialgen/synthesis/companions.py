"""Hover state block and hover/theme companion members.

Companions of observable members are plain properties backed by a field.
Companions of a view's own targets are dependency properties whose change
callback runs the same update statements on the instance.
"""

from __future__ import annotations

from typing import List, Sequence

from ..constants import NAMESPACE_WINDOWS
from ..descriptors import MemberDescriptor, ThemeVariantTag
from ..diagnostics import ExpansionError
from ..expander import Companion, CompanionKind, StorageScope, expand
from .context import (
    TRANSITION_BOARD,
    TRANSITION_FACTORY,
    UnitContext,
    changed_parameters,
    persist_statement,
    shared_value,
)
from .ir import Accessor, BindableProperty, Block, ClassMember, Field, Method, Property, Statement


def hover_state_members(context: UnitContext) -> List[ClassMember]:
    """``IsHovered``, ``IsHoverChanging`` and the two transition boards."""
    transition = "this.BeginTransition(value ? HoveredTransition : NoHoveredTransition);"
    begin: List[Statement] = [transition]
    if context.theme_aware:
        begin = [Block("if (!IsThemeChanging)", [transition])]

    board_type = f"{TRANSITION_BOARD}<{context.self_type}>"
    create = f"{TRANSITION_FACTORY}.Create<{context.self_type}>()"
    chain = tuple(
        f".SetProperty(x => x.{member.public_name}, {member.default_expression})"
        for member in context.hover_members
        if member.default_expression
    )
    return [
        Field("_isHovered", "bool", initializer="false"),
        Property(
            "IsHovered",
            "bool",
            getter=Accessor(expression="_isHovered"),
            setter=Accessor(
                body=[Block("if (_isHovered != value)", ["_isHovered = value;", *begin])]
            ),
        ),
        Property("IsHoverChanging", "bool", initializer="false"),
        Property("HoveredTransition", board_type, initializer=create),
        Property("NoHoveredTransition", board_type, initializer=create, initializer_chain=chain),
    ]


def companion_members(context: UnitContext, members: Sequence[MemberDescriptor], *, bindable: bool) -> List[ClassMember]:
    """Members for every companion of ``members`` in expansion order."""
    result: List[ClassMember] = []
    for companion in expand(members, declaration=context.descriptor.display_name):
        if bindable:
            result.extend(_bindable_companion(context, companion))
        else:
            result.extend(_field_companion(context, companion))
    return result


def hover_update_members(context: UnitContext) -> List[ClassMember]:
    """``UpdateHoverState`` plus per-member theme value selectors."""
    themed = [member for member in context.hover_members if member.themes]
    body: List[Statement] = []
    if context.theme_aware and themed:
        refresh: List[Statement] = []
        for member in themed:
            name = member.public_name
            refresh.append(
                f"HoveredTransition.SetProperty(x => x.{name}, {name}_SelectThemeValue_Hovered(CurrentTheme.Name));"
            )
            refresh.append(
                f"NoHoveredTransition.SetProperty(x => x.{name}, {name}_SelectThemeValue_NoHovered(CurrentTheme.Name));"
            )
        body.append(Block("if (CurrentTheme != null)", refresh))
    body.append("this.BeginTransition(IsHovered ? HoveredTransition : NoHoveredTransition);")

    members: List[ClassMember] = [Method("UpdateHoverState", modifiers=context.overridable, body=body)]
    for suffix in ("Hovered", "NoHovered"):
        for member in themed:
            members.append(_selector(context, member, suffix))
    return members


def _selector(context: UnitContext, member: MemberDescriptor, suffix: str) -> Method:
    name = member.public_name
    cases: List[Statement] = [
        f'case "{tag.name}": return {tag.name}{suffix}{name};' for tag in member.themes
    ]
    modifiers = "private" if context.overridable == "private" else "protected"
    return Method(
        f"{name}_SelectThemeValue_{suffix}",
        return_type=member.declared_type,
        modifiers=modifiers,
        parameters=(("string", "themeName"),),
        body=[Block("switch (themeName)", cases), f"return {name};"],
    )


def _apply_statements(context: UnitContext, companion: Companion, value: str) -> List[Statement]:
    """What a companion does with a new value, independent of how it is stored."""
    member = companion.member
    target = member.public_name
    statements: List[Statement] = []
    theme = companion.theme
    if companion.kind is CompanionKind.THEMED:
        if theme is None:
            raise ExpansionError(f"Themed companion '{companion.name}' has no theme variant")
        statements.append(_persist(context, companion, theme, value))
        statements.append(
            Block(f"if (CurrentTheme == typeof({theme.type_reference}))", [f"{target} = {value};"])
        )
        return statements

    hovered = companion.kind is CompanionKind.HOVERED
    board = "HoveredTransition" if hovered else "NoHoveredTransition"
    update = f"{board}.SetProperty(x => x.{target}, {value});"
    if theme is None:
        statements.append(update)
        if not hovered:
            statements.append(Block("if (!IsHoverChanging && !IsHovered)", [f"{target} = {value};"]))
        return statements

    pointer = "IsHovered" if hovered else "!IsHovered"
    statements.append(
        Block(
            f"if (CurrentTheme == typeof({theme.type_reference}))",
            [update, Block(f"if (!IsHoverChanging && {pointer} && !IsThemeChanging)", [f"{target} = {value};"])],
        )
    )
    if companion.persists:
        statements.append(_persist(context, companion, theme, value))
    return statements


def _persist(context: UnitContext, companion: Companion, theme: ThemeVariantTag, value: str) -> str:
    return persist_statement(
        companion.storage is StorageScope.ISOLATED,
        "this",
        context.self_type,
        theme.type_reference,
        companion.member.public_name,
        value,
    )


def _initial_value(context: UnitContext, companion: Companion) -> str:
    member = companion.member
    if companion.theme is not None:
        lookup = shared_value(context.self_type, companion.theme.type_reference, member.public_name)
        return f"({member.declared_type}){lookup}"
    if companion.kind is CompanionKind.NO_HOVERED:
        return member.default_expression
    return ""


def _field_companion(context: UnitContext, companion: Companion) -> List[ClassMember]:
    type_name = companion.declared_type
    storage = f"_{companion.name}"
    setter: List[Statement] = [f"var oldValue = {storage};", f"{storage} = value;"]
    setter.extend(_apply_statements(context, companion, "value"))
    setter.append(f"On{companion.name}Changed(oldValue, value);")
    return [
        Field(storage, type_name, initializer=_initial_value(context, companion)),
        Property(
            companion.name,
            type_name,
            getter=Accessor(expression=storage),
            setter=Accessor(body=setter),
        ),
        Method(f"On{companion.name}Changed", modifiers="partial", parameters=changed_parameters(type_name)),
    ]


def _bindable_companion(context: UnitContext, companion: Companion) -> List[ClassMember]:
    type_name = companion.declared_type
    callback = f"_innerRun{companion.name}Changed"
    inner = f"_inner{companion.name}Changed"
    body: List[Statement] = list(_apply_statements(context, companion, "newValue"))
    body.append(f"On{companion.name}Changed(oldValue, newValue);")
    return [
        BindableProperty(companion.name, type_name, context.self_type, callback=callback),
        Method(
            callback,
            modifiers="private static",
            parameters=(
                (f"{NAMESPACE_WINDOWS}DependencyObject", "d"),
                (f"{NAMESPACE_WINDOWS}DependencyPropertyChangedEventArgs", "e"),
            ),
            body=[
                Block(
                    f"if (d is {context.self_type} control)",
                    [f"control.{inner}(({type_name})e.OldValue, ({type_name})e.NewValue);"],
                )
            ],
        ),
        Method(inner, modifiers="private", parameters=changed_parameters(type_name), body=body),
        Method(f"On{companion.name}Changed", modifiers="partial", parameters=changed_parameters(type_name)),
    ]


__all__ = ["companion_members", "hover_state_members", "hover_update_members"]
