"""Bindable properties a context-config view exposes for its model."""

from __future__ import annotations

from typing import List

from ..constants import NAMESPACE_WINDOWS
from ..descriptors import DeclarationDescriptor, MemberDescriptor
from ..expander import expand_member
from .context import UnitContext, changed_parameters
from .ir import BindableProperty, Block, ClassMember, Method


def forwarded_members(context: UnitContext, model: DeclarationDescriptor) -> List[ClassMember]:
    """Bindable mirrors of the model's plain ``CanDependency`` members."""
    result: List[ClassMember] = []
    for member in model.members:
        if member.can_dependency and not member.can_hover:
            result.extend(_forward(context, model, member.public_name, member))
    return result


def forwarded_companions(context: UnitContext, model: DeclarationDescriptor) -> List[ClassMember]:
    """Bindable mirrors of the model's hover/theme companions, in expansion order."""
    result: List[ClassMember] = []
    for member in model.members:
        if not member.can_dependency:
            continue
        for companion in expand_member(member, declaration=model.display_name):
            result.extend(_forward(context, model, companion.name, member))
    return result


def _forward(
    context: UnitContext,
    model: DeclarationDescriptor,
    name: str,
    member: MemberDescriptor,
) -> List[ClassMember]:
    type_name = member.declared_type
    callback = f"_innerRun{name}Changed"
    inner = f"_inner{name}Changed"
    return [
        BindableProperty(
            name,
            type_name,
            context.self_type,
            default=member.default_expression if name == member.public_name else "",
            callback=callback,
        ),
        Method(
            callback,
            modifiers="private static",
            parameters=(
                (f"{NAMESPACE_WINDOWS}DependencyObject", "d"),
                (f"{NAMESPACE_WINDOWS}DependencyPropertyChangedEventArgs", "e"),
            ),
            body=[
                Block(
                    f"if (d is {context.self_type} control && control.DataContext is {model.qualified_name} viewModel)",
                    [
                        f"viewModel.{name} = ({type_name})e.NewValue;",
                        f"control.{inner}(({type_name})e.OldValue, ({type_name})e.NewValue);",
                    ],
                )
            ],
        ),
        Method(
            inner,
            modifiers="private",
            parameters=changed_parameters(type_name),
            body=[f"On{name}Changed(oldValue, newValue);"],
        ),
        Method(f"On{name}Changed", modifiers="partial", parameters=changed_parameters(type_name)),
    ]


__all__ = ["forwarded_companions", "forwarded_members"]
