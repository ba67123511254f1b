"""Per-member observable properties and the model-reader conversion."""

from __future__ import annotations

from typing import List, Optional

from ..constants import DYNAMIC_THEME
from ..descriptors import (
    VALIDATION_COMPARE,
    VALIDATION_INTERCEPT,
    DeclarationDescriptor,
    LinkTarget,
    MemberDescriptor,
)
from .context import UnitContext, changed_parameters, pattern_type
from .ir import Accessor, Block, ClassMember, Method, Property, Statement


def member_properties(context: UnitContext, member: MemberDescriptor) -> List[ClassMember]:
    """Generated property for one observable field plus its partial hooks."""
    type_name = member.declared_type
    name = member.public_name
    storage = member.storage_name

    updates: List[Statement] = [
        f"On{name}Changing(oldValue, value);",
        f"{storage} = value;",
        *(f"{target} = value;" for target in member.cascades),
        f"On{name}Changed(oldValue, value);",
        f'OnPropertyChanged("{name}");',
    ]
    setter: List[Statement] = [f"var oldValue = {storage};"]
    if member.setter_validation == VALIDATION_COMPARE:
        comparer = f"global::System.Collections.Generic.EqualityComparer<{type_name}>.Default"
        setter.append(Block(f"if (!{comparer}.Equals({storage}, value))", updates))
    elif member.setter_validation == VALIDATION_INTERCEPT:
        setter.append(Block(f"if (!{name}Intercepting(oldValue, value))", updates))
    else:
        setter.extend(updates)

    members: List[ClassMember] = [
        Property(
            name,
            type_name,
            modifiers="public virtual" if member.can_override else "public",
            getter=Accessor(expression=storage),
            setter=Accessor(body=setter),
            attributes=tuple(tag.attribute_text for tag in member.themes),
        )
    ]
    if member.setter_validation == VALIDATION_INTERCEPT:
        members.append(
            Method(
                f"{name}Intercepting",
                return_type="bool",
                modifiers="private partial",
                parameters=changed_parameters(type_name),
            )
        )
    members.append(Method(f"On{name}Changing", modifiers="partial", parameters=changed_parameters(type_name)))
    members.append(Method(f"On{name}Changed", modifiers="partial", parameters=changed_parameters(type_name)))

    if member.themes:
        members.append(initialize_helper(context.self_type, member))
    return members


def initialize_helper(owner_type: str, member: MemberDescriptor) -> Method:
    """Static helper reading the active theme's shared value with a fallback."""
    type_name = member.declared_type
    lookup = f'{DYNAMIC_THEME}.GetSharedValue(typeof({owner_type}), {DYNAMIC_THEME}.CurrentTheme, "{member.public_name}")'
    return Method(
        f"Initialize{member.public_name}",
        return_type=type_name,
        modifiers="public static",
        parameters=((type_name, "alternativeValue"),),
        body=[
            Block(f"if ({lookup} is {pattern_type(type_name)} result)", ["return result;"]),
            "return alternativeValue;",
        ],
    )


def model_reader_method(context: UnitContext) -> Optional[Method]:
    """``To<Target>()`` copying observable values onto a new data-shape instance."""
    link = context.descriptor.reader_link
    if link is None or link.resolved is None or context.is_context_config:
        return None
    target: LinkTarget = link.resolved
    available = set(target.property_names)
    body: List[Statement] = [f"var model = new {target.qualified_name}();"]
    for member in context.model_members:
        if member.model_property in available:
            body.append(f"model.{member.model_property} = this.{member.public_name};")
    body.append("return model;")
    return Method(f"To{target.name}", return_type=target.qualified_name, body=body)


def forwarding_reader_method(model: DeclarationDescriptor) -> Optional[Method]:
    """On a context-config view, forward the model's reader through ``DataContext``."""
    link = model.reader_link
    if link is None or link.resolved is None:
        return None
    target = link.resolved
    return Method(
        f"To{target.name}",
        return_type=target.qualified_name,
        body=[f"return (({model.qualified_name})DataContext).To{target.name}();"],
    )


__all__ = [
    "forwarding_reader_method",
    "initialize_helper",
    "member_properties",
    "model_reader_method",
]
