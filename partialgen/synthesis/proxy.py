"""Proxy surface on the declaration and the interception interface unit."""

from __future__ import annotations

from typing import List

from ..constants import AOP_INTERFACE_NAMESPACE, NAMESPACE_AOP, PROXY_BASE_INTERFACE
from ..descriptors import DeclarationDescriptor
from .ir import Accessor, ClassMember, CompilationUnit, Interface, InterfaceMember, MethodSignature, Property, PropertySignature


def proxy_interface_type(descriptor: DeclarationDescriptor) -> str:
    return f"{NAMESPACE_AOP}{descriptor.interface_name}"


def proxy_members(descriptor: DeclarationDescriptor) -> List[ClassMember]:
    return [
        Property(
            "Proxy",
            proxy_interface_type(descriptor),
            getter=Accessor(),
            setter=Accessor(modifiers="private"),
        )
    ]


def interface_unit(descriptor: DeclarationDescriptor) -> CompilationUnit:
    """``IAop<Name>In<Namespace>`` covering every member a proxy may intercept."""
    members: List[InterfaceMember] = []
    if not descriptor.flags.is_context_config:
        for member in descriptor.members:
            members.append(PropertySignature(member.public_name, member.declared_type))
    for prop in descriptor.public_properties:
        members.append(PropertySignature(prop.name, prop.type, prop.has_getter, prop.has_setter))
    for method in descriptor.public_methods:
        members.append(
            MethodSignature(
                method.name,
                method.type or "void",
                tuple((parameter.type, parameter.name) for parameter in method.parameters),
            )
        )
    interface = Interface(
        descriptor.interface_name,
        bases=(PROXY_BASE_INTERFACE,),
        members=members,
    )
    return CompilationUnit(
        hint_name=f"{descriptor.interface_name}.g.cs",
        namespace=AOP_INTERFACE_NAMESPACE,
        interface=interface,
    )


__all__ = ["interface_unit", "proxy_interface_type", "proxy_members"]
