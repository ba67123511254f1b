"""Single renderer turning the IR into C# source text."""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from ..constants import NAMESPACE_WINDOWS
from .ir import (
    Accessor,
    BindableProperty,
    Block,
    ClassMember,
    CompilationUnit,
    Constructor,
    Event,
    Field,
    Interface,
    Method,
    MethodSignature,
    Property,
    PropertySignature,
    Statement,
    TypeHeader,
)

AUTO_GENERATED_HEADER = "// <auto-generated/>"


class CSharpFormatter:
    """Renders :class:`CompilationUnit` values with a fixed layout."""

    def __init__(self, indent: str = "    ") -> None:
        self.indent = indent

    def render(self, unit: CompilationUnit) -> str:
        lines: List[str] = [AUTO_GENERATED_HEADER, "#nullable enable", ""]
        if unit.imports:
            lines.extend(f"using {item};" for item in unit.imports)
            lines.append("")

        depth = 0
        if unit.namespace:
            lines.append(f"namespace {unit.namespace}")
            lines.append("{")
            depth = 1

        if unit.interface is not None:
            lines.extend(self._interface(unit.interface, depth))
        elif unit.header is not None:
            lines.extend(self._class(unit, unit.header, depth))

        if unit.namespace:
            lines.append("}")
        return "\n".join(lines) + "\n"

    # ------------------------------------------------------------------
    # Type-level layout

    def _class(self, unit: CompilationUnit, header: TypeHeader, depth: int) -> List[str]:
        text = " ".join(list(header.modifiers) + ["class", header.name])
        if header.bases:
            text += " : " + ", ".join(header.bases)
        lines = [self._pad(depth) + text, self._pad(depth) + "{"]
        previous: Optional[ClassMember] = None
        for member in unit.members():
            if previous is not None and not (_is_stub(previous) and _is_stub(member)):
                lines.append("")
            lines.extend(self.member(member, depth + 1))
            previous = member
        lines.append(self._pad(depth) + "}")
        return lines

    def _interface(self, interface: Interface, depth: int) -> List[str]:
        text = f"{interface.modifiers} interface {interface.name}".strip()
        if interface.bases:
            text += " : " + ", ".join(interface.bases)
        lines = [self._pad(depth) + text, self._pad(depth) + "{"]
        pad = self._pad(depth + 1)
        for member in interface.members:
            if isinstance(member, PropertySignature):
                accessors = []
                if member.has_getter:
                    accessors.append("get;")
                if member.has_setter:
                    accessors.append("set;")
                lines.append(f"{pad}{member.type} {member.name} {{ {' '.join(accessors)} }}")
            elif isinstance(member, MethodSignature):
                lines.append(f"{pad}{member.return_type} {member.name}({_parameters(member.parameters)});")
        lines.append(self._pad(depth) + "}")
        return lines

    # ------------------------------------------------------------------
    # Members

    def member(self, member: ClassMember, depth: int) -> List[str]:
        if isinstance(member, Field):
            return [self._pad(depth) + _declaration(member.modifiers, member.type, member.name, member.initializer) + ";"]
        if isinstance(member, Property):
            return self._property(member, depth)
        if isinstance(member, BindableProperty):
            return self._bindable(member, depth)
        if isinstance(member, Event):
            return [self._pad(depth) + f"{member.modifiers} event {member.handler_type} {member.name};"]
        if isinstance(member, Method):
            signature = f"{member.modifiers} {member.return_type} {member.name}({_parameters(member.parameters)})"
            if member.body is None:
                return [self._pad(depth) + signature + ";"]
            return self._braced(signature, member.body, depth)
        if isinstance(member, Constructor):
            signature = f"{member.modifiers} {member.name}({_parameters(member.parameters)})"
            return self._braced(signature, member.body, depth)
        raise TypeError(f"Unsupported member node: {type(member).__name__}")

    def _property(self, prop: Property, depth: int) -> List[str]:
        pad = self._pad(depth)
        lines = [f"{pad}[{attribute}]" for attribute in prop.attributes]
        signature = f"{prop.modifiers} {prop.type} {prop.name}"
        accessors: List[Tuple[str, Accessor]] = []
        if prop.getter is not None:
            accessors.append(("get", prop.getter))
        if prop.setter is not None:
            accessors.append(("set", prop.setter))

        if all(acc.expression is None and acc.body is None for _, acc in accessors):
            parts = " ".join(f"{_prefix(acc.modifiers)}{keyword};" for keyword, acc in accessors)
            text = f"{pad}{signature} {{ {parts} }}"
            if not prop.initializer:
                lines.append(text)
                return lines
            if not prop.initializer_chain:
                lines.append(f"{text} = {prop.initializer};")
                return lines
            lines.append(f"{text} = {prop.initializer}")
            inner = self._pad(depth + 1)
            lines.extend(f"{inner}{link}" for link in prop.initializer_chain)
            lines[-1] += ";"
            return lines

        lines.append(pad + signature)
        lines.append(pad + "{")
        inner = self._pad(depth + 1)
        for keyword, acc in accessors:
            head = f"{_prefix(acc.modifiers)}{keyword}"
            if acc.expression is not None:
                lines.append(f"{inner}{head} => {acc.expression};")
            elif acc.body is not None:
                lines.extend(self._braced(head, acc.body, depth + 1))
            else:
                lines.append(f"{inner}{head};")
        lines.append(pad + "}")
        if prop.initializer:
            lines[-1] += f" = {prop.initializer};"
        return lines

    def _bindable(self, prop: BindableProperty, depth: int) -> List[str]:
        pad = self._pad(depth)
        inner = self._pad(depth + 1)
        deeper = self._pad(depth + 2)
        default = prop.default or f"default({prop.type})"
        metadata_args = default if not prop.callback else f"{default}, {prop.callback}"
        return [
            f"{pad}public {prop.type} {prop.name}",
            f"{pad}{{",
            f"{inner}get => ({prop.type})GetValue({prop.field_name});",
            f"{inner}set => SetValue({prop.field_name}, value);",
            f"{pad}}}",
            f"{pad}public static readonly {NAMESPACE_WINDOWS}DependencyProperty {prop.field_name} =",
            f"{inner}{NAMESPACE_WINDOWS}DependencyProperty.Register(",
            f"{deeper}nameof({prop.name}),",
            f"{deeper}typeof({prop.type}),",
            f"{deeper}typeof({prop.owner_type}),",
            f"{deeper}new {NAMESPACE_WINDOWS}PropertyMetadata({metadata_args}));",
        ]

    # ------------------------------------------------------------------
    # Statements

    def statements(self, body: Sequence[Statement], depth: int) -> List[str]:
        lines: List[str] = []
        for statement in body:
            if isinstance(statement, Block):
                lines.extend(self._braced(statement.header, statement.body, depth, statement.terminator))
            else:
                lines.extend(self._pad(depth) + line for line in statement.splitlines())
        return lines

    def _braced(self, header: str, body: Sequence[Statement], depth: int, terminator: str = "") -> List[str]:
        pad = self._pad(depth)
        return [pad + header, pad + "{", *self.statements(body, depth + 1), pad + "}" + terminator]

    def _pad(self, depth: int) -> str:
        return self.indent * depth


def _declaration(modifiers: str, type_name: str, name: str, initializer: str) -> str:
    text = f"{modifiers} {type_name} {name}".strip()
    if initializer:
        text += f" = {initializer}"
    return text


def _parameters(parameters: Sequence[Tuple[str, str]]) -> str:
    return ", ".join(f"{type_name} {name}" for type_name, name in parameters)


def _prefix(modifiers: str) -> str:
    return f"{modifiers} " if modifiers else ""


def _is_stub(member: ClassMember) -> bool:
    return isinstance(member, Method) and member.is_stub


__all__ = ["AUTO_GENERATED_HEADER", "CSharpFormatter"]
