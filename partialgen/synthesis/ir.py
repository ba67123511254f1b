"""Structured intermediate representation of a generated compilation unit.

Builders produce these nodes; :class:`~partialgen.synthesis.formatter.CSharpFormatter`
is the only code that turns them into text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

from ..constants import SECTION_ORDER


@dataclass
class Block:
    """A braced statement group such as ``if (...) { ... }``."""

    header: str
    body: List["Statement"] = field(default_factory=list)
    terminator: str = ""


Statement = Union[str, Block]


@dataclass
class Accessor:
    """A ``get`` or ``set`` accessor: expression-bodied, block-bodied or automatic."""

    expression: Optional[str] = None
    body: Optional[List[Statement]] = None
    modifiers: str = ""


@dataclass
class Field:
    name: str
    type: str
    modifiers: str = "private"
    initializer: str = ""

    def declared_names(self) -> Tuple[str, ...]:
        return (self.name,)


@dataclass
class Property:
    name: str
    type: str
    modifiers: str = "public"
    getter: Optional[Accessor] = field(default_factory=Accessor)
    setter: Optional[Accessor] = field(default_factory=Accessor)
    initializer: str = ""
    attributes: Tuple[str, ...] = ()
    # Continuation lines appended after the initializer (fluent calls).
    initializer_chain: Tuple[str, ...] = ()

    def declared_names(self) -> Tuple[str, ...]:
        return (self.name,)


@dataclass
class BindableProperty:
    """A dependency property: CLR wrapper plus its static registration field."""

    name: str
    type: str
    owner_type: str
    default: str = ""
    callback: str = ""

    @property
    def field_name(self) -> str:
        return f"{self.name}Property"

    def declared_names(self) -> Tuple[str, ...]:
        return (self.name, self.field_name)


@dataclass
class Event:
    name: str
    handler_type: str
    modifiers: str = "public"

    def declared_names(self) -> Tuple[str, ...]:
        return (self.name,)


@dataclass
class Method:
    """A method; ``body is None`` renders a partial stub (``partial void X(...);``)."""

    name: str
    return_type: str = "void"
    parameters: Sequence[Tuple[str, str]] = ()
    modifiers: str = "public"
    body: Optional[List[Statement]] = None

    @property
    def is_stub(self) -> bool:
        return self.body is None

    def declared_names(self) -> Tuple[str, ...]:
        return (self.name,)


@dataclass
class Constructor:
    name: str
    modifiers: str = "public"
    parameters: Sequence[Tuple[str, str]] = ()
    body: List[Statement] = field(default_factory=list)

    def declared_names(self) -> Tuple[str, ...]:
        # Overloads share the type name; signatures are unique by construction.
        return ()


@dataclass
class PropertySignature:
    name: str
    type: str
    has_getter: bool = True
    has_setter: bool = True


@dataclass
class MethodSignature:
    name: str
    return_type: str
    parameters: Sequence[Tuple[str, str]] = ()


InterfaceMember = Union[PropertySignature, MethodSignature]
ClassMember = Union[Field, Property, BindableProperty, Event, Method, Constructor]


@dataclass
class Interface:
    name: str
    modifiers: str = "public"
    bases: Tuple[str, ...] = ()
    members: List[InterfaceMember] = field(default_factory=list)


@dataclass
class TypeHeader:
    name: str
    modifiers: Tuple[str, ...] = ()
    bases: Tuple[str, ...] = ()


@dataclass
class Section:
    key: str
    members: List[ClassMember] = field(default_factory=list)

    def add(self, *members: ClassMember) -> "Section":
        self.members.extend(members)
        return self


@dataclass
class CompilationUnit:
    """One emitted file: either a partial class or an interface."""

    hint_name: str
    namespace: str = ""
    imports: Tuple[str, ...] = ()
    header: Optional[TypeHeader] = None
    sections: List[Section] = field(default_factory=list)
    interface: Optional[Interface] = None

    def section(self, key: str) -> Section:
        """Return the section for ``key``, creating it in its fixed position."""
        if key not in SECTION_ORDER:
            raise KeyError(f"Unknown section '{key}'")
        for existing in self.sections:
            if existing.key == key:
                return existing
        created = Section(key)
        self.sections.append(created)
        self.sections.sort(key=lambda item: SECTION_ORDER.index(item.key))
        return created

    def members(self) -> List[ClassMember]:
        return [member for section in self.sections for member in section.members]


__all__ = [
    "Accessor",
    "BindableProperty",
    "Block",
    "ClassMember",
    "CompilationUnit",
    "Constructor",
    "Event",
    "Field",
    "Interface",
    "InterfaceMember",
    "Method",
    "MethodSignature",
    "Property",
    "PropertySignature",
    "Section",
    "Statement",
    "TypeHeader",
]
