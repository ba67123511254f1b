"""Core data models for the declaration snapshot handed to the pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .naming import qualified_name


@dataclass(frozen=True)
class Annotation:
    """Declarative metadata attached to a declaration or a member."""

    name: str
    qualified_name: str = ""
    arguments: Tuple[Any, ...] = ()
    named: Dict[str, Any] = field(default_factory=dict, hash=False)
    argument_text: str = ""
    interfaces: Tuple[str, ...] = ()

    def value(self, index: int, key: str, default: Any = None) -> Any:
        """Return a constructor argument by named key first, then by position.

        Named keys match case-insensitively so both constructor parameter
        names (``canHover``) and property names (``CanHover``) are accepted.
        """
        if key in self.named:
            return self.named[key]
        lowered = key.lower()
        for name, item in self.named.items():
            if name.lower() == lowered:
                return item
        if index < len(self.arguments):
            return self.arguments[index]
        return default

    def implements(self, interface: str) -> bool:
        return any(item == interface or item.endswith(f".{interface}") for item in self.interfaces)


@dataclass(frozen=True)
class Parameter:
    name: str
    type: str


@dataclass(frozen=True)
class Member:
    """Field, property or method declared on a type."""

    kind: str
    name: str
    type: str = ""
    accessibility: str = "private"
    initializer: str = ""
    annotations: Tuple[Annotation, ...] = ()
    parameters: Tuple[Parameter, ...] = ()
    has_getter: bool = True
    has_setter: bool = True
    is_static: bool = False

    def annotation(self, name: str) -> Optional[Annotation]:
        return next((item for item in self.annotations if item.name == name), None)


@dataclass(frozen=True)
class Declaration:
    """A user-authored type definition as reported by the host."""

    name: str
    namespace: str = ""
    kind: str = "class"
    accessibility: str = "internal"
    modifiers: Tuple[str, ...] = ()
    base_type: Optional[str] = None
    annotations: Tuple[Annotation, ...] = ()
    members: Tuple[Member, ...] = ()
    origin: str = ""

    @property
    def qualified_name(self) -> str:
        return qualified_name(self.namespace, self.name)

    @property
    def display_name(self) -> str:
        return f"{self.namespace}.{self.name}" if self.namespace else self.name

    @property
    def is_partial(self) -> bool:
        return "partial" in self.modifiers

    def annotation(self, name: str) -> Optional[Annotation]:
        return next((item for item in self.annotations if item.name == name), None)

    def annotations_named(self, name: str) -> List[Annotation]:
        return [item for item in self.annotations if item.name == name]


@dataclass
class Snapshot:
    """Immutable-by-convention view of every declaration in one program."""

    declarations: List[Declaration]
    origin: str = ""


__all__ = ["Annotation", "Declaration", "Member", "Parameter", "Snapshot"]
