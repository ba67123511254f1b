"""Build :class:`MemberDescriptor` values for observable storage members."""

from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .config import AnalysisConfig
from .constants import (
    ANNOTATION_ISOLATED,
    ANNOTATION_MODEL_ALIAS,
    ANNOTATION_OBSERVABLE,
    THEME_CAPABILITY,
)
from .descriptors import (
    VALIDATION_COMPARE,
    VALIDATION_INTERCEPT,
    VALIDATION_NONE,
    MemberDescriptor,
    ThemeVariantTag,
)
from .diagnostics import ClassificationError, NameCollisionError
from .models import Annotation, Declaration, Member
from .naming import extract_variant_name, normalize_public_name, split_qualified
from .query import SemanticQuery

_VALIDATION_NAMES = {
    "none": VALIDATION_NONE,
    "compare": VALIDATION_COMPARE,
    "intercept": VALIDATION_INTERCEPT,
}


def build_members(
    declaration: Declaration,
    query: SemanticQuery,
    analysis: Optional[AnalysisConfig] = None,
) -> Tuple[MemberDescriptor, ...]:
    """Return descriptors for every ``Observable`` field, in declaration order.

    Raises :class:`NameCollisionError` when two fields normalise to the same
    public name, or when a generated name shadows a member the user declared.
    """
    analysis = analysis or AnalysisConfig()
    members = query.members_of(declaration)
    descriptors: List[MemberDescriptor] = []
    owners: Dict[str, str] = {}

    for member in members:
        if member.kind != "field":
            continue
        observable = member.annotation(ANNOTATION_OBSERVABLE)
        if observable is None:
            continue
        descriptor = _build_member(declaration, member, observable, analysis)
        previous = owners.get(descriptor.public_name)
        if previous is not None:
            raise NameCollisionError(
                descriptor.public_name,
                declaration=declaration.display_name,
                detail=f"fields '{previous}' and '{member.name}'",
            )
        owners[descriptor.public_name] = member.name
        descriptors.append(descriptor)

    declared = {member.name for member in members if member.kind != "field"}
    for descriptor in descriptors:
        if descriptor.public_name in declared:
            raise NameCollisionError(
                descriptor.public_name,
                declaration=declaration.display_name,
                detail=f"field '{descriptor.storage_name}' shadows a declared member",
            )
    return tuple(descriptors)


def theme_tag(annotation: Annotation, analysis: AnalysisConfig) -> ThemeVariantTag:
    """Describe a member-level theme annotation as a variant tag."""
    reference = theme_type_reference(annotation.qualified_name or annotation.name, analysis)
    return ThemeVariantTag(
        name=extract_variant_name(reference),
        type_reference=reference,
        arguments=annotation_arguments(annotation),
    )


def theme_type_reference(type_name: str, analysis: AnalysisConfig) -> str:
    """Fully qualify a theme variant type name for use in generated code."""
    text = type_name.strip()
    if text.startswith("typeof(") and text.endswith(")"):
        text = text[len("typeof(") : -1].strip()
    if not text or text.startswith("global::"):
        return text
    namespace, name = split_qualified(text)
    if namespace:
        return f"global::{text}"
    if name in analysis.theme_variants and analysis.theme_namespace:
        return f"global::{analysis.theme_namespace}.{name}"
    return text


def annotation_arguments(annotation: Annotation) -> str:
    """Render the constructor argument list of an annotation, parentheses included."""
    if annotation.argument_text:
        return f"({annotation.argument_text})"
    if not annotation.arguments and not annotation.named:
        return ""
    return f"({render_arguments(annotation.arguments)})"


def render_arguments(values: Iterable[Any]) -> str:
    return ", ".join(render_literal(value) for value in values)


def render_literal(value: Any) -> str:
    """Render a decoded annotation argument back as a C# literal."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    if value is None:
        return "null"
    if isinstance(value, (list, tuple)):
        return "new[] { " + render_arguments(value) + " }"
    return json.dumps(str(value))


def _build_member(
    declaration: Declaration,
    member: Member,
    observable: Annotation,
    analysis: AnalysisConfig,
) -> MemberDescriptor:
    owner = declaration.display_name
    public_name = normalize_public_name(member.name, analysis.private_prefix)
    if not public_name:
        raise ClassificationError(
            f"Field '{member.name}' does not yield a public name", declaration=owner
        )
    if not member.type:
        raise ClassificationError(
            f"Field '{member.name}' has no declared type", declaration=owner
        )

    cascades = tuple(
        normalize_public_name(str(item), analysis.private_prefix)
        for item in _cascade_arguments(observable)
    )
    if public_name in cascades:
        raise ClassificationError(
            f"Field '{member.name}' cascades into its own property '{public_name}'",
            declaration=owner,
        )

    alias_annotation = member.annotation(ANNOTATION_MODEL_ALIAS)
    model_alias = ""
    if alias_annotation is not None:
        model_alias = str(alias_annotation.value(0, "alias", "") or "")

    themes = tuple(
        theme_tag(annotation, analysis)
        for annotation in member.annotations
        if annotation.implements(THEME_CAPABILITY)
    )

    return MemberDescriptor(
        storage_name=member.name,
        public_name=public_name,
        declared_type=member.type,
        initializer=member.initializer,
        can_hover=_as_bool(observable.value(2, "canHover", False), "canHover", member, owner),
        can_dependency=_as_bool(observable.value(3, "canDependency", False), "canDependency", member, owner),
        can_isolated_storage=member.annotation(ANNOTATION_ISOLATED) is not None,
        themes=themes,
        setter_validation=_validation_mode(observable.value(0, "setterValidation", 0), member, owner),
        can_override=_as_bool(observable.value(1, "canOverride", False), "canOverride", member, owner),
        cascades=cascades,
        model_alias=model_alias,
    )


def _validation_mode(value: Any, member: Member, owner: str) -> int:
    if isinstance(value, bool):
        raise ClassificationError(
            f"Field '{member.name}' has a non-numeric setter validation", declaration=owner
        )
    if isinstance(value, int) and value in _VALIDATION_NAMES.values():
        return value
    if isinstance(value, str):
        text = value.strip().rsplit(".", 1)[-1].lower()
        if text.isdigit() and int(text) in _VALIDATION_NAMES.values():
            return int(text)
        if text in _VALIDATION_NAMES:
            return _VALIDATION_NAMES[text]
    raise ClassificationError(
        f"Field '{member.name}' has unknown setter validation {value!r}", declaration=owner
    )


def _as_bool(value: Any, key: str, member: Member, owner: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"true", "false"}:
        return value.strip().lower() == "true"
    raise ClassificationError(
        f"Field '{member.name}' has a non-boolean '{key}' argument: {value!r}", declaration=owner
    )


def _cascade_arguments(observable: Annotation) -> Sequence[Any]:
    # ``params string[]`` arguments may arrive spread out positionally.
    value = observable.value(4, "cascades", ())
    if len(observable.arguments) > 5 and value is observable.arguments[4]:
        return tuple(observable.arguments[4:])
    return _as_sequence(value)


def _as_sequence(value: Any) -> Sequence[Any]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,) if value else ()
    if isinstance(value, (list, tuple)):
        return value
    return (value,)


__all__ = [
    "annotation_arguments",
    "build_members",
    "render_arguments",
    "render_literal",
    "theme_tag",
    "theme_type_reference",
]
