"""Semantic classification of candidate declarations."""

from __future__ import annotations

from dataclasses import dataclass
import threading
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .config import AnalysisConfig
from .constants import (
    ANNOTATION_ASPECT,
    ANNOTATION_CLICK,
    ANNOTATION_CONSTRUCTOR,
    ANNOTATION_CONTEXT_CONFIG,
    ANNOTATION_HOVER,
    ANNOTATION_MODEL_CONFIG,
    ANNOTATION_MONO,
    ANNOTATION_OBSERVABLE,
    ANNOTATION_THEME,
    DEFAULT_MONO_SPAN,
    THEME_CAPABILITY,
)
from .descriptors import (
    LINK_MODEL_READER,
    LINK_VIEW_MODEL,
    ClassificationFlags,
    ConstructorHook,
    DeclarationDescriptor,
    MemberDescriptor,
    ModelLink,
    ThemeVariantTag,
)
from .diagnostics import ClassificationError, Diagnostic, NameCollisionError, warning
from .logging import declaration_logger, get_logger
from .member_builder import build_members, render_arguments, theme_type_reference
from .models import Annotation, Declaration
from .naming import extract_variant_name, normalize_public_name, split_qualified, strip_global
from .query import SemanticQuery

logger = get_logger("classifier")


@dataclass(frozen=True)
class BaseWalk:
    """Outcome of walking a declaration's base-type chain."""

    chain: Tuple[str, ...]
    is_view: bool
    property_types: Tuple[Tuple[str, str], ...] = ()
    warnings: Tuple[Diagnostic, ...] = ()

    def property_type(self, name: str) -> Optional[str]:
        return next((type_name for prop, type_name in self.property_types if prop == name), None)


class Classifier:
    """Derives :class:`DeclarationDescriptor` values from a read-only query.

    Safe to share across worker threads: the only state is the base-walk
    cache, keyed by qualified declaration name and guarded by a lock.
    """

    def __init__(self, query: SemanticQuery, analysis: Optional[AnalysisConfig] = None) -> None:
        self.query = query
        self.analysis = analysis or AnalysisConfig()
        self._walks: Dict[str, BaseWalk] = {}
        self._lock = threading.Lock()

    def classify(
        self,
        declaration: Declaration,
        diagnostics: Optional[List[Diagnostic]] = None,
    ) -> DeclarationDescriptor:
        owner = declaration.display_name
        annotations = self.query.annotations_of(declaration)
        members = self.query.members_of(declaration)

        walk = self.walk_bases(declaration)
        if diagnostics is not None:
            diagnostics.extend(walk.warnings)

        member_descriptors = build_members(declaration, self.query, self.analysis)

        model_config = _single(annotations, ANNOTATION_MODEL_CONFIG, owner)
        context_config = _single(annotations, ANNOTATION_CONTEXT_CONFIG, owner)
        if model_config is not None and context_config is not None:
            raise ClassificationError(
                f"{ANNOTATION_MODEL_CONFIG} and {ANNOTATION_CONTEXT_CONFIG} cannot be combined",
                declaration=owner,
            )
        if context_config is not None and not walk.is_view:
            raise ClassificationError(
                f"{ANNOTATION_CONTEXT_CONFIG} requires a declaration deriving from "
                f"{self.analysis.visual_root}",
                declaration=owner,
            )

        class_themes = [item for item in annotations if item.name == ANNOTATION_THEME]
        member_theme = any(
            annotation.implements(THEME_CAPABILITY)
            for member in members
            for annotation in member.annotations
        )
        mono = _single(annotations, ANNOTATION_MONO, owner)

        view_members: Tuple[MemberDescriptor, ...] = ()
        if walk.is_view:
            view_members = self._view_members(declaration, annotations, walk)

        flags = ClassificationFlags(
            is_proxy_target=any(item.name == ANNOTATION_ASPECT for item in annotations),
            is_observable_model=any(
                member.kind == "field" and member.annotation(ANNOTATION_OBSERVABLE) is not None
                for member in members
            ),
            is_theme_aware=bool(class_themes) or member_theme,
            is_view_bound=walk.is_view,
            is_clickable=any(item.name == ANNOTATION_CLICK for item in annotations),
            is_periodic_update=mono is not None,
            has_model_mapping=model_config is not None,
            is_context_config=context_config is not None,
        )

        model_link = None
        if model_config is not None:
            model_link = _model_link(LINK_MODEL_READER, model_config, owner)
        elif context_config is not None:
            model_link = _model_link(LINK_VIEW_MODEL, context_config, owner)

        hooks = tuple(
            ConstructorHook(name=member.name, parameters=member.parameters)
            for member in members
            if member.kind == "method" and member.annotation(ANNOTATION_CONSTRUCTOR) is not None
        )

        descriptor = DeclarationDescriptor(
            name=declaration.name,
            namespace=declaration.namespace,
            accessibility=declaration.accessibility,
            modifiers=declaration.modifiers,
            base_chain=walk.chain,
            flags=flags,
            members=member_descriptors,
            view_members=view_members,
            model_link=model_link,
            constructor_hooks=hooks,
            public_properties=tuple(
                member
                for member in members
                if member.kind == "property" and member.accessibility == "public" and not member.is_static
            ),
            public_methods=tuple(
                member
                for member in members
                if member.kind == "method" and member.accessibility == "public" and not member.is_static
            ),
            update_interval=_mono_span(mono, owner) if mono is not None else DEFAULT_MONO_SPAN,
        )
        declaration_logger(logger, owner).debug("Classified as %s", ", ".join(flags.enabled()) or "plain")
        return descriptor

    def walk_bases(self, declaration: Declaration) -> BaseWalk:
        """Walk the base chain with bounded iteration, memoised per declaration."""
        key = declaration.qualified_name
        with self._lock:
            cached = self._walks.get(key)
        if cached is not None:
            return cached
        walk = self._walk(declaration)
        with self._lock:
            self._walks.setdefault(key, walk)
        return walk

    # ------------------------------------------------------------------
    # Internal helpers

    def _walk(self, declaration: Declaration) -> BaseWalk:
        owner = declaration.display_name
        root = strip_global(self.analysis.visual_root)
        _, root_short = split_qualified(root)
        visual_types = set(self.analysis.visual_types)

        chain: List[str] = []
        properties: Dict[str, str] = {}
        _collect_properties(declaration, self.query, properties)
        visited = {declaration.qualified_name}
        current = declaration

        for _ in range(self.analysis.max_base_depth):
            base_name = self.query.base_type_of(current)
            if not base_name:
                return BaseWalk(tuple(chain), False, tuple(properties.items()))
            chain.append(base_name)
            if strip_global(base_name) == root:
                return BaseWalk(tuple(chain), True, tuple(properties.items()))

            parent = self.query.resolve_base(current)
            if parent is None:
                _, short = split_qualified(base_name)
                is_view = short in visual_types or short == root_short
                return BaseWalk(tuple(chain), is_view, tuple(properties.items()))
            if parent.qualified_name in visited:
                message = f"Base type chain of {owner} is cyclic at '{base_name}'"
                logger.warning(message)
                return BaseWalk(
                    tuple(chain),
                    False,
                    tuple(properties.items()),
                    (warning("base-chain-cycle", owner, message),),
                )
            visited.add(parent.qualified_name)
            _collect_properties(parent, self.query, properties)
            current = parent

        message = (
            f"Base type chain of {owner} exceeds {self.analysis.max_base_depth} levels; "
            "treated as not view-bound"
        )
        logger.warning(message)
        return BaseWalk(
            tuple(chain),
            False,
            tuple(properties.items()),
            (warning("base-chain-depth", owner, message),),
        )

    def _view_members(
        self,
        declaration: Declaration,
        annotations: Sequence[Annotation],
        walk: BaseWalk,
    ) -> Tuple[MemberDescriptor, ...]:
        owner = declaration.display_name
        themes: Dict[str, List[ThemeVariantTag]] = {}
        for annotation in annotations:
            if annotation.name != ANNOTATION_THEME or not annotation.arguments:
                continue
            if len(annotation.arguments) < 2:
                raise ClassificationError(
                    f"{ANNOTATION_THEME} on a view needs a property name and a variant type",
                    declaration=owner,
                )
            target = _name_argument(annotation.arguments[0])
            reference = theme_type_reference(str(annotation.arguments[1]), self.analysis)
            extra = annotation.arguments[2:]
            themes.setdefault(target, []).append(
                ThemeVariantTag(
                    name=extract_variant_name(reference),
                    type_reference=reference,
                    arguments=f"({render_arguments(extra)})" if extra else "",
                )
            )

        hovers: List[str] = []
        for annotation in annotations:
            if annotation.name != ANNOTATION_HOVER:
                continue
            for value in _flatten(annotation.arguments):
                name = _name_argument(value)
                if name and name not in hovers:
                    hovers.append(name)

        ordered = list(themes) + [name for name in hovers if name not in themes]
        descriptors: List[MemberDescriptor] = []
        seen: Dict[str, str] = {}
        for target in ordered:
            public_name = normalize_public_name(target, self.analysis.private_prefix)
            if public_name in seen:
                raise NameCollisionError(
                    public_name,
                    declaration=owner,
                    detail=f"view targets '{seen[public_name]}' and '{target}'",
                )
            seen[public_name] = target
            type_name = walk.property_type(public_name) or self.analysis.property_types.get(public_name)
            if not type_name:
                raise ClassificationError(
                    f"Cannot determine the type of view property '{public_name}'; "
                    "declare it or add it to analysis.property_types",
                    declaration=owner,
                )
            descriptors.append(
                MemberDescriptor(
                    storage_name=target,
                    public_name=public_name,
                    declared_type=type_name,
                    can_hover=target in hovers,
                    themes=tuple(themes.get(target, ())),
                )
            )
        return tuple(descriptors)


def classify(
    declaration: Declaration,
    query: SemanticQuery,
    analysis: Optional[AnalysisConfig] = None,
    diagnostics: Optional[List[Diagnostic]] = None,
) -> DeclarationDescriptor:
    """Classify a single declaration without sharing a base-walk cache."""
    return Classifier(query, analysis).classify(declaration, diagnostics)


def _collect_properties(declaration: Declaration, query: SemanticQuery, sink: Dict[str, str]) -> None:
    for member in query.members_of(declaration):
        if member.kind == "property" and member.type:
            sink.setdefault(member.name, member.type)


def _single(annotations: Sequence[Annotation], name: str, owner: str) -> Optional[Annotation]:
    found = [item for item in annotations if item.name == name]
    if len(found) > 1:
        raise ClassificationError(f"{name} may only be declared once", declaration=owner)
    return found[0] if found else None


def _model_link(kind: str, annotation: Annotation, owner: str) -> ModelLink:
    target = annotation.value(0, "name", "")
    if not isinstance(target, str) or not target.strip():
        raise ClassificationError(f"{annotation.name} requires a target type name", declaration=owner)
    namespace = annotation.value(1, "validation", None)
    if namespace is not None and not isinstance(namespace, str):
        raise ClassificationError(
            f"{annotation.name} namespace filter must be text, got {namespace!r}",
            declaration=owner,
        )
    return ModelLink(kind=kind, target_name=_name_argument(target), namespace=namespace or None)


def _mono_span(annotation: Annotation, owner: str) -> float:
    value = annotation.value(0, "span", DEFAULT_MONO_SPAN)
    if isinstance(value, bool):
        raise ClassificationError(f"{ANNOTATION_MONO} span must be numeric", declaration=owner)
    try:
        span = float(value)
    except (TypeError, ValueError) as exc:
        raise ClassificationError(
            f"{ANNOTATION_MONO} span must be numeric, got {value!r}", declaration=owner
        ) from exc
    if span <= 0:
        raise ClassificationError(f"{ANNOTATION_MONO} span must be positive", declaration=owner)
    return span


def _name_argument(value: Any) -> str:
    text = str(value).strip()
    if text.startswith("nameof(") and text.endswith(")"):
        return text[len("nameof(") : -1].strip().rsplit(".", 1)[-1]
    return text


def _flatten(values: Sequence[Any]) -> List[Any]:
    flattened: List[Any] = []
    for value in values:
        if isinstance(value, (list, tuple)):
            flattened.extend(value)
        else:
            flattened.append(value)
    return flattened


__all__ = ["BaseWalk", "Classifier", "classify"]
