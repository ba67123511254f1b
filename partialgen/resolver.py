"""Cross-reference resolution between views, models and data shapes.

This is the only phase that needs the complete classified set, so the
orchestrator runs it as a barrier between the parallel phases.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .descriptors import (
    DeclarationDescriptor,
    LinkTarget,
    ModelLink,
)
from .diagnostics import Diagnostic, ResolutionError
from .logging import get_logger
from .models import Declaration
from .naming import split_qualified
from .query import SemanticQuery

logger = get_logger("resolver")


@dataclass
class ResolutionResult:
    """Descriptors that resolved (or needed no resolution) plus per-declaration failures."""

    descriptors: List[DeclarationDescriptor] = field(default_factory=list)
    failures: List[ResolutionError] = field(default_factory=list)

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return [failure.to_diagnostic() for failure in self.failures]

    def get(self, display_name: str) -> Optional[DeclarationDescriptor]:
        return next((item for item in self.descriptors if item.display_name == display_name), None)


class CrossReferenceResolver:
    """Resolves every :class:`ModelLink` of a classified set."""

    def __init__(self, query: SemanticQuery) -> None:
        self.query = query

    def resolve(self, descriptors: Sequence[DeclarationDescriptor]) -> ResolutionResult:
        """Resolve model-reader links first, then view-model links.

        View links are matched against the classified set after its own
        reader links are in place, so a view can forward the model's reader.
        """
        result = ResolutionResult()
        readers: List[DeclarationDescriptor] = []
        unresolved: List[Tuple[DeclarationDescriptor, ResolutionError]] = []
        for descriptor in descriptors:
            try:
                readers.append(self.resolve_reader(descriptor))
            except ResolutionError as exc:
                logger.error(str(exc))
                result.failures.append(exc)
                unresolved.append((descriptor, exc))

        for descriptor in readers:
            try:
                result.descriptors.append(self.resolve_view(descriptor, readers, unresolved))
            except ResolutionError as exc:
                logger.error(str(exc))
                result.failures.append(exc)
        return result

    def resolve_reader(self, descriptor: DeclarationDescriptor) -> DeclarationDescriptor:
        link = descriptor.reader_link
        if link is None or link.is_resolved:
            return descriptor
        target = self.query.find_declaration(link.target_name, link.namespace)
        if target is None:
            raise ResolutionError(link.target_name, link.namespace, declaration=descriptor.display_name)
        resolved = LinkTarget(
            name=target.name,
            namespace=target.namespace,
            property_names=_property_names(self.query, target),
        )
        logger.debug("Resolved model reader of %s to %s", descriptor.display_name, resolved.qualified_name)
        return replace(descriptor, model_link=replace(link, resolved=resolved))

    def resolve_view(
        self,
        descriptor: DeclarationDescriptor,
        classified: Sequence[DeclarationDescriptor],
        unresolved: Sequence[Tuple[DeclarationDescriptor, ResolutionError]] = (),
    ) -> DeclarationDescriptor:
        link = descriptor.view_link
        if link is None or link.is_resolved:
            return descriptor
        model = _find_descriptor(classified, link)
        if model is None:
            for blocked, cause in unresolved:
                if _find_descriptor((blocked,), link) is not None:
                    # The model exists; its own reader link is what failed.
                    raise ResolutionError(
                        link.target_name,
                        link.namespace,
                        declaration=descriptor.display_name,
                        cause=cause,
                    )
            raise ResolutionError(link.target_name, link.namespace, declaration=descriptor.display_name)

        authoritative = {
            member.public_name
            for member in model.members
            if member.can_hover or member.is_theme_reactive
        }
        view_members = tuple(
            member for member in descriptor.view_members if member.public_name not in authoritative
        )
        dropped = len(descriptor.view_members) - len(view_members)
        if dropped:
            logger.debug(
                "Dropped %d view member(s) of %s owned by %s",
                dropped,
                descriptor.display_name,
                model.display_name,
            )
        resolved = LinkTarget(
            name=model.name,
            namespace=model.namespace,
            property_names=tuple(member.public_name for member in model.members),
            descriptor=model,
        )
        return replace(
            descriptor,
            view_members=view_members,
            model_link=replace(link, resolved=resolved),
        )


def candidate_targets(link: ModelLink, query: SemanticQuery) -> List[Declaration]:
    """Every declaration a link could resolve to, used for cache fingerprints."""
    namespace, name = split_qualified(link.target_name)
    return [
        declaration
        for declaration in query.declarations()
        if declaration.name == name and (not namespace or declaration.namespace == namespace)
    ]


def _find_descriptor(
    classified: Iterable[DeclarationDescriptor], link: ModelLink
) -> Optional[DeclarationDescriptor]:
    namespace, name = split_qualified(link.target_name)
    for candidate in classified:
        if candidate.name != name:
            continue
        if namespace and candidate.namespace != namespace:
            continue
        if link.namespace and candidate.namespace != link.namespace:
            continue
        return candidate
    return None


def _property_names(query: SemanticQuery, declaration: Declaration) -> Tuple[str, ...]:
    names: Dict[str, None] = {}
    for member in query.members_of(declaration):
        if member.kind == "property" and member.has_setter and not member.is_static:
            names.setdefault(member.name, None)
    return tuple(names)


__all__ = [
    "CrossReferenceResolver",
    "ResolutionResult",
    "candidate_targets",
]
