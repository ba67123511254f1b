"""Candidate selection: only open-for-extension classes can receive members."""

from __future__ import annotations

from typing import List, Set

from .logging import get_logger
from .models import Declaration
from .query import SemanticQuery

logger = get_logger("filter")

_CANDIDATE_KINDS = {"class"}


def select_candidates(query: SemanticQuery) -> List[Declaration]:
    """Return partial classes, one per qualified name, in snapshot order."""
    candidates: List[Declaration] = []
    seen: Set[str] = set()
    for declaration in query.declarations():
        if declaration.kind not in _CANDIDATE_KINDS or not declaration.is_partial:
            continue
        if declaration.qualified_name in seen:
            continue
        seen.add(declaration.qualified_name)
        candidates.append(declaration)
    logger.debug("Selected %d candidate declarations", len(candidates))
    return candidates


__all__ = ["select_candidates"]
