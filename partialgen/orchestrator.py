"""Pipeline orchestration: classify, resolve, synthesize, write."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass, field
import hashlib
import json
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from . import __version__
from .classifier import Classifier
from .config import PartialGenConfig, load_config
from .descriptors import DeclarationDescriptor
from .diagnostics import Diagnostic, GenerationError
from .filter import select_candidates
from .logging import get_logger
from .models import Declaration, Snapshot
from .query import SemanticQuery, SnapshotQuery
from .resolver import CrossReferenceResolver, candidate_targets
from .sources import Source, load_snapshot
from .stores import UnitCache
from .synthesis import GeneratedUnit, Synthesizer


@dataclass
class RunResult:
    """Everything a generation run produced."""

    units: List[GeneratedUnit] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    written: List[Path] = field(default_factory=list)
    cached: int = 0
    dry_run: bool = False

    @property
    def has_errors(self) -> bool:
        return any(item.is_error for item in self.diagnostics)

    def units_for(self, declaration: str) -> List[GeneratedUnit]:
        return [unit for unit in self.units if unit.declaration == declaration]


@dataclass
class Inspection:
    """Classified and resolved descriptors, without synthesis."""

    descriptors: List[DeclarationDescriptor] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)


@dataclass
class _Classified:
    declaration: Declaration
    descriptor: Optional[DeclarationDescriptor]
    diagnostics: List[Diagnostic]


class Orchestrator:
    """Coordinates the generation phases over one snapshot."""

    def __init__(
        self,
        synthesizer: Synthesizer | None = None,
        sources: Optional[Iterable[Source]] = None,
    ) -> None:
        self.synthesizer = synthesizer or Synthesizer()
        self._source_overrides = list(sources) if sources is not None else None
        self.logger = get_logger("orchestrator")

    def run(
        self,
        path: str | Path,
        *,
        out: str | Path | None = None,
        dry_run: bool = False,
        use_cache: bool = True,
    ) -> RunResult:
        """Load ``path``, generate every unit and write them unless ``dry_run``."""
        input_path = Path(path).expanduser().resolve()
        config = load_config(input_path)
        self.logger.info("Starting generation for %s", input_path)
        snapshot = load_snapshot(input_path, config, self._source_overrides)

        cache: Optional[UnitCache] = None
        if use_cache and config.cache.enabled:
            cache = UnitCache(config.root / config.cache.path)

        result = self.generate(snapshot, config, cache=cache)
        result.dry_run = dry_run
        if cache is not None and not dry_run:
            cache.persist()

        output_dir = Path(out).expanduser() if out is not None else config.root / config.output.directory
        if dry_run:
            self.logger.info("Dry run: %d unit(s) not written", len(result.units))
        else:
            result.written = self.write_units(result.units, output_dir, clean=config.output.clean)
        for diagnostic in result.diagnostics:
            self._log_diagnostic(diagnostic)
        return result

    def inspect_path(self, path: str | Path) -> Inspection:
        input_path = Path(path).expanduser().resolve()
        config = load_config(input_path)
        snapshot = load_snapshot(input_path, config, self._source_overrides)
        return self.inspect(snapshot, config)

    def inspect(self, snapshot: Snapshot, config: Optional[PartialGenConfig] = None) -> Inspection:
        """Classify and resolve ``snapshot`` without emitting code."""
        config = config or PartialGenConfig(root=Path.cwd())
        query = SnapshotQuery(snapshot)
        classified = self._classify(query, config)
        inspection = Inspection()
        for item in classified:
            inspection.diagnostics.extend(item.diagnostics)
        resolution = CrossReferenceResolver(query).resolve(
            [item.descriptor for item in classified if item.descriptor is not None]
        )
        inspection.descriptors = resolution.descriptors
        inspection.diagnostics.extend(resolution.diagnostics)
        return inspection

    def generate(
        self,
        snapshot: Snapshot,
        config: Optional[PartialGenConfig] = None,
        *,
        cache: Optional[UnitCache] = None,
    ) -> RunResult:
        """Run every phase over an in-memory snapshot."""
        config = config or PartialGenConfig(root=Path.cwd())
        query = SnapshotQuery(snapshot)
        result = RunResult()

        classified = self._classify(query, config)
        diagnostics: Dict[str, List[Diagnostic]] = {}
        for item in classified:
            diagnostics[item.declaration.display_name] = list(item.diagnostics)

        resolution = CrossReferenceResolver(query).resolve(
            [item.descriptor for item in classified if item.descriptor is not None]
        )
        for failure in resolution.failures:
            diagnostics.setdefault(failure.declaration, []).append(failure.to_diagnostic())

        signature = f"{__version__}|{config.signature()}"
        pending: List[Tuple[DeclarationDescriptor, str]] = []
        outcomes: Dict[str, List[GeneratedUnit]] = {}
        for descriptor in resolution.descriptors:
            key = descriptor.display_name
            fingerprint = _fingerprint(descriptor, query, resolution.descriptors)
            cached = cache.get(key, signature=signature, fingerprint=fingerprint) if cache is not None else None
            if cached is not None:
                outcomes[key] = cached.units
                diagnostics.setdefault(key, []).extend(cached.diagnostics)
                result.cached += 1
                continue
            pending.append((descriptor, fingerprint))

        with ThreadPoolExecutor(max_workers=config.workers) as executor:
            synthesized = list(executor.map(lambda item: self._synthesize(item[0]), pending))

        for (descriptor, fingerprint), (units, unit_diagnostics) in zip(pending, synthesized):
            key = descriptor.display_name
            outcomes[key] = units
            diagnostics.setdefault(key, []).extend(unit_diagnostics)
            failed = any(item.is_error for item in unit_diagnostics)
            if cache is not None and not failed:
                cache.store(
                    key,
                    signature=signature,
                    fingerprint=fingerprint,
                    units=units,
                    diagnostics=unit_diagnostics,
                )

        if cache is not None:
            cache.prune(item.display_name for item in resolution.descriptors)

        # Preserve snapshot order for deterministic output.
        for item in classified:
            key = item.declaration.display_name
            result.units.extend(outcomes.get(key, []))
            result.diagnostics.extend(diagnostics.get(key, []))
        self.logger.debug(
            "Generated %d unit(s) for %d declaration(s), %d from cache",
            len(result.units),
            len(classified),
            result.cached,
        )
        return result

    def write_units(self, units: Sequence[GeneratedUnit], output_dir: Path, *, clean: bool = False) -> List[Path]:
        output_dir.mkdir(parents=True, exist_ok=True)
        if clean:
            for stale in output_dir.glob("*.g.cs"):
                stale.unlink()
        written: List[Path] = []
        for unit in units:
            target = output_dir / unit.hint_name
            if target.exists() and target.read_text(encoding="utf-8") == unit.text:
                written.append(target)
                continue
            target.write_text(unit.text, encoding="utf-8")
            self.logger.debug("Wrote %s", target)
            written.append(target)
        self.logger.info("Wrote %d unit(s) to %s", len(written), output_dir)
        return written

    # ------------------------------------------------------------------
    # Internal helpers

    def _classify(self, query: SemanticQuery, config: PartialGenConfig) -> List[_Classified]:
        classifier = Classifier(query, config.analysis)
        candidates = select_candidates(query)

        def _run(declaration: Declaration) -> _Classified:
            diagnostics: List[Diagnostic] = []
            try:
                descriptor = classifier.classify(declaration, diagnostics)
            except GenerationError as exc:
                if not exc.declaration:
                    exc.declaration = declaration.display_name
                diagnostics.append(exc.to_diagnostic())
                return _Classified(declaration, None, diagnostics)
            return _Classified(declaration, descriptor, diagnostics)

        with ThreadPoolExecutor(max_workers=config.workers) as executor:
            return list(executor.map(_run, candidates))

    def _synthesize(self, descriptor: DeclarationDescriptor) -> Tuple[List[GeneratedUnit], List[Diagnostic]]:
        try:
            outcome = self.synthesizer.synthesize(descriptor)
        except GenerationError as exc:
            if not exc.declaration:
                exc.declaration = descriptor.display_name
            return [], [exc.to_diagnostic()]
        return outcome.units, outcome.diagnostics

    def _log_diagnostic(self, diagnostic: Diagnostic) -> None:
        if diagnostic.is_error:
            self.logger.error(diagnostic.format())
        else:
            self.logger.warning(diagnostic.format())


def _fingerprint(
    descriptor: DeclarationDescriptor,
    query: SemanticQuery,
    classified: Sequence[DeclarationDescriptor],
) -> str:
    """Hash the declaration together with everything its output depends on."""
    related: Dict[str, Declaration] = {}
    own = next(
        (item for item in query.declarations() if item.qualified_name == descriptor.qualified_name), None
    )
    if own is not None:
        related[own.qualified_name] = own
        # Follow the same lookups the classifier's base walk made.
        current = own
        for _ in descriptor.base_chain:
            base = query.resolve_base(current)
            if base is None or base.qualified_name in related:
                break
            related[base.qualified_name] = base
            current = base
    if descriptor.model_link is not None:
        for target in candidate_targets(descriptor.model_link, query):
            related.setdefault(target.qualified_name, target)
            linked = next(
                (item for item in classified if item.qualified_name == target.qualified_name), None
            )
            if linked is not None and linked.reader_link is not None:
                for reader in candidate_targets(linked.reader_link, query):
                    related.setdefault(reader.qualified_name, reader)

    payload = [asdict(related[key]) for key in sorted(related)]
    digest = hashlib.sha256(json.dumps(payload, sort_keys=True, default=str).encode("utf-8"))
    return digest.hexdigest()


__all__ = ["Inspection", "Orchestrator", "RunResult"]
