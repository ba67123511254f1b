"""Persistent cache of rendered units for incremental generation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
import json
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from ..diagnostics import Diagnostic
from ..synthesis import GeneratedUnit

_CACHE_VERSION = 1


@dataclass(frozen=True)
class CachedOutcome:
    """What one declaration produced the last time it was generated."""

    units: List[GeneratedUnit]
    diagnostics: List[Diagnostic]


class UnitCache:
    """Stores generated units keyed by declaration, signature and fingerprint."""

    def __init__(self, path: Path | None) -> None:
        self._path = path
        self._entries: Dict[str, Dict[str, object]] = {}
        self._dirty = False
        if self._path is not None:
            self._load(self._path)

    def get(self, key: str, *, signature: str, fingerprint: str) -> Optional[CachedOutcome]:
        entry = self._entries.get(key)
        if not entry:
            return None
        if entry.get("signature") != signature:
            return None
        if entry.get("fingerprint") != fingerprint:
            return None
        units_payload = entry.get("units")
        diagnostics_payload = entry.get("diagnostics", [])
        if not isinstance(units_payload, list) or not isinstance(diagnostics_payload, list):
            return None
        units: List[GeneratedUnit] = []
        for payload in units_payload:
            unit = GeneratedUnit.from_dict(payload)
            if unit is None:
                return None
            units.append(unit)
        diagnostics = [
            diagnostic
            for diagnostic in (Diagnostic.from_dict(item) for item in diagnostics_payload)
            if diagnostic is not None
        ]
        return CachedOutcome(units=units, diagnostics=diagnostics)

    def store(
        self,
        key: str,
        *,
        signature: str,
        fingerprint: str,
        units: Sequence[GeneratedUnit],
        diagnostics: Sequence[Diagnostic] = (),
    ) -> None:
        self._entries[key] = {
            "signature": signature,
            "fingerprint": fingerprint,
            "units": [unit.to_dict() for unit in units],
            "diagnostics": [diagnostic.to_dict() for diagnostic in diagnostics],
            "updated_at": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
        }
        self._dirty = True

    def prune(self, keys_to_keep: Iterable[str]) -> None:
        keep = set(keys_to_keep)
        removed = [key for key in self._entries if key not in keep]
        if removed:
            for key in removed:
                self._entries.pop(key, None)
            self._dirty = True

    def persist(self) -> None:
        if not self._dirty or self._path is None:
            return
        payload = {
            "version": _CACHE_VERSION,
            "entries": self._entries,
        }
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
        self._dirty = False

    def clear(self) -> None:
        self._entries.clear()
        self._dirty = True

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    # ------------------------------------------------------------------
    # Internal helpers

    def _load(self, path: Path) -> None:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return
        except (OSError, json.JSONDecodeError):
            return
        if not isinstance(data, dict) or data.get("version") != _CACHE_VERSION:
            return
        entries = data.get("entries")
        if not isinstance(entries, dict):
            return
        valid_entries: Dict[str, Dict[str, object]] = {}
        for key, raw in entries.items():
            if not isinstance(key, str) or not isinstance(raw, dict):
                continue
            if "signature" not in raw or "fingerprint" not in raw or "units" not in raw:
                continue
            valid_entries[key] = raw
        self._entries = valid_entries
        self._dirty = False


__all__ = ["CachedOutcome", "UnitCache"]
