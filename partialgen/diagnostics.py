"""Error taxonomy and structured diagnostics reported per declaration."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, Optional

SEVERITY_WARNING = "warning"
SEVERITY_ERROR = "error"
SEVERITY_FATAL = "fatal"


class GenerationError(RuntimeError):
    """Base class for declaration-scoped generation failures."""

    code = "generation"
    severity = SEVERITY_ERROR

    def __init__(self, message: str, *, declaration: str = "") -> None:
        super().__init__(message)
        self.declaration = declaration

    def to_diagnostic(self) -> "Diagnostic":
        return Diagnostic(
            code=self.code,
            severity=self.severity,
            declaration=self.declaration,
            message=str(self),
        )


class ClassificationError(GenerationError):
    """Annotation data is ambiguous, malformed or missing."""

    code = "classification"


class NameCollisionError(ClassificationError):
    """Two members (or two generated artifacts) share one public name."""

    code = "name-collision"

    def __init__(self, name: str, *, declaration: str = "", detail: str = "") -> None:
        message = f"Public name '{name}' is produced more than once"
        if declaration:
            message += f" in {declaration}"
        if detail:
            message += f" ({detail})"
        super().__init__(message, declaration=declaration)
        self.name = name


class ResolutionError(GenerationError):
    """A model link target was not found or failed namespace validation."""

    code = "unresolved-model"
    severity = SEVERITY_FATAL

    def __init__(
        self,
        target: str,
        namespace: Optional[str],
        *,
        declaration: str = "",
        cause: Optional["ResolutionError"] = None,
    ) -> None:
        if cause is not None:
            message = f"Type '{target}' could not be resolved: {cause}"
        else:
            filter_text = namespace if namespace else "<any>"
            message = f"Type '{target}' not found (namespace filter: {filter_text})"
            if declaration:
                message += f" for {declaration}"
        super().__init__(message, declaration=declaration)
        self.target = target
        self.namespace = namespace
        self.cause = cause


class ExpansionError(GenerationError):
    """A theme variant tag cannot produce a valid identifier."""

    code = "malformed-theme"

    def __init__(self, member: str, type_reference: str, *, declaration: str = "", reason: str = "") -> None:
        detail = reason or "variant name is not a valid identifier"
        message = f"Theme variant '{type_reference}' on member '{member}': {detail}"
        super().__init__(message, declaration=declaration)
        self.member = member
        self.type_reference = type_reference


@dataclass(frozen=True)
class Diagnostic:
    """Structured report attached to the offending declaration."""

    code: str
    severity: str
    declaration: str
    message: str

    @property
    def is_error(self) -> bool:
        return self.severity in {SEVERITY_ERROR, SEVERITY_FATAL}

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: object) -> Optional["Diagnostic"]:
        if not isinstance(payload, dict):
            return None
        values = [payload.get(key) for key in ("code", "severity", "declaration", "message")]
        if not all(isinstance(value, str) for value in values):
            return None
        return cls(*values)  # type: ignore[arg-type]

    def format(self) -> str:
        target = f" [{self.declaration}]" if self.declaration else ""
        return f"{self.severity}: {self.code}{target}: {self.message}"


def warning(code: str, declaration: str, message: str) -> Diagnostic:
    return Diagnostic(code=code, severity=SEVERITY_WARNING, declaration=declaration, message=message)


__all__ = [
    "ClassificationError",
    "Diagnostic",
    "ExpansionError",
    "GenerationError",
    "NameCollisionError",
    "ResolutionError",
    "SEVERITY_ERROR",
    "SEVERITY_FATAL",
    "SEVERITY_WARNING",
    "warning",
]
