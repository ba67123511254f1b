"""Base classes for snapshot sources."""

from abc import ABC, abstractmethod
from pathlib import Path

from ..config import PartialGenConfig
from ..diagnostics import GenerationError
from ..models import Snapshot


class SourceError(GenerationError):
    """Raised when an input cannot be read or parsed into a snapshot."""

    code = "source"


class Source(ABC):
    """Contract for plugins that turn input files into a declaration snapshot."""

    name: str = "source"

    @abstractmethod
    def supports(self, path: Path) -> bool:
        """Return True when this source can read ``path``."""

    @abstractmethod
    def load(self, path: Path) -> Snapshot:
        """Parse ``path`` (a file or a directory) into a snapshot."""

    def configure(self, config: PartialGenConfig) -> None:
        """Pick up run configuration; most sources need none."""
