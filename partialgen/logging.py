"""Logging for the generation phases.

Each phase logs through ``get_logger("<phase>")``. Console lines carry the
phase so output from the classification and synthesis worker pools can be
told apart, and per-declaration messages go through :func:`declaration_logger`.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, MutableMapping, Tuple

_LOGGER_NAME = "partialgen"
_CONSOLE_FORMAT = "[partialgen] %(levelname)s %(phase)s: %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(threadName)s %(phase)s: %(message)s"


class _PhaseFilter(logging.Filter):
    """Expose the logger name below ``partialgen`` as ``%(phase)s``."""

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name.startswith(_LOGGER_NAME + "."):
            name = name[len(_LOGGER_NAME) + 1 :]
        record.phase = name
        return True


class DeclarationLogger(logging.LoggerAdapter):
    """Prefixes every message with the declaration being processed."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        return f"[{self.extra['declaration']}] {msg}", kwargs


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a phase logger under the partialgen hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def declaration_logger(logger: logging.Logger, declaration: str) -> DeclarationLogger:
    return DeclarationLogger(logger, {"declaration": declaration})


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Attach the console handler and an optional file sink to the partialgen logger."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Repeated CLI invocations in one process must not stack handlers.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    phase = _PhaseFilter()
    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.addFilter(phase)
    stream_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(stream_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        # Worker threads write here too; the thread name keeps their lines apart.
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.addFilter(phase)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)
        logger.setLevel(logging.DEBUG)

    return logger


__all__ = ["DeclarationLogger", "configure_logging", "declaration_logger", "get_logger"]
