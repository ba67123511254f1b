"""Partial-class member synthesis for annotated UI declarations."""

__version__ = "0.4.0"

__all__ = ["__version__"]
