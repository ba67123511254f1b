"""Code unit synthesis: structured IR plus a single C# formatter."""

from .formatter import CSharpFormatter
from .ir import CompilationUnit
from .synthesizer import GeneratedUnit, SynthesisResult, Synthesizer

__all__ = [
    "CSharpFormatter",
    "CompilationUnit",
    "GeneratedUnit",
    "SynthesisResult",
    "Synthesizer",
]
