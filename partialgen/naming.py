"""Naming rules shared by every phase that derives a generated identifier."""

from __future__ import annotations

import re

from .constants import GLOBAL_NAMESPACE_TOKEN

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_GLOBAL_PREFIX = "global::"


def normalize_public_name(storage_name: str, private_prefix: str = "_") -> str:
    """Derive the public member name from a storage name.

    Every leading private-prefix marker is dropped and the first remaining
    character is upper-cased. Stripping the whole run of markers keeps the
    rule idempotent (``normalize(normalize(s)) == normalize(s)``).
    """
    name = storage_name.strip()
    if private_prefix:
        while name.startswith(private_prefix):
            name = name[len(private_prefix) :]
    if not name:
        return ""
    return name[0].upper() + name[1:]


def default_expression(initializer: str) -> str:
    """Turn raw initializer text (``= value``) into a default-value expression.

    Only a single leading assignment marker and leading whitespace are removed;
    the expression itself is carried verbatim.
    """
    text = initializer.lstrip()
    if text.startswith("="):
        text = text[1:]
    return text.lstrip()


def extract_variant_name(type_reference: str) -> str:
    """Return the theme variant identifier named by an annotation type reference.

    ``global::MinimalisticWPF.Theme.Dark("#000")`` yields ``Dark``. Anything that
    does not reduce to a plain identifier yields an empty string.
    """
    text = type_reference.strip()
    paren = text.find("(")
    if paren >= 0:
        text = text[:paren]
    text = text.strip().replace("::", ".")
    candidate = text.rsplit(".", 1)[-1].strip()
    if not _IDENTIFIER.match(candidate):
        return ""
    return candidate


def is_identifier(value: str) -> bool:
    return bool(_IDENTIFIER.match(value))


def strip_global(type_name: str) -> str:
    text = type_name.strip()
    if text.startswith(_GLOBAL_PREFIX):
        return text[len(_GLOBAL_PREFIX) :]
    return text


def split_qualified(type_name: str) -> tuple[str, str]:
    """Split ``Ns.Inner.Name`` (optionally ``global::``-prefixed) into namespace and name."""
    text = strip_global(type_name)
    if "<" in text:
        text = text.split("<", 1)[0]
    if "." not in text:
        return "", text
    namespace, name = text.rsplit(".", 1)
    return namespace, name


def qualified_name(namespace: str, name: str) -> str:
    """Fully qualified display form used in generated code (``global::Ns.Name``)."""
    if namespace:
        return f"{_GLOBAL_PREFIX}{namespace}.{name}"
    return f"{_GLOBAL_PREFIX}{name}"


def namespace_token(namespace: str) -> str:
    """Namespace flattened for use inside identifiers and file names."""
    return namespace.replace(".", "_") if namespace else GLOBAL_NAMESPACE_TOKEN


def interface_name(namespace: str, name: str) -> str:
    return f"IAop{name}In{namespace_token(namespace)}"


def hint_name(namespace: str, name: str) -> str:
    return f"{namespace_token(namespace)}_{name}.g.cs"


def annotation_short_name(name: str) -> str:
    """Normalise an annotation reference (``[Foo.BarAttribute]``) to ``Bar``."""
    _, short = split_qualified(name)
    if short.endswith("Attribute") and len(short) > len("Attribute"):
        short = short[: -len("Attribute")]
    return short


__all__ = [
    "annotation_short_name",
    "default_expression",
    "extract_variant_name",
    "hint_name",
    "interface_name",
    "is_identifier",
    "namespace_token",
    "normalize_public_name",
    "qualified_name",
    "split_qualified",
    "strip_global",
]
