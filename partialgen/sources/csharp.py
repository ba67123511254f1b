"""Tree-sitter powered C# declaration extractor."""

from __future__ import annotations

import fnmatch
import json
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Optional, Sequence, Tuple

import tree_sitter_c_sharp
from tree_sitter import Language, Node, Parser

from ..config import PartialGenConfig, SourcesConfig
from ..logging import get_logger
from ..models import Annotation, Declaration, Member, Parameter, Snapshot
from ..naming import annotation_short_name
from .base import Source, SourceError

logger = get_logger("sources.csharp")

_ACCESSIBILITY = {"public", "internal", "protected", "private", "file"}
_NAMESPACES = {"namespace_declaration", "file_scoped_namespace_declaration"}
_CLASS_TYPES = {"class_declaration"}
_ACCESSOR_KEYWORDS = {"get", "set", "init"}
# Units written by earlier runs are never inputs.
_GENERATED_SUFFIX = ".g.cs"


class CSharpSource(Source):
    """Parses ``.cs`` files, or a directory of them, into a snapshot."""

    name = "csharp"

    def __init__(self, sources: Optional[SourcesConfig] = None) -> None:
        self.sources = sources or SourcesConfig()
        self._parser: Optional[Parser] = None

    def configure(self, config: PartialGenConfig) -> None:
        self.sources = config.sources

    def supports(self, path: Path) -> bool:
        if path.is_dir():
            return True
        return path.is_file() and path.suffix.lower() == ".cs"

    def load(self, path: Path) -> Snapshot:
        files = [path] if path.is_file() else list(self._iter_files(path))
        declarations: List[Declaration] = []
        for file_path in files:
            try:
                source = file_path.read_text(encoding="utf-8-sig")
            except (OSError, UnicodeDecodeError) as exc:
                raise SourceError(f"Failed to read {file_path}: {exc}") from exc
            origin = _relative(file_path, path)
            declarations.extend(self.parse(source, origin=origin))
        logger.debug("Parsed %d declaration(s) from %d file(s)", len(declarations), len(files))
        return Snapshot(declarations=declarations, origin=str(path))

    def parse(self, source: str, *, origin: str = "") -> List[Declaration]:
        """Extract every class declaration from one C# compilation unit."""
        source_bytes = source.encode("utf-8")
        tree = self._get_parser().parse(source_bytes)
        reader = _Reader(source_bytes, origin)
        return list(reader.declarations(tree.root_node, ""))

    def _get_parser(self) -> Parser:
        if self._parser is None:
            self._parser = Parser(Language(tree_sitter_c_sharp.language()))
        return self._parser

    def _iter_files(self, root: Path) -> Iterator[Path]:
        for file_path in sorted(root.rglob("*")):
            if not file_path.is_file() or file_path.name.endswith(_GENERATED_SUFFIX):
                continue
            rel_path = file_path.relative_to(root).as_posix()
            if any(f"/{prefix}" in f"/{rel_path}" for prefix in self.sources.exclude_paths):
                continue
            if not any(
                fnmatch.fnmatch(rel_path, pattern) or fnmatch.fnmatch(file_path.name, pattern)
                for pattern in self.sources.include
            ):
                continue
            yield file_path


class _Reader:
    """Walks one syntax tree, producing model objects."""

    def __init__(self, source_bytes: bytes, origin: str) -> None:
        self.source_bytes = source_bytes
        self.origin = origin

    def text(self, node: Node) -> str:
        return self.source_bytes[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")

    def declarations(self, node: Node, namespace: str) -> Iterator[Declaration]:
        current = namespace
        for child in node.named_children:
            if child.type in _NAMESPACES:
                name_node = child.child_by_field_name("name")
                inner = self.text(name_node) if name_node is not None else ""
                inner = f"{namespace}.{inner}" if namespace and inner else inner or namespace
                body = child.child_by_field_name("body")
                if child.type == "file_scoped_namespace_declaration":
                    # Later siblings belong to the file-scoped namespace too.
                    current = inner
                    yield from self.declarations(child, inner)
                elif body is not None:
                    yield from self.declarations(body, inner)
            elif child.type in _CLASS_TYPES:
                yield self.declaration(child, current)
            elif child.type == "declaration_list":
                yield from self.declarations(child, current)

    def declaration(self, node: Node, namespace: str) -> Declaration:
        name_node = node.child_by_field_name("name")
        name = self.text(name_node) if name_node is not None else ""
        accessibility, modifiers = self.modifiers(node)
        body = node.child_by_field_name("body")
        members: List[Member] = []
        if body is not None:
            for child in body.named_children:
                members.extend(self.members(child))
        return Declaration(
            name=name,
            namespace=namespace,
            kind="class",
            accessibility=accessibility or "internal",
            modifiers=modifiers,
            base_type=self.base_type(node),
            annotations=self.annotations(node),
            members=tuple(members),
            origin=self.origin,
        )

    def modifiers(self, node: Node) -> Tuple[str, Tuple[str, ...]]:
        words = [self.text(child) for child in node.children if child.type == "modifier"]
        accessibility = " ".join(word for word in words if word in _ACCESSIBILITY)
        return accessibility, tuple(word for word in words if word not in _ACCESSIBILITY)

    def base_type(self, node: Node) -> Optional[str]:
        base_list = next((child for child in node.named_children if child.type == "base_list"), None)
        if base_list is None:
            return None
        entries = [
            self.text(child).strip()
            for child in base_list.named_children
            if child.type not in {"argument_list", "comment"}
        ]
        # Interfaces cannot be told apart syntactically; skip I-prefixed names.
        for entry in entries:
            short = entry.rsplit(".", 1)[-1]
            if not (len(short) > 1 and short[0] == "I" and short[1].isupper()):
                return entry
        return None

    def members(self, node: Node) -> List[Member]:
        if node.type == "field_declaration":
            return self.fields(node)
        if node.type == "property_declaration":
            return [self.property(node)]
        if node.type == "method_declaration":
            return [self.method(node)]
        return []

    def fields(self, node: Node) -> List[Member]:
        accessibility, modifiers = self.modifiers(node)
        annotations = self.annotations(node)
        variable = next((child for child in node.named_children if child.type == "variable_declaration"), None)
        if variable is None:
            return []
        type_node = variable.child_by_field_name("type")
        type_name = self.text(type_node) if type_node is not None else ""
        fields: List[Member] = []
        for declarator in variable.named_children:
            if declarator.type != "variable_declarator":
                continue
            fields.append(
                Member(
                    kind="field",
                    name=self.identifier(declarator),
                    type=type_name,
                    accessibility=accessibility or "private",
                    initializer=self.initializer(declarator),
                    annotations=annotations,
                    is_static="static" in modifiers or "const" in modifiers,
                )
            )
        return fields

    def property(self, node: Node) -> Member:
        accessibility, modifiers = self.modifiers(node)
        type_node = node.child_by_field_name("type")
        accessors = node.child_by_field_name("accessors")
        keywords = set()
        if accessors is not None:
            for accessor in accessors.named_children:
                if accessor.type != "accessor_declaration":
                    continue
                keyword = accessor.child_by_field_name("name")
                if keyword is not None:
                    keywords.add(self.text(keyword))
                else:
                    keywords.update(child.type for child in accessor.children if child.type in _ACCESSOR_KEYWORDS)
        else:
            keywords.add("get")
        return Member(
            kind="property",
            name=self.identifier(node),
            type=self.text(type_node) if type_node is not None else "",
            accessibility=accessibility or "private",
            annotations=self.annotations(node),
            has_getter="get" in keywords,
            has_setter=bool(keywords & {"set", "init"}),
            is_static="static" in modifiers,
        )

    def method(self, node: Node) -> Member:
        accessibility, modifiers = self.modifiers(node)
        returns = node.child_by_field_name("returns") or node.child_by_field_name("type")
        parameters = node.child_by_field_name("parameters")
        return Member(
            kind="method",
            name=self.identifier(node),
            type=self.text(returns) if returns is not None else "void",
            accessibility=accessibility or "private",
            annotations=self.annotations(node),
            parameters=tuple(self.parameters(parameters)) if parameters is not None else (),
            has_getter=False,
            has_setter=False,
            is_static="static" in modifiers,
        )

    def parameters(self, node: Node) -> Iterator[Parameter]:
        for child in node.named_children:
            if child.type != "parameter":
                continue
            type_node = child.child_by_field_name("type")
            yield Parameter(
                name=self.identifier(child),
                type=self.text(type_node) if type_node is not None else "",
            )

    def identifier(self, node: Node) -> str:
        name_node = node.child_by_field_name("name")
        if name_node is None:
            name_node = next((child for child in node.named_children if child.type == "identifier"), None)
        return self.text(name_node) if name_node is not None else ""

    def initializer(self, declarator: Node) -> str:
        for child in declarator.children:
            if child.type == "equals_value_clause" or child.type == "=":
                return self.source_bytes[child.start_byte : declarator.end_byte].decode("utf-8", errors="ignore")
        return ""

    def annotations(self, node: Node) -> Tuple[Annotation, ...]:
        annotations: List[Annotation] = []
        for attribute_list in node.children:
            if attribute_list.type != "attribute_list":
                continue
            if any(child.type == "attribute_target_specifier" for child in attribute_list.named_children):
                continue
            for attribute in attribute_list.named_children:
                if attribute.type == "attribute":
                    annotations.append(self.annotation(attribute))
        return tuple(annotations)

    def annotation(self, node: Node) -> Annotation:
        name_node = node.child_by_field_name("name")
        if name_node is None:
            name_node = node.named_children[0]
        written = self.text(name_node).strip()
        argument_list = next(
            (child for child in node.named_children if child.type == "attribute_argument_list"), None
        )
        arguments: List[Any] = []
        named = {}
        argument_text = ""
        if argument_list is not None:
            argument_text = self.text(argument_list).strip()[1:-1].strip()
            for argument in argument_list.named_children:
                if argument.type != "attribute_argument":
                    continue
                key, value = self.argument(argument)
                if key:
                    named[key] = value
                else:
                    arguments.append(value)
        return Annotation(
            name=annotation_short_name(written),
            qualified_name=written,
            arguments=tuple(arguments),
            named=named,
            argument_text=argument_text,
        )

    def argument(self, node: Node) -> Tuple[str, Any]:
        children = node.named_children
        if children and children[0].type in {"name_equals", "name_colon"}:
            key = self.text(children[0]).rstrip("=:").strip()
            return key, self.literal(children[-1])
        has_key = any(child.type in {"=", ":"} for child in node.children)
        if has_key and len(children) >= 2:
            return self.text(children[0]), self.literal(children[-1])
        return "", self.literal(children[-1]) if children else None

    def literal(self, node: Node) -> Any:
        """Decode a constant expression; anything else is kept as written."""
        text = self.text(node).strip()
        kind = node.type
        if kind == "boolean_literal":
            return text == "true"
        if kind == "null_literal":
            return None
        if kind == "integer_literal":
            return _integer(text)
        if kind == "real_literal":
            return _real(text)
        if kind == "string_literal":
            return _string(text)
        if kind == "verbatim_string_literal":
            return text[2:-1].replace('""', '"')
        if kind == "prefix_unary_expression" and text.startswith("-"):
            operand = self.literal(node.named_children[-1])
            if isinstance(operand, (int, float)) and not isinstance(operand, bool):
                return -operand
            return text
        if kind in {"array_creation_expression", "implicit_array_creation_expression"}:
            initializer = next(
                (child for child in node.named_children if child.type == "initializer_expression"), None
            )
            if initializer is None:
                return []
            return [self.literal(child) for child in initializer.named_children if child.type != "comment"]
        if kind == "parenthesized_expression" and node.named_children:
            return self.literal(node.named_children[0])
        return text


def _integer(text: str) -> Any:
    digits = text.rstrip("uUlL").replace("_", "")
    try:
        return int(digits, 0)
    except ValueError:
        return text


def _real(text: str) -> Any:
    digits = text.rstrip("fFdDmM").replace("_", "")
    try:
        return float(digits)
    except ValueError:
        return text


def _string(text: str) -> str:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text[1:-1] if len(text) >= 2 else text


def _relative(file_path: Path, root: Path) -> str:
    if root.is_dir():
        return file_path.relative_to(root).as_posix()
    return file_path.name


def parse_sources(sources: Sequence[str] | Iterable[str]) -> Snapshot:
    """Parse in-memory C# texts into one snapshot, in the given order."""
    source = CSharpSource()
    declarations: List[Declaration] = []
    for index, text in enumerate(sources):
        declarations.extend(source.parse(text, origin=f"<source {index}>"))
    return Snapshot(declarations=declarations, origin="<memory>")


__all__ = ["CSharpSource", "parse_sources"]
