"""Markup front end: tree-sitter TSX parsing into the element model."""

from __future__ import annotations

import html
import logging
from typing import TYPE_CHECKING

from tree_sitter import Language, Parser

from uxray.markup.elements import (
    Attribute,
    Document,
    ElementNode,
    Expression,
    Fragment,
    TextNode,
)

if TYPE_CHECKING:
    from pathlib import Path

    from tree_sitter import Node as TSNode

    from uxray.markup.elements import Node

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Component files of every flavour go through the TSX grammar, which accepts
# plain JavaScript, TypeScript and JSX alike.
SUPPORTED_EXTENSIONS: frozenset[str] = frozenset({".tsx", ".jsx", ".ts", ".js", ".mjs", ".cjs"})

_ELEMENT_TYPES: frozenset[str] = frozenset({"jsx_element", "jsx_self_closing_element"})
_FRAGMENT_TYPES: frozenset[str] = frozenset({"jsx_fragment"})  # older grammars only
_JSX_TYPES: frozenset[str] = _ELEMENT_TYPES | _FRAGMENT_TYPES
# Children that may hold markup of their own.
_CONTAINER_TYPES: frozenset[str] = _JSX_TYPES | {"jsx_expression"}
# A bare ``jsx_expression`` on an opening tag is a ``{...spread}`` attribute.
_ATTRIBUTE_TYPES: frozenset[str] = frozenset({"jsx_attribute", "jsx_expression"})

# Loaded lazily; the grammar wheel is only touched on first parse.
_LANGUAGE_CACHE: dict[str, Language] = {}


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class MarkupParseError(ValueError):
    """Raised when a source file cannot be read or parsed."""

    def __init__(
        self, message: str, *, line: int | None = None, column: int | None = None
    ) -> None:
        super().__init__(message)
        self.line = line
        self.column = column


# ---------------------------------------------------------------------------
# Language loading
# ---------------------------------------------------------------------------


def get_language() -> Language:
    """Return the TSX language, loading the grammar on first use."""
    language = _LANGUAGE_CACHE.get("tsx")
    if language is None:
        import tree_sitter_typescript as tstypescript

        language = Language(tstypescript.language_tsx())
        _LANGUAGE_CACHE["tsx"] = language
    return language


# ---------------------------------------------------------------------------
# Tree conversion
# ---------------------------------------------------------------------------


def _text(node: TSNode) -> str:
    return node.text.decode("utf-8") if node.text else ""


def _char_column(data: bytes, node: TSNode) -> int:
    """Return the 1-based column of *node* counted in characters, not bytes."""
    line_start = node.start_byte - node.start_point.column
    return len(data[line_start : node.start_byte].decode("utf-8", errors="replace")) + 1


def _first_error(root: TSNode) -> TSNode | None:
    """Return the first ERROR or MISSING node in document order."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_error or node.is_missing:
            return node
        if node.has_error:
            stack.extend(reversed(node.children))
    return None


def _outermost_jsx(node: TSNode) -> list[TSNode]:
    """Find the outermost JSX trees below *node*, in source order."""
    found: list[TSNode] = []
    stack = list(reversed(node.children))
    while stack:
        current = stack.pop()
        if current.type in _JSX_TYPES:
            found.append(current)
            continue
        stack.extend(reversed(current.children))
    return found


def _opening_tag(node: TSNode) -> TSNode | None:
    open_tag = node.child_by_field_name("open_tag")
    if open_tag is not None:
        return open_tag
    for child in node.children:
        if child.type == "jsx_opening_element":
            return child
    return None


def _attribute_parts(node: TSNode) -> tuple[TSNode, TSNode | None]:
    parts = [c for c in node.named_children if c.type != "comment"]
    return parts[0], (parts[1] if len(parts) > 1 else None)


def _tag_node(node: TSNode) -> TSNode | None:
    """The node holding name and attributes; ``None`` for grammar fragments."""
    if node.type == "jsx_self_closing_element":
        return node
    if node.type in _FRAGMENT_TYPES:
        return None
    return _opening_tag(node)


def _dependencies(node: TSNode) -> list[TSNode]:
    """Nodes whose converted form is needed to build *node*."""
    if node.type == "jsx_expression":
        return _outermost_jsx(node)
    if node.type == "jsx_attribute":
        _, value_node = _attribute_parts(node)
        if value_node is not None and value_node.type in _CONTAINER_TYPES:
            return [value_node]
        return []

    deps: list[TSNode] = []
    tag_node = _tag_node(node)
    if tag_node is not None:
        deps.extend(c for c in tag_node.named_children if c.type in _ATTRIBUTE_TYPES)
    if node.type != "jsx_self_closing_element":
        deps.extend(c for c in node.named_children if c.type in _CONTAINER_TYPES)
    return deps


class _TreeConverter:
    """Builds the element model from a syntax tree without recursion.

    Each node goes on an explicit stack twice: first to schedule the nodes
    it is built from, then to build it once their results are in place.
    Markup nesting depth is therefore not limited by the interpreter stack.
    """

    def __init__(self, data: bytes) -> None:
        self._data = data
        # Results keyed by tree-sitter node id.
        self._elements: dict[int, Node] = {}
        self._expressions: dict[int, Expression] = {}
        self._attributes: dict[int, Attribute] = {}

    def convert(self, roots: list[TSNode]) -> tuple[Node, ...]:
        stack: list[tuple[TSNode, bool]] = [(root, False) for root in reversed(roots)]
        while stack:
            node, ready = stack.pop()
            if ready:
                self._build(node)
                continue
            stack.append((node, True))
            stack.extend((dep, False) for dep in _dependencies(node))
        return tuple(self._node(root) for root in roots)

    def _node(self, ts_node: TSNode) -> Node:
        if ts_node.type == "jsx_expression":
            return self._expressions[ts_node.id]
        return self._elements[ts_node.id]

    def _build(self, node: TSNode) -> None:
        if node.type == "jsx_expression":
            self._expressions[node.id] = Expression(
                source=_text(node),
                children=tuple(self._node(c) for c in _outermost_jsx(node)),
            )
        elif node.type == "jsx_attribute":
            self._attributes[node.id] = self._build_attribute(node)
        else:
            self._elements[node.id] = self._build_element(node)

    def _build_attribute(self, node: TSNode) -> Attribute:
        name_node, value_node = _attribute_parts(node)
        name = _text(name_node)
        if value_node is None:
            return Attribute(name=name)
        if value_node.type == "string":
            # JSX string attributes decode HTML entities but not backslash escapes.
            return Attribute(name=name, value=html.unescape(_text(value_node)[1:-1]))
        if value_node.type == "jsx_expression":
            return Attribute(name=name, value=self._expressions[value_node.id])
        if value_node.type in _JSX_TYPES:
            return Attribute(
                name=name,
                value=Expression(source=_text(value_node), children=(self._node(value_node),)),
            )
        return Attribute(name=name, value=Expression(source=_text(value_node)))

    def _children(self, node: TSNode) -> tuple[Node, ...]:
        children: list[Node] = []
        for child in node.named_children:
            if child.type == "jsx_text":
                children.append(TextNode(_text(child)))
            elif child.type == "html_character_reference":
                children.append(TextNode(html.unescape(_text(child))))
            elif child.type in _CONTAINER_TYPES:
                children.append(self._node(child))
        return tuple(children)

    def _build_element(self, node: TSNode) -> Node:
        children: tuple[Node, ...] = ()
        if node.type != "jsx_self_closing_element":
            children = self._children(node)
        tag_node = _tag_node(node)
        name_node = tag_node.child_by_field_name("name") if tag_node is not None else None
        if tag_node is None or name_node is None:
            # ``<>...</>``, with or without a dedicated fragment node.
            return Fragment(children=children)

        attributes: list[Attribute] = []
        spreads: list[Expression] = []
        for child in tag_node.named_children:
            if child.type == "jsx_attribute":
                attributes.append(self._attributes[child.id])
            elif child.type == "jsx_expression":
                spreads.append(self._expressions[child.id])

        # tree-sitter rows are 0-based; locations are 1-based.
        return ElementNode(
            tag=_text(name_node),
            attributes=tuple(attributes),
            children=children,
            line=node.start_point.row + 1,
            column=_char_column(self._data, node),
            spreads=tuple(spreads),
        )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_source(source: str) -> Document:
    """Parse component source text into a :class:`Document`.

    Raises
    ------
    MarkupParseError
        When the syntax tree contains error or missing nodes.  There is no
        partial result for a file that does not parse cleanly.
    """
    data = source.encode("utf-8")
    parser = Parser(get_language())
    tree = parser.parse(data)
    root = tree.root_node

    if root.has_error:
        bad = _first_error(root)
        line = bad.start_point.row + 1 if bad is not None else None
        column = _char_column(data, bad) if bad is not None else None
        where = f" at line {line}, column {column}" if line is not None else ""
        msg = f"Syntax error{where}"
        raise MarkupParseError(msg, line=line, column=column)

    document = Document(children=_TreeConverter(data).convert(_outermost_jsx(root)))
    logger.debug("Parsed %d top-level element tree(s)", len(document.children))
    return document


def parse_file(path: Path) -> tuple[Document, str]:
    """Read and parse *path*; return the document and its source text."""
    try:
        source = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        msg = f"File not found: {path}"
        raise MarkupParseError(msg) from exc
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"Cannot read {path}: {exc}"
        raise MarkupParseError(msg) from exc

    if path.suffix and path.suffix not in SUPPORTED_EXTENSIONS:
        logger.debug("Parsing %s with the TSX grammar despite unknown extension", path)

    try:
        document = parse_source(source)
    except MarkupParseError as exc:
        msg = f"{path}: {exc}"
        raise MarkupParseError(msg, line=exc.line, column=exc.column) from exc
    return document, source
