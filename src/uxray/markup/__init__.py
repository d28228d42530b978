"""Markup domain: element model and the tree-sitter front end."""

from uxray.markup.elements import (
    Attribute,
    Document,
    ElementNode,
    Expression,
    Fragment,
    Node,
    TextNode,
)
from uxray.markup.parser import (
    SUPPORTED_EXTENSIONS,
    MarkupParseError,
    parse_file,
    parse_source,
)

__all__ = [
    "SUPPORTED_EXTENSIONS",
    "Attribute",
    "Document",
    "ElementNode",
    "Expression",
    "Fragment",
    "MarkupParseError",
    "Node",
    "TextNode",
    "parse_file",
    "parse_source",
]
