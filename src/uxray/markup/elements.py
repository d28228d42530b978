"""Element model: a read-only view of the markup tree produced by the parser."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Expression:
    """An embedded ``{...}`` expression.

    ``children`` holds the element trees written inside the expression
    (``{items.map((i) => <li>{i}</li>)}``) in source order.  The expression
    itself is opaque: rules only ever see that a value *is* an expression.
    """

    source: str
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class TextNode:
    """A run of literal text directly inside an element."""

    text: str


@dataclass(frozen=True)
class Fragment:
    """A ``<>...</>`` grouping; walked through but never checked."""

    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class Attribute:
    """One attribute as written on the opening tag.

    ``value`` is the literal string for ``name="..."``, an
    :class:`Expression` for ``name={...}``, or ``None`` for a bare
    attribute such as ``required``.
    """

    name: str
    value: str | Expression | None = None

    @property
    def is_literal(self) -> bool:
        return isinstance(self.value, str)

    @property
    def literal(self) -> str | None:
        """The string-literal value, or ``None`` for expressions and bare attributes."""
        return self.value if isinstance(self.value, str) else None


@dataclass(frozen=True)
class ElementNode:
    """A single markup element.

    The tag name is kept verbatim.  Lowercase names are HTML elements;
    capitalised names (``Button``) are components and never match an HTML
    tag filter.  Member and namespaced names (``Foo.Bar``, ``svg:rect``) are
    skipped by every rule.

    ``spreads`` holds the ``{...expr}`` spread attributes, which carry no
    name and are never inspected by rules.
    """

    tag: str
    attributes: tuple[Attribute, ...] = ()
    children: tuple[Node, ...] = ()
    line: int | None = None  # 1-based
    column: int | None = None  # 1-based, in characters
    spreads: tuple[Expression, ...] = ()

    def get_attribute(self, name: str) -> Attribute | None:
        """Return the first attribute called *name* (case-sensitive), or ``None``."""
        for attr in self.attributes:
            if attr.name == name:
                return attr
        return None

    def has_attribute(self, *names: str) -> bool:
        """Return True if any of *names* is present, whatever its value."""
        return any(attr.name in names for attr in self.attributes)

    def literal(self, name: str) -> str | None:
        attr = self.get_attribute(name)
        return attr.literal if attr is not None else None

    @property
    def attribute_names(self) -> tuple[str, ...]:
        return tuple(attr.name for attr in self.attributes)

    @property
    def aria_attributes(self) -> tuple[Attribute, ...]:
        """``aria-*`` attributes in declaration order."""
        return tuple(attr for attr in self.attributes if attr.name.startswith("aria-"))

    @property
    def text(self) -> str:
        """Direct text children joined and trimmed.

        Text nested in child elements or expressions does not count.
        """
        return "".join(c.text for c in self.children if isinstance(c, TextNode)).strip()

    @property
    def child_elements(self) -> tuple[ElementNode, ...]:
        return tuple(c for c in self.children if isinstance(c, ElementNode))

    def has_child_tag(self, *tags: str) -> bool:
        """Return True if a direct child element has one of *tags*."""
        return any(child.tag in tags for child in self.child_elements)

    @property
    def location(self) -> str:
        if self.line is None:
            return ""
        if self.column is None:
            return str(self.line)
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class Document:
    """Root of one parsed file: its top-level element trees in source order."""

    children: tuple[Node, ...] = ()


Node = Union[ElementNode, TextNode, Expression, Fragment]
