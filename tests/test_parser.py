"""Tests for uxray.markup.parser: tree-sitter TSX front end."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from uxray.markup.elements import ElementNode, Expression, Fragment
from uxray.markup.parser import MarkupParseError, parse_file, parse_source

if TYPE_CHECKING:
    from pathlib import Path


def _only_element(source: str) -> ElementNode:
    document = parse_source(source)
    assert len(document.children) == 1
    node = document.children[0]
    assert isinstance(node, ElementNode)
    return node


# ---------------------------------------------------------------------------
# Elements and attributes
# ---------------------------------------------------------------------------


class TestElements:
    """Tags, attributes and locations of parsed elements."""

    def test_self_closing_element(self) -> None:
        el = _only_element('const el = <img src="logo.png" />;\n')
        assert el.tag == "img"
        assert el.literal("src") == "logo.png"
        assert el.children == ()

    def test_location_is_one_based(self) -> None:
        el = _only_element('const el = <img src="logo.png" />;\n')
        assert el.line == 1
        assert el.column == 12

    def test_bare_attribute_has_no_value(self) -> None:
        el = _only_element('const el = <input id="email" required />;\n')
        attr = el.get_attribute("required")
        assert attr is not None
        assert attr.value is None

    def test_expression_attribute(self) -> None:
        el = _only_element("const el = <button tabIndex={0} onClick={go}>Go</button>;\n")
        tab = el.get_attribute("tabIndex")
        assert tab is not None
        assert isinstance(tab.value, Expression)
        assert tab.value.source == "{0}"
        assert el.literal("onClick") is None

    def test_hyphenated_attribute_names(self) -> None:
        el = _only_element('const el = <div aria-label="Menu" data-test-id="m" />;\n')
        assert el.attribute_names == ("aria-label", "data-test-id")

    def test_empty_string_attribute(self) -> None:
        el = _only_element('const el = <button aria-label="">x</button>;\n')
        assert el.literal("aria-label") == ""

    def test_attribute_entities_are_decoded(self) -> None:
        el = _only_element('const el = <a href="/" title="Terms &amp; Conditions">T</a>;\n')
        assert el.literal("title") == "Terms & Conditions"

    def test_component_and_member_tags_are_verbatim(self) -> None:
        document = parse_source(
            "const a = <Button />;\n"
            "const b = <Foo.Bar />;\n"
        )
        tags = [node.tag for node in document.children if isinstance(node, ElementNode)]
        assert tags == ["Button", "Foo.Bar"]


# ---------------------------------------------------------------------------
# Children
# ---------------------------------------------------------------------------


class TestChildren:
    """Text, nested elements, expressions and fragments."""

    def test_text_and_nested_elements(self) -> None:
        el = _only_element(
            "const el = (\n"
            "  <section>\n"
            "    <h2>Title</h2>\n"
            "    <p>Body</p>\n"
            "  </section>\n"
            ");\n"
        )
        assert [c.tag for c in el.child_elements] == ["h2", "p"]
        assert el.child_elements[0].text == "Title"

    def test_button_text(self) -> None:
        el = _only_element("const el = <button>×</button>;\n")
        assert el.text == "×"

    def test_expression_children_hold_nested_jsx(self) -> None:
        el = _only_element(
            "const el = <ul>{items.map((i) => <li key={i}>{i}</li>)}</ul>;\n"
        )
        expressions = [c for c in el.children if isinstance(c, Expression)]
        assert len(expressions) == 1
        nested = expressions[0].children
        assert len(nested) == 1
        assert isinstance(nested[0], ElementNode)
        assert nested[0].tag == "li"
        # Elements inside expressions are not direct element children.
        assert el.child_elements == ()

    def test_fragment(self) -> None:
        document = parse_source("const el = <><h1>A</h1><p>B</p></>;\n")
        assert len(document.children) == 1
        fragment = document.children[0]
        assert isinstance(fragment, Fragment)
        tags = [c.tag for c in fragment.children if isinstance(c, ElementNode)]
        assert tags == ["h1", "p"]


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


class TestDocuments:
    """Whole-file parsing."""

    def test_top_level_trees_in_source_order(self) -> None:
        document = parse_source(
            "export function A() { return <header>A</header>; }\n"
            "export function B() { return <footer>B</footer>; }\n"
        )
        tags = [n.tag for n in document.children if isinstance(n, ElementNode)]
        assert tags == ["header", "footer"]

    def test_typescript_syntax(self) -> None:
        document = parse_source(
            "import React from 'react';\n"
            "interface Props { title: string }\n"
            "export function Card({ title }: Props) {\n"
            "  const n: number = 1;\n"
            "  return <h1>{title}</h1>;\n"
            "}\n"
        )
        assert len(document.children) == 1

    def test_no_markup(self) -> None:
        assert parse_source("export const x = 1;\n").children == ()

    def test_empty_source(self) -> None:
        assert parse_source("").children == ()


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TestErrors:
    """Unreadable and malformed input."""

    def test_syntax_error(self) -> None:
        with pytest.raises(MarkupParseError, match="Syntax error") as exc_info:
            parse_source("export function Broken() {\n  return <div\n")
        assert exc_info.value.line is not None

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(MarkupParseError, match="File not found"):
            parse_file(tmp_path / "nope.tsx")

    def test_parse_file_returns_source(self, tmp_path: Path) -> None:
        path = tmp_path / "Logo.tsx"
        source = 'export const Logo = () => <img src="logo.png" alt="Logo" />;\n'
        path.write_text(source, encoding="utf-8")
        document, text = parse_file(path)
        assert text == source
        assert len(document.children) == 1

    def test_parse_file_error_names_file(self, tmp_path: Path) -> None:
        path = tmp_path / "Broken.tsx"
        path.write_text("const = = <div\n", encoding="utf-8")
        with pytest.raises(MarkupParseError, match="Broken.tsx"):
            parse_file(path)


# ---------------------------------------------------------------------------
# Spreads, locations and depth
# ---------------------------------------------------------------------------


class TestSpreadAttributes:
    """``{...expr}`` attributes on an opening tag."""

    def test_spread_is_not_a_named_attribute(self) -> None:
        el = _only_element('const el = <div {...props} id="x" />;\n')
        assert el.attribute_names == ("id",)
        assert len(el.spreads) == 1
        assert el.spreads[0].source == "{...props}"

    def test_markup_inside_spread_is_kept(self) -> None:
        el = _only_element('const el = <div {...{ icon: <img src="a.png" /> }}>x</div>;\n')
        nested = el.spreads[0].children
        assert len(nested) == 1
        assert isinstance(nested[0], ElementNode)
        assert nested[0].tag == "img"


class TestLocations:
    """Columns are counted in characters."""

    def test_non_ascii_text_before_element(self) -> None:
        document = parse_source("const s = 'ééé'; const x = <img src='a' />;\n")
        el = document.children[0]
        assert isinstance(el, ElementNode)
        assert el.location == "1:28"

    def test_syntax_error_column_in_characters(self) -> None:
        with pytest.raises(MarkupParseError) as exc_info:
            parse_source("const s = 'ééé'; const x = <div\n")
        assert exc_info.value.column is not None
        assert exc_info.value.column <= len("const s = 'ééé'; const x = <div") + 1


class TestDeepNesting:
    """Nesting depth is not bounded by the interpreter's recursion limit."""

    def test_thousands_of_nested_elements(self) -> None:
        depth = 3000
        source = "const el = " + "<div>" * depth + "x" + "</div>" * depth + ";\n"
        document = parse_source(source)
        node = document.children[0]
        levels = 0
        while isinstance(node, ElementNode):
            levels += 1
            node = node.children[0]
        assert levels == depth
