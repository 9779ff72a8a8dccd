"""Tests for the tree-sitter parser adapter and the syntax-tree data model."""

from __future__ import annotations

import pytest

from livepen.config.dialects import Dialect
from livepen.core.parsers import TemplateComponentParser, TypeScriptParser, get_parser
from livepen.core.parsers.base import ASTNode, Position, Span, is_incomplete_source
from livepen.errors import SourceSyntaxError

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def js_parser() -> TypeScriptParser:
    return TypeScriptParser(dialect=Dialect.PLAIN_SCRIPT)


@pytest.fixture
def ts_parser() -> TypeScriptParser:
    return TypeScriptParser(dialect=Dialect.TYPED_SCRIPT)


def _first(root: ASTNode, kind: str) -> ASTNode:
    for node, _parent in root.walk():
        if node.kind == kind:
            return node
    raise AssertionError(f"no {kind} node in tree")


def _kinds(root: ASTNode) -> list[str]:
    return [node.kind for node, _parent in root.walk()]


# ---------------------------------------------------------------------------
# 1. Basic parsing
# ---------------------------------------------------------------------------


def test_parse_returns_unit(js_parser: TypeScriptParser) -> None:
    unit = js_parser.parse("const x = 1;")

    assert unit is not None
    assert unit.root.kind == "program"
    assert unit.script is unit.root
    assert unit.template is None
    assert unit.dialect is Dialect.PLAIN_SCRIPT
    assert unit.source == "const x = 1;"


def test_declaration_keyword_kept_as_token(js_parser: TypeScriptParser) -> None:
    unit = js_parser.parse("const x = 1;")
    decl = _first(unit.root, "lexical_declaration")

    assert "const" in decl.tokens
    declarator = decl.children[0]
    assert declarator.kind == "variable_declarator"
    assert declarator.field("name").text == "x"
    assert declarator.field("value").kind == "number"


def test_spans_are_one_based_lines(js_parser: TypeScriptParser) -> None:
    unit = js_parser.parse("const a = 1;\nlet b = 2;\n")
    decls = [n for n, _p in unit.root.walk() if n.kind == "lexical_declaration"]

    assert decls[0].span.start == Position(1, 0)
    assert decls[1].span.start == Position(2, 0)
    assert decls[1].span.end == Position(2, 10)


def test_member_expression_fields(js_parser: TypeScriptParser) -> None:
    unit = js_parser.parse("user.name;")
    member = _first(unit.root, "member_expression")

    assert member.field("object").text == "user"
    assert member.field("property").kind == "property_identifier"
    assert member.field("property").text == "name"


def test_columns_count_characters_not_bytes(js_parser: TypeScriptParser) -> None:
    unit = js_parser.parse('const s = "é"; foo.bar;')
    member = _first(unit.root, "member_expression")

    assert member.span.start_column == 15
    assert member.field("property").span.end_column == 22


def test_parse_block_offsets(js_parser: TypeScriptParser) -> None:
    root = js_parser.parse_block("a.b;\nc.d;", line_offset=4, first_line_column=8)
    first, second = [n for n, _p in root.walk() if n.kind == "member_expression"]

    assert first.span.start == Position(5, 8)
    assert first.span.end == Position(5, 11)
    assert second.span.start == Position(6, 0)
    assert second.span.end == Position(6, 3)


def test_deep_nesting_converts(js_parser: TypeScriptParser) -> None:
    unit = js_parser.parse("x = " + "[" * 5000 + "]" * 5000 + ";")
    arrays = [n for n, _p in unit.root.walk() if n.kind == "array"]

    assert len(arrays) == 5000
    assert arrays[-1].span.start == Position(1, 5003)
    assert arrays[-1].children == []


def test_typescript_grammar_for_typed_dialect(ts_parser: TypeScriptParser) -> None:
    unit = ts_parser.parse("interface User { name: string }")

    assert unit.dialect is Dialect.TYPED_SCRIPT
    assert "interface_declaration" in _kinds(unit.root)


def test_jsx_in_plain_grammar(js_parser: TypeScriptParser) -> None:
    unit = js_parser.parse('const el = <div className="a" />;')

    assert "jsx_self_closing_element" in _kinds(unit.root)
    assert "jsx_attribute" in _kinds(unit.root)


def test_jsx_component_accepts_type_annotations() -> None:
    parser = TypeScriptParser(dialect=Dialect.JSX_COMPONENT)
    unit = parser.parse('const el: JSX.Element = <div className="a" />;')
    kinds = _kinds(unit.root)

    assert parser.grammar == "tsx"
    assert "jsx_self_closing_element" in kinds
    assert "type_annotation" in kinds
    assert "ERROR" not in kinds


def test_unknown_grammar_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown grammar"):
        TypeScriptParser(grammar="cobol")


# ---------------------------------------------------------------------------
# 2. Incomplete input and syntax errors
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("source", ["", "   \n\t", "user.", "foo(", "items[", "a.b.  \n"])
def test_incomplete_source_yields_none(js_parser: TypeScriptParser, source: str) -> None:
    assert is_incomplete_source(source)
    assert js_parser.parse(source) is None


def test_complete_source_is_not_incomplete() -> None:
    assert not is_incomplete_source("foo()")
    assert not is_incomplete_source("items[0]")


def test_syntax_error_recovered_by_default(js_parser: TypeScriptParser) -> None:
    unit = js_parser.parse("const = ;\nlet ok = 1;")

    assert unit is not None
    assert "lexical_declaration" in _kinds(unit.root)


def test_syntax_error_raises_without_recovery() -> None:
    parser = TypeScriptParser(recover_errors=False)

    with pytest.raises(SourceSyntaxError) as exc_info:
        parser.parse("let ok = 1;\nconst = ;")

    assert exc_info.value.line == 2


def test_block_error_position_uses_offsets() -> None:
    parser = TypeScriptParser(recover_errors=False)

    with pytest.raises(SourceSyntaxError) as exc_info:
        parser.parse_block("let ok = 1;\nconst = ;", line_offset=3)

    assert exc_info.value.line == 5


def test_valid_source_without_recovery() -> None:
    parser = TypeScriptParser(recover_errors=False)
    assert parser.parse("let ok = 1;") is not None


# ---------------------------------------------------------------------------
# 3. get_parser
# ---------------------------------------------------------------------------


def test_get_parser_dispatch() -> None:
    assert isinstance(get_parser("vue"), TemplateComponentParser)
    assert isinstance(get_parser(Dialect.TYPED_SCRIPT), TypeScriptParser)
    assert get_parser("ts").grammar == "typescript"
    assert get_parser("react").grammar == "tsx"
    assert get_parser("js").grammar == "javascript"


def test_get_parser_passes_recovery_flag() -> None:
    assert get_parser("js", recover_errors=False).recover_errors is False


# ---------------------------------------------------------------------------
# 4. Data model
# ---------------------------------------------------------------------------


class TestSpan:
    def test_single_line_bounds_inclusive(self) -> None:
        span = Span(2, 4, 2, 8)
        assert span.contains(Position(2, 4))
        assert span.contains(Position(2, 8))
        assert not span.contains(Position(2, 3))
        assert not span.contains(Position(2, 9))

    def test_interior_lines_ignore_columns(self) -> None:
        span = Span(1, 10, 3, 2)
        assert span.contains(Position(2, 0))
        assert span.contains(Position(2, 500))
        assert not span.contains(Position(1, 9))
        assert not span.contains(Position(3, 3))
        assert not span.contains(Position(4, 0))

    def test_size_prefers_fewer_lines(self) -> None:
        assert Span(1, 0, 1, 50).size < Span(1, 0, 2, 0).size


class TestASTNode:
    def test_walk_is_preorder_with_parents(self) -> None:
        leaf = ASTNode(kind="identifier", span=Span(1, 0, 1, 1), text="a")
        mid = ASTNode(kind="expression_statement", span=Span(1, 0, 1, 2), children=[leaf])
        other = ASTNode(kind="empty_statement", span=Span(1, 3, 1, 4))
        root = ASTNode(kind="program", span=Span(1, 0, 1, 4), children=[mid, other])

        pairs = list(root.walk())

        assert [n.kind for n, _p in pairs] == [
            "program",
            "expression_statement",
            "identifier",
            "empty_statement",
        ]
        assert pairs[0][1] is None
        assert pairs[2][1] is mid
        assert pairs[3][1] is root

    def test_field_accessors(self) -> None:
        a = ASTNode(kind="identifier", span=Span(1, 0, 1, 1), text="a")
        b = ASTNode(kind="identifier", span=Span(1, 2, 1, 3), text="b")
        node = ASTNode(kind="x", span=Span(1, 0, 1, 3), fields={"arg": [a, b]})

        assert node.field("arg") is a
        assert node.field_all("arg") == [a, b]
        assert node.field("missing") is None
        assert node.field_all("missing") == []

    def test_positions_are_ordered(self) -> None:
        assert Position(1, 9) < Position(2, 0) < Position(2, 1)
