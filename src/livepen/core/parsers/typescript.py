"""TypeScript / JavaScript / JSX parser adapter using tree-sitter.

Converts the tree-sitter concrete syntax tree into :class:`ASTNode` values
with 1-based lines and character columns.  Anonymous tokens are folded into
their parent's ``tokens`` tuple so declaration kinds (``const``/``let``/
``var``) and modifiers (``static``, ``async``) survive the conversion.
"""

from __future__ import annotations

import logging

import tree_sitter_javascript as tsjavascript
import tree_sitter_typescript as tstypescript
from tree_sitter import Language, Node, Parser, TreeCursor

from livepen.config.dialects import Dialect
from livepen.core.parsers.base import (
    ASTNode,
    ParsedUnit,
    ParserAdapter,
    Span,
    is_incomplete_source,
)
from livepen.errors import SourceSyntaxError

logger = logging.getLogger(__name__)

TS_LANGUAGE = Language(tstypescript.language_typescript())
TSX_LANGUAGE = Language(tstypescript.language_tsx())
JS_LANGUAGE = Language(tsjavascript.language())

_GRAMMAR_MAP: dict[str, Language] = {
    "typescript": TS_LANGUAGE,
    "tsx": TSX_LANGUAGE,
    "javascript": JS_LANGUAGE,
}

_DIALECT_GRAMMAR: dict[Dialect, str] = {
    Dialect.PLAIN_SCRIPT: "javascript",
    Dialect.TYPED_SCRIPT: "typescript",
    Dialect.JSX_COMPONENT: "tsx",
}


class TypeScriptParser(ParserAdapter):
    """Parse TypeScript, TSX, or JavaScript source via tree-sitter.

    Args:
        dialect: The dialect reported on the resulting :class:`ParsedUnit`.
        grammar: One of ``"typescript"``, ``"tsx"``, or ``"javascript"``;
            defaults to the grammar registered for *dialect*.
        recover_errors: When ``False``, any syntax error raises
            :class:`SourceSyntaxError` instead of yielding a recovered tree.
    """

    def __init__(
        self,
        dialect: Dialect = Dialect.PLAIN_SCRIPT,
        grammar: str | None = None,
        recover_errors: bool = True,
    ) -> None:
        grammar = grammar or _DIALECT_GRAMMAR.get(dialect, "javascript")
        if grammar not in _GRAMMAR_MAP:
            raise ValueError(
                f"Unknown grammar {grammar!r}. "
                f"Expected one of: {', '.join(sorted(_GRAMMAR_MAP))}"
            )
        self.dialect = dialect
        self.grammar = grammar
        self.recover_errors = recover_errors
        self._parser = Parser(_GRAMMAR_MAP[grammar])

    def parse(self, source: str) -> ParsedUnit | None:
        if is_incomplete_source(source):
            logger.debug("Skipping parse: blank or incomplete trailing expression")
            return None
        root = self.parse_block(source)
        return ParsedUnit(root=root, source=source, dialect=self.dialect, script=root)

    def parse_block(
        self, source: str, line_offset: int = 0, first_line_column: int = 0
    ) -> ASTNode:
        """Parse *source* unconditionally and return the converted root node.

        *line_offset* and *first_line_column* place a block embedded in a
        larger document: every line moves down by *line_offset* and columns
        on the block's first line move right by *first_line_column*.
        """
        encoded = source.encode("utf-8")
        tree = self._parser.parse(encoded)
        root = tree.root_node

        if root.has_error and not self.recover_errors:
            line, column = _first_error_point(root)
            raise SourceSyntaxError(
                "Syntax error",
                line + 1 + line_offset,
                column + (first_line_column if line == 0 else 0),
            )

        converter = _Converter(encoded, line_offset, first_line_column)
        return converter.convert(tree.walk())


class _Converter:
    """Turns a tree-sitter cursor walk into :class:`ASTNode` values."""

    def __init__(
        self, encoded: bytes, line_offset: int = 0, first_line_column: int = 0
    ) -> None:
        self._ascii = encoded.isascii()
        self._lines = encoded.split(b"\n") if not self._ascii else []
        self._line_offset = line_offset
        self._first_line_column = first_line_column

    def convert(self, cursor: TreeCursor) -> ASTNode:
        """Convert the cursor's subtree; the cursor ends where it started."""
        root = self._start(cursor.node)
        # (tree-sitter node, converted node, anonymous tokens seen so far)
        stack: list[tuple[Node, ASTNode, list[str]]] = [(cursor.node, root, [])]
        if not cursor.goto_first_child():
            self._finish(*stack.pop())
            return root

        while stack:
            child = cursor.node
            _node, parent, tokens = stack[-1]
            if child.is_named:
                converted = self._start(child)
                parent.children.append(converted)
                field_name = cursor.field_name
                if field_name:
                    parent.fields.setdefault(field_name, []).append(converted)
                if cursor.goto_first_child():
                    stack.append((child, converted, []))
                    continue
                self._finish(child, converted, [])
            elif child.type.isidentifier():
                tokens.append(child.type)

            while not cursor.goto_next_sibling():
                cursor.goto_parent()
                self._finish(*stack.pop())
                if not stack:
                    break

        return root

    def _start(self, node: Node) -> ASTNode:
        return ASTNode(kind=node.type, span=self._span(node), missing=node.is_missing)

    @staticmethod
    def _finish(node: Node, result: ASTNode, tokens: list[str]) -> None:
        result.tokens = tuple(tokens)
        if not result.children and node.text is not None:
            result.text = node.text.decode("utf-8", errors="replace")

    def _span(self, node: Node) -> Span:
        start_row, start_col = node.start_point
        end_row, end_col = node.end_point
        return Span(
            start_row + 1 + self._line_offset,
            self._column(start_row, start_col),
            end_row + 1 + self._line_offset,
            self._column(end_row, end_col),
        )

    def _column(self, row: int, byte_column: int) -> int:
        column = self._char_column(row, byte_column)
        return column + self._first_line_column if row == 0 else column

    def _char_column(self, row: int, byte_column: int) -> int:
        """tree-sitter reports byte columns; the editor counts characters."""
        if self._ascii or row >= len(self._lines):
            return byte_column
        return len(self._lines[row][:byte_column].decode("utf-8", errors="ignore"))


def _first_error_point(root: Node) -> tuple[int, int]:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node.start_point
        stack.extend(reversed(node.children))
    return root.start_point
