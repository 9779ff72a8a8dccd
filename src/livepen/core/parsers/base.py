"""Base parser interface and the syntax-tree data model.

Every parser adapter turns ``(source, dialect)`` into a :class:`ParsedUnit`
whose nodes carry a kind tag, a 1-based line / 0-based column span, and
explicit child accessors.  The analysis stages only ever see these nodes,
never the underlying parser's objects.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass, field

from livepen.config.defaults import INCOMPLETE_TAIL_CHARS
from livepen.config.dialects import Dialect

# Node kinds grouped by the role the analysis stages care about.
IDENTIFIER_KINDS: frozenset[str] = frozenset(
    {
        "identifier",
        "property_identifier",
        "shorthand_property_identifier",
        "private_property_identifier",
        "type_identifier",
        "statement_identifier",
    }
)
MEMBER_KINDS: frozenset[str] = frozenset({"member_expression"})
VARIABLE_DECLARATION_KINDS: frozenset[str] = frozenset(
    {"lexical_declaration", "variable_declaration"}
)
FUNCTION_DECLARATION_KINDS: frozenset[str] = frozenset(
    {"function_declaration", "generator_function_declaration"}
)
FUNCTION_EXPRESSION_KINDS: frozenset[str] = frozenset(
    {"function_expression", "function", "arrow_function", "generator_function"}
)
CLASS_DECLARATION_KINDS: frozenset[str] = frozenset(
    {"class_declaration", "abstract_class_declaration"}
)
CLASS_EXPRESSION_KINDS: frozenset[str] = frozenset({"class"})
CALL_KINDS: frozenset[str] = frozenset({"call_expression", "new_expression"})
ROOT_KINDS: frozenset[str] = frozenset({"program", "component"})
JSX_KINDS: frozenset[str] = frozenset(
    {
        "jsx_element",
        "jsx_self_closing_element",
        "jsx_opening_element",
        "jsx_closing_element",
        "jsx_attribute",
        "jsx_namespace_name",
    }
)


@dataclass(frozen=True, order=True)
class Position:
    """A cursor position: 1-based line, 0-based column within the line."""

    line: int
    column: int


@dataclass(frozen=True)
class Span:
    """Source extent of a node."""

    start_line: int
    start_column: int
    end_line: int
    end_column: int

    @property
    def start(self) -> Position:
        return Position(self.start_line, self.start_column)

    @property
    def end(self) -> Position:
        return Position(self.end_line, self.end_column)

    @property
    def size(self) -> int:
        """Rough extent used to prefer smaller, more specific nodes."""
        return (self.end_line - self.start_line) * 1000 + (
            self.end_column - self.start_column
        )

    def contains(self, position: Position) -> bool:
        """Line range is inclusive; columns only bound the boundary lines."""
        if position.line < self.start_line or position.line > self.end_line:
            return False
        if position.line == self.start_line and position.column < self.start_column:
            return False
        if position.line == self.end_line and position.column > self.end_column:
            return False
        return True


@dataclass(eq=False)
class ASTNode:
    """A tagged syntax node.

    ``children`` holds the named children in source order; ``fields`` maps a
    grammar field name (``"name"``, ``"object"``, ``"property"``...) to the
    children bound to it.  ``tokens`` lists the anonymous keyword tokens the
    parser saw directly under this node (``"const"``, ``"static"``...).
    Leaf nodes keep their source ``text``.
    """

    kind: str
    span: Span
    text: str = ""
    tokens: tuple[str, ...] = ()
    missing: bool = False
    children: list[ASTNode] = field(default_factory=list)
    fields: dict[str, list[ASTNode]] = field(default_factory=dict)

    def field(self, name: str) -> ASTNode | None:
        nodes = self.fields.get(name)
        return nodes[0] if nodes else None

    def field_all(self, name: str) -> list[ASTNode]:
        return list(self.fields.get(name, ()))

    def iter_children(self) -> Iterator[ASTNode]:
        return iter(self.children)

    def walk(self) -> Iterator[tuple[ASTNode, ASTNode | None]]:
        """Yield every ``(node, parent)`` pair in pre-order."""
        stack: list[tuple[ASTNode, ASTNode | None]] = [(self, None)]
        while stack:
            node, parent = stack.pop()
            yield node, parent
            for child in reversed(node.children):
                stack.append((child, node))

    def __repr__(self) -> str:
        s = self.span
        label = f" {self.text!r}" if self.text else ""
        return (
            f"ASTNode({self.kind}{label} "
            f"{s.start_line}:{s.start_column}-{s.end_line}:{s.end_column})"
        )


@dataclass
class ParsedUnit:
    """Complete parse result for one analysis call."""

    root: ASTNode
    source: str
    dialect: Dialect
    template: ASTNode | None = None
    script: ASTNode | None = None


def is_incomplete_source(source: str) -> bool:
    """Return ``True`` for blank input or input ending in a dangling token."""
    trimmed = source.strip()
    if not trimmed:
        return True
    return trimmed.endswith(INCOMPLETE_TAIL_CHARS)


class ParserAdapter(ABC):
    """Base interface for dialect-specific parsers."""

    @abstractmethod
    def parse(self, source: str) -> ParsedUnit | None:
        """Parse *source*, or return ``None`` when no tree can be produced.

        Implementations may raise for malformed input; callers treat any
        exception the same as ``None``.
        """
