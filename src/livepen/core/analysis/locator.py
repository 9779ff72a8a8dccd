"""Node locator: find the most specific node around a cursor position.

Spans nest, so a cursor sits inside a statement, an expression and an
identifier at the same time.  Every node is visited and scored; the best
score wins.  Never stop at the first containing node.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator

from livepen.core.parsers.base import (
    CLASS_DECLARATION_KINDS,
    CLASS_EXPRESSION_KINDS,
    FUNCTION_DECLARATION_KINDS,
    FUNCTION_EXPRESSION_KINDS,
    IDENTIFIER_KINDS,
    MEMBER_KINDS,
    ROOT_KINDS,
    VARIABLE_DECLARATION_KINDS,
    ASTNode,
    Position,
)

BASE_SCORE = 100
MAX_SIZE_PENALTY = 20

_KIND_BONUS: dict[str, int] = {}
_KIND_BONUS.update(dict.fromkeys(IDENTIFIER_KINDS, 50))
_KIND_BONUS.update(dict.fromkeys(MEMBER_KINDS, 40))
_KIND_BONUS.update(dict.fromkeys(VARIABLE_DECLARATION_KINDS, 30))
_KIND_BONUS.update(dict.fromkeys(FUNCTION_DECLARATION_KINDS | CLASS_DECLARATION_KINDS, 25))
_KIND_BONUS["expression_statement"] = 20
_KIND_BONUS.update(dict.fromkeys(ROOT_KINDS, 10))
_DEFAULT_BONUS = 15

Located = tuple[ASTNode | None, ASTNode | None]


def node_score(node: ASTNode, position: Position) -> int:
    """Score *node* for *position*; ``0`` when the span does not contain it."""
    if not node.span.contains(position):
        return 0
    score = BASE_SCORE + _KIND_BONUS.get(node.kind, _DEFAULT_BONUS)
    score -= min(node.span.size // 10, MAX_SIZE_PENALTY)
    return score


def iter_scored(
    root: ASTNode, position: Position
) -> Iterator[tuple[ASTNode, ASTNode | None, int]]:
    """Yield ``(node, parent, score)`` for every node containing *position*.

    The whole tree is walked: a parent that does not contain the cursor may
    still have children that do (tree-sitter error recovery can produce such
    spans), so there is no pruning.
    """
    for node, parent in root.walk():
        score = node_score(node, position)
        if score > 0:
            yield node, parent, score


def locate(root: ASTNode | None, position: Position) -> Located:
    """Return the best-scoring ``(node, parent)`` pair, or ``(None, None)``.

    On equal scores the node visited later wins, which in pre-order means
    the deeper one.
    """
    return _best(root, position, lambda node: True)


def find_node_of_kind(root: ASTNode | None, position: Position, kind: str) -> ASTNode | None:
    """Return the best-scoring node of *kind* containing *position*."""
    node, _parent = _best(root, position, lambda n: n.kind == kind)
    return node


def find_variable_declaration(
    root: ASTNode | None, position: Position, name: str
) -> ASTNode | None:
    """Return the declaration statement that declares variable *name*.

    Only declarations whose span contains *position* are considered; when
    several match, the innermost one wins.
    """

    def declares(node: ASTNode) -> bool:
        if node.kind not in VARIABLE_DECLARATION_KINDS:
            return False
        for declarator in node.iter_children():
            name_node = declarator.field("name")
            if name_node is not None and name_node.text == name:
                return True
        return False

    return _last_match(root, position, declares)


def find_function_declaration(
    root: ASTNode | None, position: Position, name: str
) -> ASTNode | None:
    kinds = FUNCTION_DECLARATION_KINDS | FUNCTION_EXPRESSION_KINDS
    return _last_match(root, position, lambda n: n.kind in kinds and _declared_name(n) == name)


def find_class_declaration(
    root: ASTNode | None, position: Position, name: str
) -> ASTNode | None:
    kinds = CLASS_DECLARATION_KINDS | CLASS_EXPRESSION_KINDS
    return _last_match(root, position, lambda n: n.kind in kinds and _declared_name(n) == name)


def _best(
    root: ASTNode | None, position: Position, predicate: Callable[[ASTNode], bool]
) -> Located:
    if root is None:
        return None, None

    best: Located = (None, None)
    best_score = -1
    for node, parent, score in iter_scored(root, position):
        if predicate(node) and score >= best_score:
            best_score = score
            best = (node, parent)
    return best


def _last_match(
    root: ASTNode | None, position: Position, predicate: Callable[[ASTNode], bool]
) -> ASTNode | None:
    if root is None:
        return None
    result = None
    for node, _parent, _score in iter_scored(root, position):
        if predicate(node):
            result = node
    return result


def _declared_name(node: ASTNode) -> str:
    name_node = node.field("name")
    return name_node.text if name_node is not None else ""
