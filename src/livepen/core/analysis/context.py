"""Context resolver: classify the construct around the cursor.

Takes the node picked by the locator and decides what kind of completion
makes sense there, extracting the dotted access path (``user.address.city``
→ ``["user", "address", "city"]``) and the partially typed property name.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

from livepen.config.dialects import Dialect
from livepen.core.analysis.scope import ScopeTable
from livepen.core.parsers.base import (
    CALL_KINDS,
    CLASS_DECLARATION_KINDS,
    CLASS_EXPRESSION_KINDS,
    FUNCTION_DECLARATION_KINDS,
    FUNCTION_EXPRESSION_KINDS,
    IDENTIFIER_KINDS,
    JSX_KINDS,
    MEMBER_KINDS,
    VARIABLE_DECLARATION_KINDS,
    ASTNode,
    ParsedUnit,
    Position,
)

_WORD_BEFORE = re.compile(r"\w*$")
_TEMPLATE_WORD_BEFORE = re.compile(r"[\w@:.#-]*$")


class ObjectType(Enum):
    """Edit-context kinds the ranker dispatches on."""

    VARIABLE = "variable"
    PROPERTY = "property"
    FUNCTION = "function"
    CLASS = "class"
    JSX = "jsx"
    VUE_TEMPLATE = "vue-template"
    UNKNOWN = "unknown"


@dataclass
class ContextDescriptor:
    """Classification of the cursor's surroundings for one analysis call.

    ``node`` and ``parent`` are excluded from equality so two analyses of the
    same input compare equal even though they hold distinct tree objects.
    """

    scope: ScopeTable
    object_type: ObjectType
    dialect: Dialect
    position: Position
    access_path: list[str] = field(default_factory=list)
    property_name: str | None = None
    token: str = ""
    from_fallback: bool = False
    node: ASTNode | None = field(default=None, compare=False, repr=False)
    parent: ASTNode | None = field(default=None, compare=False, repr=False)


def resolve_context(
    node: ASTNode | None,
    parent: ASTNode | None,
    dialect: Dialect,
    unit: ParsedUnit | None,
    position: Position,
    scope: ScopeTable | None = None,
) -> ContextDescriptor:
    """Build the :class:`ContextDescriptor` for a located node."""
    source = unit.source if unit is not None else ""
    object_type = classify(node, parent, dialect, unit)

    access_path: list[str] = []
    if object_type in (ObjectType.PROPERTY, ObjectType.VARIABLE):
        access_path = extract_access_path(node, parent)

    return ContextDescriptor(
        scope=scope if scope is not None else ScopeTable(),
        object_type=object_type,
        dialect=dialect,
        position=position,
        access_path=access_path,
        property_name=extract_property_name(node),
        token=current_token(source, position, template=object_type is ObjectType.VUE_TEMPLATE),
        node=node,
        parent=parent,
    )


def classify(
    node: ASTNode | None,
    parent: ASTNode | None,
    dialect: Dialect,
    unit: ParsedUnit | None = None,
) -> ObjectType:
    """Apply the classification rules in priority order."""
    if node is None:
        return ObjectType.UNKNOWN

    if (
        dialect is Dialect.TEMPLATE_COMPONENT
        and unit is not None
        and is_in_subtree(node, unit.template)
    ):
        return ObjectType.VUE_TEMPLATE

    if dialect is Dialect.JSX_COMPONENT and _is_jsx(node, parent):
        return ObjectType.JSX

    kind = node.kind

    if kind in IDENTIFIER_KINDS and parent is not None and parent.kind in MEMBER_KINDS:
        if parent.field("property") is node:
            return ObjectType.PROPERTY
        if parent.field("object") is node:
            return ObjectType.VARIABLE

    if kind in MEMBER_KINDS:
        prop = node.field("property")
        if prop is None or prop.missing or not prop.text:
            return ObjectType.PROPERTY
        return ObjectType.VARIABLE

    if kind in IDENTIFIER_KINDS:
        return ObjectType.VARIABLE
    if kind in CALL_KINDS:
        return ObjectType.FUNCTION
    if kind in CLASS_DECLARATION_KINDS or kind in CLASS_EXPRESSION_KINDS:
        return ObjectType.CLASS
    if kind in FUNCTION_DECLARATION_KINDS or kind in FUNCTION_EXPRESSION_KINDS:
        return ObjectType.FUNCTION
    if kind in VARIABLE_DECLARATION_KINDS:
        return ObjectType.VARIABLE
    return ObjectType.UNKNOWN


def extract_access_path(node: ASTNode | None, parent: ASTNode | None) -> list[str]:
    """Return the dotted access chain the cursor belongs to, outermost first."""
    if node is None:
        return []
    if node.kind in MEMBER_KINDS:
        return member_path(node)
    if node.kind in IDENTIFIER_KINDS:
        if parent is not None and parent.kind in MEMBER_KINDS:
            if parent.field("object") is node:
                return [node.text]
            if parent.field("property") is node:
                return member_path(parent)
        return [node.text] if node.text else []
    return []


def member_path(node: ASTNode) -> list[str]:
    """Unwind a member-access chain, prepending each property then the root."""
    path: list[str] = []
    current: ASTNode | None = node
    while current is not None and current.kind in MEMBER_KINDS:
        prop = current.field("property")
        if prop is not None and prop.kind in IDENTIFIER_KINDS and prop.text:
            path.insert(0, prop.text)
        current = current.field("object")
    if current is not None and current.kind in IDENTIFIER_KINDS and current.text:
        path.insert(0, current.text)
    return path


def extract_property_name(node: ASTNode | None) -> str | None:
    if node is None:
        return None
    if node.kind in IDENTIFIER_KINDS:
        return node.text or None
    if node.kind in MEMBER_KINDS:
        prop = node.field("property")
        if prop is not None and prop.kind in IDENTIFIER_KINDS:
            return prop.text or None
    return None


def is_in_subtree(node: ASTNode, subtree: ASTNode | None) -> bool:
    """Identity containment: is *node* the *subtree* root or one of its descendants?"""
    if subtree is None:
        return False
    return any(candidate is node for candidate, _parent in subtree.walk())


def current_token(source: str, position: Position, template: bool = False) -> str:
    """Return the word being typed immediately before *position*."""
    lines = source.split("\n")
    if not 1 <= position.line <= len(lines):
        return ""
    before = lines[position.line - 1][: max(position.column, 0)]
    pattern = _TEMPLATE_WORD_BEFORE if template else _WORD_BEFORE
    match = pattern.search(before)
    return match.group(0) if match else ""


def _is_jsx(node: ASTNode, parent: ASTNode | None) -> bool:
    if node.kind in JSX_KINDS:
        return True
    return node.kind in IDENTIFIER_KINDS and parent is not None and parent.kind in JSX_KINDS
