"""Completion ranker: turn a context descriptor into scored candidates."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass

from livepen.config.dialects import TYPED_DIALECTS, Dialect
from livepen.core.analysis.context import ContextDescriptor, ObjectType
from livepen.core.completion.catalog import (
    COMMON_KEYWORDS,
    GLOBAL_MEMBERS,
    GLOBAL_OBJECTS,
    JSX_ATTRIBUTES,
    TEMPLATE_DIRECTIVES,
    TEMPLATE_EVENTS,
    TYPE_MEMBERS,
    TYPED_KEYWORDS,
    Member,
)

logger = logging.getLogger(__name__)

KIND_BOOST: dict[str, int] = {
    "method": 12,
    "property": 10,
    "variable": 9,
    "function": 8,
    "class": 7,
    "keyword": 5,
    "module": 5,
}
VARIABLE_METHOD_BONUS = 5
DIALECT_MATCH_BONUS = 3
FALLBACK_MEMBER_BONUS = 20


@dataclass(frozen=True)
class CompletionItem:
    """One ranked, user-facing suggestion."""

    label: str
    insert_text: str
    kind: str  # variable|function|method|property|class|keyword|module
    detail: str | None = None
    documentation: str | None = None
    rank_score: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def rank(context: ContextDescriptor) -> list[CompletionItem]:
    """Generate, score and de-duplicate candidates for *context* (unfiltered)."""
    generator = _GENERATORS.get(context.object_type, _unknown_candidates)
    seen: set[str] = set()
    items: list[CompletionItem] = []
    for label, kind, detail, doc in generator(context):
        if label in seen:
            continue
        seen.add(label)
        items.append(
            CompletionItem(
                label=label,
                insert_text=label,
                kind=kind,
                detail=detail,
                documentation=doc,
                rank_score=score(label, kind, context),
            )
        )
    logger.debug("Ranked %d candidates for %s context", len(items), context.object_type.value)
    return items


def score(label: str, kind: str, context: ContextDescriptor) -> int:
    """Kind-based base boost plus contextual bonuses."""
    value = KIND_BOOST.get(kind, 0)
    if context.object_type is ObjectType.VARIABLE and kind == "method":
        value += VARIABLE_METHOD_BONUS
    if context.dialect is Dialect.JSX_COMPONENT and "Component" in label:
        value += DIALECT_MATCH_BONUS
    if context.dialect is Dialect.TEMPLATE_COMPONENT and label.startswith("v-"):
        value += DIALECT_MATCH_BONUS
    if context.from_fallback and context.object_type is ObjectType.PROPERTY and kind == "property":
        value += FALLBACK_MEMBER_BONUS
    return value


def filter_completions(items: list[CompletionItem], token: str) -> list[CompletionItem]:
    """Keep items whose label contains *token*, ignoring case.

    Substring matching subsumes prefix matching; an empty token keeps all.
    """
    if not token:
        return list(items)
    needle = token.lower()
    return [item for item in items if needle in item.label.lower()]


# Each generator yields (label, kind, detail, documentation) tuples.


def _variable_candidates(context: ContextDescriptor):
    scope = context.scope
    for name, var in scope.variables.items():
        yield name, "variable", f"{var.type} ({var.kind})", f"Variable: {name}"
    for name, func in scope.functions.items():
        yield name, "function", func.signature(), f"Function: {name}"
    for name, cls in scope.classes.items():
        yield name, "class", cls.signature(), f"Class: {name}"
    for imp in scope.imports:
        local_names = [imp.alias] if imp.alias else [m for m in imp.members if m not in ("default", "*")]
        for local in local_names:
            yield local, "module", f"import from '{imp.module}'", f"Imported from {imp.module}"
    yield from _global_objects()


def _property_candidates(context: ContextDescriptor):
    if not context.access_path:
        return
    root = context.access_path[0]
    scope = context.scope

    variable = scope.variables.get(root)
    if variable is not None:
        for prop, prop_type in variable.properties.items():
            yield prop, "property", prop_type, f"{prop} property"
        yield from _members(TYPE_MEMBERS.get(variable.type, ()), variable.type)
        return

    cls = scope.classes.get(root)
    if cls is not None:
        for method in cls.methods.values():
            if method.is_static:
                yield method.name, "method", f"static {cls.name}.{method.name}", f"Static method: {method.name}"
        for prop in cls.properties.values():
            if prop.is_static:
                yield prop.name, "property", prop.type, f"Static property: {prop.name}"
        return

    if root in GLOBAL_MEMBERS:
        yield from _members(GLOBAL_MEMBERS[root], root)


def _function_candidates(context: ContextDescriptor):
    for name, func in context.scope.functions.items():
        yield name, "function", func.signature(), f"Function: {name}"


def _class_candidates(context: ContextDescriptor):
    for name, cls in context.scope.classes.items():
        yield name, "class", cls.signature(), f"Class: {name}"


def _jsx_candidates(context: ContextDescriptor):
    for name in context.scope.classes:
        if "Component" in name:
            yield name, "class", f"Component: {name}", f"Component: {name}"
    for attr in JSX_ATTRIBUTES:
        yield attr, "property", f"JSX attribute: {attr}", f"JSX attribute: {attr}"


def _template_candidates(context: ContextDescriptor):
    for directive in TEMPLATE_DIRECTIVES:
        yield directive, "keyword", f"Directive: {directive}", f"Template directive: {directive}"
    for event in TEMPLATE_EVENTS:
        yield event, "keyword", f"Event: {event}", f"Event binding: {event}"


def _unknown_candidates(context: ContextDescriptor):
    yield from _global_objects()
    yield from keyword_candidates(context.dialect)


def keyword_candidates(dialect: Dialect):
    for keyword in COMMON_KEYWORDS:
        yield keyword, "keyword", f"keyword: {keyword}", f"Keyword: {keyword}"
    if dialect in TYPED_DIALECTS:
        for keyword in TYPED_KEYWORDS:
            yield keyword, "keyword", f"type keyword: {keyword}", f"Type-level keyword: {keyword}"


def _global_objects():
    for name, doc in GLOBAL_OBJECTS:
        yield name, "variable", f"Global {name}", doc


def _members(members: tuple[Member, ...], owner: str):
    for member in members:
        yield member.name, member.kind, f"{owner}.{member.name}", member.documentation


_GENERATORS = {
    ObjectType.VARIABLE: _variable_candidates,
    ObjectType.PROPERTY: _property_candidates,
    ObjectType.FUNCTION: _function_candidates,
    ObjectType.CLASS: _class_candidates,
    ObjectType.JSX: _jsx_candidates,
    ObjectType.VUE_TEMPLATE: _template_candidates,
    ObjectType.UNKNOWN: _unknown_candidates,
}
