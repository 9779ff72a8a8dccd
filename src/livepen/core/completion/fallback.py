"""Pattern-based analysis used when no syntax tree is available.

Typing ``user.`` leaves the source with a dangling member access the parser
adapter refuses; this module still recognises declarations and the trailing
``object.partial`` with regular expressions and produces a
:class:`ContextDescriptor` the ranker can work with.
"""

from __future__ import annotations

import logging
import re

from livepen.config.dialects import Dialect
from livepen.core.analysis.context import ContextDescriptor, ObjectType, current_token
from livepen.core.analysis.scope import (
    ClassInfo,
    FunctionInfo,
    ParameterInfo,
    ScopeTable,
    VariableInfo,
)
from livepen.core.parsers.base import Position
from livepen.core.parsers.template import template_block_range

logger = logging.getLogger(__name__)

_VARIABLE = re.compile(
    r"""\b(const|let|var)\s+(\w+)\s*=\s*"""
    r"""(\{[^}]*\}|\[[^\]]*\]|"[^"]*"|'[^']*'|`[^`]*`|[^;,\n]+)"""
)
_OBJECT_PROPERTY = re.compile(r"""["']?(\w+)["']?\s*:\s*([^,}]+)""")
_FUNCTION = re.compile(r"\bfunction\s*\*?\s*(\w+)\s*\(([^)]*)\)")
_CLASS = re.compile(r"\bclass\s+(\w+)(?:\s+extends\s+([\w.]+))?")
_NUMBER = re.compile(r"^-?\d+(\.\d+)?([eE][-+]?\d+)?$")
_MEMBER_ACCESS = re.compile(r"(\w+)\s*\.\s*(\w*)$")


def infer_literal_type(value: str) -> str:
    """Coarse type of an initializer given as raw text."""
    value = value.strip()
    if value.startswith("{") and value.endswith("}"):
        return "object"
    if value.startswith("[") and value.endswith("]"):
        return "array"
    if value[:1] in ("'", '"', "`"):
        return "string"
    if _NUMBER.match(value):
        return "number"
    if value in ("true", "false"):
        return "boolean"
    if value == "null":
        return "null"
    if value.startswith("function") or "=>" in value:
        return "function"
    if value.startswith("new Array"):
        return "array"
    return "any"


def build_fallback_scope(source: str) -> ScopeTable:
    """Collect declarations with regular expressions; last declaration wins."""
    scope = ScopeTable()

    for match in _VARIABLE.finditer(source):
        decl_kind, name, value = match.group(1), match.group(2), match.group(3)
        var_type = infer_literal_type(value)
        properties: dict[str, str] = {}
        if var_type == "object":
            for prop in _OBJECT_PROPERTY.finditer(value):
                properties[prop.group(1)] = infer_literal_type(prop.group(2))
        scope.variables[name] = VariableInfo(
            name=name, type=var_type, kind=decl_kind, properties=properties
        )

    for match in _FUNCTION.finditer(source):
        params = []
        for raw in match.group(2).split(","):
            name, _, default = raw.partition("=")
            name = name.strip().lstrip(".")
            if re.fullmatch(r"\w+", name):
                params.append(ParameterInfo(name=name, default=default.strip() or None))
        scope.functions[match.group(1)] = FunctionInfo(name=match.group(1), parameters=params)

    for match in _CLASS.finditer(source):
        scope.classes[match.group(1)] = ClassInfo(name=match.group(1), extends=match.group(2))

    return scope


def text_before(source: str, position: Position) -> str:
    """Return the source text preceding *position*."""
    lines = source.split("\n")
    if position.line < 1:
        return ""
    if position.line > len(lines):
        return source
    head = "\n".join(lines[: position.line - 1])
    current = lines[position.line - 1][: max(position.column, 0)]
    return f"{head}\n{current}" if position.line > 1 else current


def fallback_context(
    source: str, position: Position, dialect: Dialect
) -> ContextDescriptor:
    """Classify the cursor from the raw text alone."""
    scope = build_fallback_scope(source)
    before = text_before(source, position)

    if dialect is Dialect.TEMPLATE_COMPONENT:
        region = template_block_range(source)
        if region is not None and region[0] <= len(before) <= region[1]:
            return ContextDescriptor(
                scope=scope,
                object_type=ObjectType.VUE_TEMPLATE,
                dialect=dialect,
                position=position,
                token=current_token(source, position, template=True),
                from_fallback=True,
            )

    member = _MEMBER_ACCESS.search(before)
    if member is not None:
        logger.debug("Fallback member access on %r", member.group(1))
        return ContextDescriptor(
            scope=scope,
            object_type=ObjectType.PROPERTY,
            dialect=dialect,
            position=position,
            access_path=[member.group(1)],
            property_name=member.group(2) or None,
            token=member.group(2),
            from_fallback=True,
        )

    token = current_token(source, position)
    lowered = token.lower()
    if token and any(name.lower().startswith(lowered) for name in scope.variables):
        return ContextDescriptor(
            scope=scope,
            object_type=ObjectType.VARIABLE,
            dialect=dialect,
            position=position,
            access_path=[token],
            property_name=token,
            token=token,
            from_fallback=True,
        )

    return ContextDescriptor(
        scope=scope,
        object_type=ObjectType.UNKNOWN,
        dialect=dialect,
        position=position,
        token=token,
        from_fallback=True,
    )
