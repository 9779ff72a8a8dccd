"""MCP tool handler implementations for Livepen.

Each function accepts a :class:`CompletionSession` and the tool-specific
arguments, runs the engine, and returns a JSON string suitable for inclusion
in an MCP ``TextContent`` response.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import Any

from livepen.config.dialects import resolve_dialect
from livepen.core.analysis.context import ContextDescriptor
from livepen.core.analysis.scope import ScopeTable
from livepen.core.parsers.base import Position
from livepen.core.pipeline import analyze_source
from livepen.core.session import CompletionSession
from livepen.errors import UnknownDialectError

DEFAULT_LIMIT = 50


def _error(message: str) -> str:
    return json.dumps({"error": message})


def scope_to_dict(scope: ScopeTable) -> dict[str, Any]:
    """JSON-ready view of a scope table."""
    return asdict(scope)


def context_to_dict(context: ContextDescriptor) -> dict[str, Any]:
    """JSON-ready view of a context descriptor, without tree references."""
    return {
        "object_type": context.object_type.value,
        "dialect": context.dialect.value,
        "position": {"line": context.position.line, "column": context.position.column},
        "access_path": list(context.access_path),
        "property_name": context.property_name,
        "token": context.token,
        "from_fallback": context.from_fallback,
        "node_kind": context.node.kind if context.node is not None else None,
        "scope": scope_to_dict(context.scope),
    }


def handle_complete(
    session: CompletionSession,
    source: str,
    line: int,
    column: int,
    dialect: str = "plain-script",
    limit: int = DEFAULT_LIMIT,
) -> str:
    """Ranked completions at ``line:column`` as a JSON list."""
    try:
        items = session.complete(source, Position(line, column), dialect)
    except UnknownDialectError as exc:
        return _error(str(exc))
    return json.dumps([item.to_dict() for item in items[:limit]], indent=2)


def handle_context(
    session: CompletionSession,
    source: str,
    line: int,
    column: int,
    dialect: str = "plain-script",
) -> str:
    """The edit-context classification at ``line:column``."""
    try:
        context = session.analyze(source, Position(line, column), dialect)
    except UnknownDialectError as exc:
        return _error(str(exc))
    return json.dumps(context_to_dict(context), indent=2)


def handle_scope(
    session: CompletionSession,
    source: str,
    dialect: str = "plain-script",
) -> str:
    """The flat declaration table of *source*."""
    try:
        resolved = resolve_dialect(dialect)
    except UnknownDialectError as exc:
        return _error(str(exc))
    context, parsed = analyze_source(
        source,
        Position(1, 0),
        resolved,
        session.parser_for(resolved),
    )
    payload = scope_to_dict(context.scope)
    payload["parsed"] = parsed
    return json.dumps(payload, indent=2)
