"""MCP server for Livepen: exposes the completion engine over stdio transport.

Registers three tools that let MCP clients ask for completions, the edit
context and the declaration table of a source snippet.  All calls share one
:class:`CompletionSession`, so repeated requests hit its result cache.

Usage::

    livepen mcp
"""

from __future__ import annotations

import asyncio
import logging

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from livepen.core.session import CompletionSession
from livepen.mcp.tools import DEFAULT_LIMIT, handle_complete, handle_context, handle_scope

logger = logging.getLogger(__name__)

server = Server("livepen")

_session: CompletionSession | None = None


def set_session(session: CompletionSession | None) -> None:
    """Inject a pre-configured session (e.g. with caching disabled)."""
    global _session  # noqa: PLW0603
    _session = session


def _get_session() -> CompletionSession:
    global _session  # noqa: PLW0603
    if _session is None:
        _session = CompletionSession()
        logger.info("Created completion session")
    return _session


_SOURCE_PROPS = {
    "source": {
        "type": "string",
        "description": "Full document text.",
    },
    "dialect": {
        "type": "string",
        "description": (
            "Source dialect: plain-script (js), typed-script (ts), "
            "jsx-component (react) or template-component (vue)."
        ),
        "default": "plain-script",
    },
}

_POSITION_PROPS = {
    "line": {
        "type": "integer",
        "description": "Cursor line, 1-based.",
    },
    "column": {
        "type": "integer",
        "description": "Cursor column, 0-based.",
    },
}

TOOLS: list[Tool] = [
    Tool(
        name="livepen_complete",
        description=(
            "Ranked completion candidates at a cursor position. "
            "Returns a JSON list of {label, kind, detail, rank_score, ...}."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                **_SOURCE_PROPS,
                **_POSITION_PROPS,
                "limit": {
                    "type": "integer",
                    "description": f"Maximum number of results (default {DEFAULT_LIMIT}).",
                    "default": DEFAULT_LIMIT,
                },
            },
            "required": ["source", "line", "column"],
        },
    ),
    Tool(
        name="livepen_context",
        description=(
            "Classify the edit context at a cursor position: object type, "
            "access path, partially typed token."
        ),
        inputSchema={
            "type": "object",
            "properties": {**_SOURCE_PROPS, **_POSITION_PROPS},
            "required": ["source", "line", "column"],
        },
    ),
    Tool(
        name="livepen_scope",
        description="List the variables, functions, classes and imports declared in a snippet.",
        inputSchema={
            "type": "object",
            "properties": dict(_SOURCE_PROPS),
            "required": ["source"],
        },
    ),
]


@server.list_tools()
async def list_tools() -> list[Tool]:
    """Return the list of available Livepen tools."""
    return TOOLS


def _dispatch_tool(name: str, arguments: dict, session: CompletionSession) -> str:
    """Synchronous tool dispatch."""
    source = arguments.get("source", "")
    dialect = arguments.get("dialect", "plain-script")
    if name == "livepen_complete":
        return handle_complete(
            session,
            source,
            int(arguments.get("line", 1)),
            int(arguments.get("column", 0)),
            dialect,
            limit=int(arguments.get("limit", DEFAULT_LIMIT)),
        )
    elif name == "livepen_context":
        return handle_context(
            session,
            source,
            int(arguments.get("line", 1)),
            int(arguments.get("column", 0)),
            dialect,
        )
    elif name == "livepen_scope":
        return handle_scope(session, source, dialect)
    else:
        return f"Unknown tool: {name}"


@server.call_tool()
async def call_tool(name: str, arguments: dict) -> list[TextContent]:
    """Dispatch a tool call to the appropriate handler."""
    session = _get_session()
    result = await asyncio.to_thread(_dispatch_tool, name, arguments, session)
    return [TextContent(type="text", text=result)]


async def main() -> None:
    """Run the Livepen MCP server over stdio transport."""
    async with stdio_server() as (read, write):
        await server.run(read, write, server.create_initialization_options())


if __name__ == "__main__":
    asyncio.run(main())
