"""Parser adapters: ``(source, dialect) -> ParsedUnit | None``."""

from __future__ import annotations

from livepen.config.dialects import Dialect, resolve_dialect
from livepen.core.parsers.base import ParserAdapter
from livepen.core.parsers.template import TemplateComponentParser
from livepen.core.parsers.typescript import TypeScriptParser


def get_parser(dialect: Dialect | str, recover_errors: bool = True) -> ParserAdapter:
    """Return a parser adapter for *dialect*."""
    dialect = resolve_dialect(dialect)
    if dialect is Dialect.TEMPLATE_COMPONENT:
        return TemplateComponentParser(recover_errors=recover_errors)
    return TypeScriptParser(dialect=dialect, recover_errors=recover_errors)


__all__ = ["ParserAdapter", "TemplateComponentParser", "TypeScriptParser", "get_parser"]
