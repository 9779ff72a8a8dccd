"""Single-file-component parser for the template dialect.

Splits the ``<template>`` and ``<script>`` blocks with regular expressions.
The template block becomes a lightweight tree of elements and attributes
(enough to answer "is the cursor inside the template?" and "which attribute
is being typed?"); the script block is handed to the tree-sitter adapter and
its spans are built in document coordinates.
"""

from __future__ import annotations

import bisect
import logging
import re

from livepen.config.dialects import Dialect
from livepen.core.parsers.base import (
    ASTNode,
    ParsedUnit,
    ParserAdapter,
    Span,
    is_incomplete_source,
)
from livepen.core.parsers.typescript import TypeScriptParser

logger = logging.getLogger(__name__)

_TEMPLATE_OPEN = re.compile(r"<template\b[^>]*>", re.IGNORECASE)
_TEMPLATE_CLOSE = re.compile(r"</template\s*>", re.IGNORECASE)
_SCRIPT_OPEN = re.compile(r"<script\b([^>]*)>", re.IGNORECASE)
_SCRIPT_CLOSE = re.compile(r"</script\s*>", re.IGNORECASE)
_SCRIPT_LANG = re.compile(r"""lang\s*=\s*["'](\w+)["']""", re.IGNORECASE)
_LANG_GRAMMAR = {"ts": "typescript", "typescript": "typescript", "tsx": "tsx"}

_START_TAG = re.compile(r"<([A-Za-z][\w.-]*)")
_ATTRIBUTE = re.compile(
    r"""([@:#]?[A-Za-z_][\w:.@#-]*)(?:\s*=\s*(?:"[^"]*"|'[^']*'|[^\s>]+))?"""
)


class _LineIndex:
    """Maps string offsets to ``(line, column)`` pairs."""

    def __init__(self, text: str) -> None:
        self._starts = [0]
        for i, ch in enumerate(text):
            if ch == "\n":
                self._starts.append(i + 1)

    def point(self, offset: int) -> tuple[int, int]:
        row = bisect.bisect_right(self._starts, offset) - 1
        return row + 1, offset - self._starts[row]

    def span(self, start: int, end: int) -> Span:
        start_line, start_col = self.point(start)
        end_line, end_col = self.point(end)
        return Span(start_line, start_col, end_line, end_col)


class TemplateComponentParser(ParserAdapter):
    """Parse template-dialect single-file components."""

    def __init__(self, recover_errors: bool = True) -> None:
        self.recover_errors = recover_errors

    def parse(self, source: str) -> ParsedUnit | None:
        if is_incomplete_source(source):
            logger.debug("Skipping parse: blank or incomplete trailing expression")
            return None

        index = _LineIndex(source)
        template_range = _block_range(source, _TEMPLATE_OPEN, _TEMPLATE_CLOSE)
        script_match = _SCRIPT_OPEN.search(source)

        if template_range is None and script_match is None:
            # A bare fragment of markup: treat the whole input as template.
            template_range = (0, len(source), 0, len(source))

        root = ASTNode(kind="component", span=index.span(0, len(source)))
        template: ASTNode | None = None
        script: ASTNode | None = None

        if template_range is not None:
            template = _build_template(source, index, template_range)
            root.children.append(template)
            root.fields["template"] = [template]

        if script_match is not None:
            script = self._parse_script(source, index, script_match)
            if script is not None:
                root.children.append(script)
                root.fields["script"] = [script]

        root.children.sort(key=lambda n: (n.span.start_line, n.span.start_column))
        return ParsedUnit(
            root=root,
            source=source,
            dialect=Dialect.TEMPLATE_COMPONENT,
            template=template,
            script=script,
        )

    def _parse_script(
        self, source: str, index: _LineIndex, open_match: re.Match[str]
    ) -> ASTNode | None:
        body_start = open_match.end()
        close = _SCRIPT_CLOSE.search(source, body_start)
        body_end = close.start() if close else len(source)
        content = source[body_start:body_end]
        if not content.strip():
            return None

        lang = _SCRIPT_LANG.search(open_match.group(1))
        grammar = _LANG_GRAMMAR.get(lang.group(1).lower(), "javascript") if lang else "javascript"
        parser = TypeScriptParser(
            dialect=Dialect.TEMPLATE_COMPONENT,
            grammar=grammar,
            recover_errors=self.recover_errors,
        )
        line, column = index.point(body_start)
        return parser.parse_block(content, line_offset=line - 1, first_line_column=column)


def template_block_range(source: str) -> tuple[int, int] | None:
    """Return the ``(start, end)`` offsets of the template region, if any.

    Without a ``<template>`` or ``<script>`` block the whole source counts
    as template.
    """
    block = _block_range(source, _TEMPLATE_OPEN, _TEMPLATE_CLOSE)
    if block is not None:
        return block[0], block[1]
    if _SCRIPT_OPEN.search(source) is None:
        return 0, len(source)
    return None


def _block_range(
    source: str, opening: re.Pattern[str], closing: re.Pattern[str]
) -> tuple[int, int, int, int] | None:
    """Return ``(outer_start, outer_end, inner_start, inner_end)`` of a block.

    The last closing tag wins so nested ``<template v-if>`` blocks stay inside
    the outer one.  An unclosed block runs to the end of the source.
    """
    open_match = opening.search(source)
    if open_match is None:
        return None
    last_close = None
    for match in closing.finditer(source, open_match.end()):
        last_close = match
    if last_close is None:
        return open_match.start(), len(source), open_match.end(), len(source)
    return open_match.start(), last_close.end(), open_match.end(), last_close.start()


def _build_template(
    source: str, index: _LineIndex, block: tuple[int, int, int, int]
) -> ASTNode:
    outer_start, outer_end, inner_start, inner_end = block
    # Elements are matched inside the block; nested <template> tags included.
    template = ASTNode(kind="template", span=index.span(outer_start, outer_end))

    for tag in _START_TAG.finditer(source, inner_start, inner_end):
        tag_close = source.find(">", tag.end(), inner_end)
        tag_end = tag_close + 1 if tag_close != -1 else inner_end
        element = ASTNode(kind="template_element", span=index.span(tag.start(), tag_end))

        name = ASTNode(
            kind="tag_name",
            span=index.span(tag.start(1), tag.end(1)),
            text=tag.group(1),
        )
        element.children.append(name)
        element.fields["name"] = [name]

        attrs_end = tag_close if tag_close != -1 else inner_end
        for attr in _ATTRIBUTE.finditer(source, tag.end(), attrs_end):
            attribute = ASTNode(
                kind="template_attribute",
                span=index.span(attr.start(), attr.end()),
                text=attr.group(1),
            )
            element.children.append(attribute)
            element.fields.setdefault("attribute", []).append(attribute)

        template.children.append(element)

    return template
