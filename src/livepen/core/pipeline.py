"""Completion pipeline.

Runs the analysis stages for one request and returns the ranked result:

    1. Parsing (parser adapter; ``None`` or a syntax error means no tree)
    2. Scope building (flat declaration table)
    3. Node location (best-scoring node around the cursor)
    4. Context resolution (edit-context classification)
    5. Ranking (candidate generation and scoring)
    6. Filtering (case-insensitive match against the typed token)

When no tree is available stages 2-4 are replaced by the pattern fallback.
Everything here is pure; caching and failure accounting live in
:mod:`livepen.core.session`.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from livepen.config.dialects import Dialect, resolve_dialect
from livepen.core.analysis.context import ContextDescriptor, resolve_context
from livepen.core.analysis.locator import locate
from livepen.core.analysis.scope import build_scope
from livepen.core.completion.fallback import fallback_context
from livepen.core.completion.ranker import CompletionItem, filter_completions, rank
from livepen.core.parsers import get_parser
from livepen.core.parsers.base import ParsedUnit, ParserAdapter, Position
from livepen.errors import SourceSyntaxError

logger = logging.getLogger(__name__)

StageCallback = Callable[[str, float], None]


@dataclass
class PipelineResult:
    """Outcome of a pipeline run."""

    context: ContextDescriptor
    items: list[CompletionItem] = field(default_factory=list)
    parsed: bool = False
    duration_seconds: float = 0.0


def sort_completions(items: list[CompletionItem]) -> list[CompletionItem]:
    """Order by ``rank_score`` descending, then label."""
    return sorted(items, key=lambda item: (-item.rank_score, item.label))


def parse_source(
    source: str, parser: ParserAdapter
) -> ParsedUnit | None:
    """Run the adapter, treating any adapter exception as "no tree"."""
    try:
        return parser.parse(source)
    except SourceSyntaxError as exc:
        logger.debug("Parse failed at %d:%d: %s", exc.line, exc.column, exc)
        return None
    except Exception:
        logger.debug("Parser adapter failed; no syntax tree", exc_info=True)
        return None


def analyze_unit(unit: ParsedUnit, position: Position) -> ContextDescriptor:
    """Scope, locate and classify against an already parsed unit."""
    scope = build_scope(unit.root)
    node, parent = locate(unit.root, position)
    return resolve_context(node, parent, unit.dialect, unit, position, scope=scope)


def analyze_source(
    source: str,
    position: Position,
    dialect: Dialect | str,
    parser: ParserAdapter | None = None,
    *,
    use_ast: bool = True,
    stage_callback: StageCallback | None = None,
) -> tuple[ContextDescriptor, bool]:
    """Return the context for *position* and whether a syntax tree was used.

    With ``use_ast=False`` the parser is skipped and the pattern fallback
    answers directly.
    """
    dialect = resolve_dialect(dialect)

    def report(stage: str, started: float) -> None:
        if stage_callback is not None:
            stage_callback(stage, time.perf_counter() - started)

    unit: ParsedUnit | None = None
    if use_ast:
        started = time.perf_counter()
        unit = parse_source(source, parser or get_parser(dialect))
        report("parse", started)

    if unit is None:
        started = time.perf_counter()
        context = fallback_context(source, position, dialect)
        report("fallback", started)
        logger.debug("No syntax tree; fallback context %s", context.object_type.value)
        return context, False

    started = time.perf_counter()
    context = analyze_unit(unit, position)
    report("analyze", started)
    return context, True


def run_pipeline(
    source: str,
    position: Position,
    dialect: Dialect | str,
    parser: ParserAdapter | None = None,
    *,
    use_ast: bool = True,
    stage_callback: StageCallback | None = None,
) -> PipelineResult:
    """Run stages 1-6 and return the sorted, filtered completions.

    Parameters
    ----------
    source:
        Full document text.
    position:
        Cursor position (1-based line, 0-based column).
    dialect:
        A :class:`Dialect` or any accepted dialect name/alias.
    parser:
        Adapter to use; defaults to ``get_parser(dialect)``.
    use_ast:
        When ``False`` skip parsing and use the pattern fallback.
    stage_callback:
        Optional ``(stage_name, seconds)`` callback invoked after each stage.
    """
    start = time.perf_counter()
    context, parsed = analyze_source(
        source,
        position,
        dialect,
        parser,
        use_ast=use_ast,
        stage_callback=stage_callback,
    )

    started = time.perf_counter()
    ranked = rank(context)
    if stage_callback is not None:
        stage_callback("rank", time.perf_counter() - started)

    items = sort_completions(filter_completions(ranked, context.token))
    return PipelineResult(
        context=context,
        items=items,
        parsed=parsed,
        duration_seconds=time.perf_counter() - start,
    )
