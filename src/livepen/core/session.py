"""Per-editor completion session.

A :class:`CompletionSession` is the external entry point of the engine.  It
owns the result cache, the analysis error budget and the stage timing
metrics, so two editors never share state.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import defaultdict, deque
from collections.abc import Callable

from livepen.config.defaults import SessionConfig
from livepen.config.dialects import Dialect, resolve_dialect
from livepen.core.analysis.context import ContextDescriptor
from livepen.core.completion.cache import ResultCache, cache_key
from livepen.core.completion.fallback import fallback_context
from livepen.core.completion.ranker import CompletionItem, filter_completions, rank
from livepen.core.parsers import get_parser
from livepen.core.parsers.base import ParserAdapter, Position
from livepen.core.pipeline import analyze_source, run_pipeline, sort_completions

logger = logging.getLogger(__name__)


class ErrorBudget:
    """Counts analysis failures inside a rolling window.

    Once ``max_errors`` failures accumulate the budget is exhausted until
    ``reset_seconds`` have passed since the window opened.
    """

    def __init__(
        self,
        max_errors: int,
        reset_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_errors = max_errors
        self.reset_seconds = reset_seconds
        self._clock = clock
        self._count = 0
        self._window_start = clock()
        self._lock = threading.Lock()

    @property
    def count(self) -> int:
        self._maybe_reset()
        return self._count

    def record(self) -> None:
        with self._lock:
            self._maybe_reset()
            self._count += 1
            if self._count == self.max_errors:
                logger.warning(
                    "Analysis failed %d times; using pattern fallback for up to %.0fs",
                    self._count,
                    self.reset_seconds,
                )

    def exhausted(self) -> bool:
        return self.count >= self.max_errors

    def _maybe_reset(self) -> None:
        now = self._clock()
        if now - self._window_start >= self.reset_seconds:
            self._count = 0
            self._window_start = now


class StageMetrics:
    """Keeps the most recent duration samples per stage."""

    def __init__(self, samples: int) -> None:
        self.samples = samples
        self._timings: dict[str, deque[float]] = defaultdict(lambda: deque(maxlen=self.samples))

    def record(self, stage: str, seconds: float) -> None:
        self._timings[stage].append(seconds)
        logger.debug("%s took %.2fms", stage, seconds * 1000)

    def average_time(self, stage: str) -> float:
        timings = self._timings.get(stage)
        if not timings:
            return 0.0
        return sum(timings) / len(timings)

    def stages(self) -> list[str]:
        return sorted(self._timings)

    def clear(self) -> None:
        self._timings.clear()


class CompletionSession:
    """Owns cache, error budget and metrics for one editor instance."""

    def __init__(
        self,
        config: SessionConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config or SessionConfig()
        self.cache = ResultCache(
            ttl=self.config.cache_ttl,
            max_entries=self.config.cache_max_entries,
            clock=clock,
        )
        self.errors = ErrorBudget(
            self.config.max_errors, self.config.error_reset_seconds, clock=clock
        )
        self.metrics = StageMetrics(self.config.metric_samples)
        self._parsers: dict[Dialect, ParserAdapter] = {}

    def parser_for(self, dialect: Dialect) -> ParserAdapter:
        parser = self._parsers.get(dialect)
        if parser is None:
            parser = get_parser(dialect, recover_errors=self.config.recover_errors)
            self._parsers[dialect] = parser
        return parser

    def complete(
        self, source: str, position: Position, dialect: Dialect | str
    ) -> list[CompletionItem]:
        """Return ranked completions for *position*; never raises.

        An unknown dialect name is the only input that raises, before any
        analysis starts.
        """
        dialect = resolve_dialect(dialect)
        key = cache_key(source, position, dialect)
        if self.config.use_cache:
            cached = self.cache.get(key)
            if cached is not None:
                logger.debug("Cache hit for %s", key)
                return list(cached)

        start = time.perf_counter()
        try:
            result = run_pipeline(
                source,
                position,
                dialect,
                self.parser_for(dialect),
                use_ast=not self.errors.exhausted(),
                stage_callback=self.metrics.record,
            )
            items = result.items
        except Exception:
            logger.warning("Completion analysis failed; using fallback", exc_info=True)
            self.errors.record()
            items = self._fallback_items(source, position, dialect)
        self.metrics.record("total", time.perf_counter() - start)

        if self.config.use_cache:
            self.cache.put(key, tuple(items))
        return items

    def analyze(
        self, source: str, position: Position, dialect: Dialect | str
    ) -> ContextDescriptor:
        """Return the context descriptor the ranker would see."""
        dialect = resolve_dialect(dialect)
        try:
            context, _parsed = analyze_source(
                source,
                position,
                dialect,
                self.parser_for(dialect),
                use_ast=not self.errors.exhausted(),
                stage_callback=self.metrics.record,
            )
        except Exception:
            logger.warning("Context analysis failed; using fallback", exc_info=True)
            self.errors.record()
            context = fallback_context(source, position, dialect)
        return context

    def reset(self) -> None:
        """Drop cached results and timing samples."""
        self.cache.clear()
        self.metrics.clear()

    def _fallback_items(
        self, source: str, position: Position, dialect: Dialect
    ) -> list[CompletionItem]:
        try:
            context = fallback_context(source, position, dialect)
            return sort_completions(filter_completions(rank(context), context.token))
        except Exception:
            logger.warning("Fallback analysis failed", exc_info=True)
            return []
