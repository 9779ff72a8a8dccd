"""Watch mode: re-run completion whenever a file settles.

Uses ``watchfiles`` (Rust-backed) for file system monitoring with native
debouncing, so a burst of saves produces one completion run.  Only the most
recent content is analysed; intermediate versions are never queued.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path

from livepen.config.dialects import Dialect, get_dialect, resolve_dialect
from livepen.core.completion.ranker import CompletionItem
from livepen.core.parsers.base import Position
from livepen.core.session import CompletionSession

logger = logging.getLogger(__name__)

# Milliseconds a file must stay quiet before a change batch is yielded.
DEBOUNCE_MS = 300

ResultCallback = Callable[[Path, list[CompletionItem]], None]


def complete_file(
    path: Path,
    position: Position,
    session: CompletionSession,
    dialect: Dialect | str | None = None,
) -> list[CompletionItem] | None:
    """Read *path* and complete at *position*; ``None`` if unreadable."""
    try:
        source = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Cannot read %s: %s", path, exc)
        return None

    resolved = resolve_dialect(dialect) if dialect is not None else get_dialect(path)
    if resolved is None:
        resolved = Dialect.PLAIN_SCRIPT
    return session.complete(source, position, resolved)


async def watch_file(
    path: Path,
    position: Position,
    on_result: ResultCallback,
    *,
    session: CompletionSession | None = None,
    dialect: Dialect | str | None = None,
    stop_event: asyncio.Event | None = None,
    debounce_ms: int = DEBOUNCE_MS,
) -> int:
    """Main watch loop: complete *path* on start and after each change.

    Parameters
    ----------
    path:
        The file to watch.
    position:
        Cursor position to complete at.
    on_result:
        Called with ``(path, items)`` after every run.
    session:
        Session to run completions in; a fresh one by default.
    dialect:
        Dialect override; otherwise derived from the file extension.
    stop_event:
        Optional event to signal shutdown (useful for testing).

    Returns the number of completion runs performed.
    """
    import watchfiles

    session = session or CompletionSession()
    path = path.resolve()
    runs = 0

    async def _run() -> None:
        nonlocal runs
        items = await asyncio.to_thread(complete_file, path, position, session, dialect)
        if items is not None:
            runs += 1
            on_result(path, items)

    logger.info("Watching %s for changes...", path)
    await _run()

    async for changes in watchfiles.awatch(
        path,
        debounce=debounce_ms,
        rust_timeout=500,
        stop_event=stop_event,
    ):
        if not any(Path(changed) == path for _change, changed in changes):
            continue
        await _run()

    logger.info("Watch stopped. Completion runs: %d", runs)
    return runs
