"""Exception types raised inside livepen.

Apart from :class:`UnknownDialectError`, nothing here escapes
:meth:`CompletionSession.complete`; the session catches analysis errors at the
pipeline boundary and degrades to the pattern fallback.
"""

from __future__ import annotations


class LivepenError(Exception):
    """Base class for all livepen errors."""


class UnknownDialectError(LivepenError, ValueError):
    """Raised when a dialect name or alias is not recognised."""

    def __init__(self, name: str, known: list[str]) -> None:
        super().__init__(
            f"Unknown dialect {name!r}. Expected one of: {', '.join(known)}"
        )
        self.name = name


class SourceSyntaxError(LivepenError):
    """Raised by a parser adapter that refuses to recover from a syntax error."""

    def __init__(self, message: str, line: int = 0, column: int = 0) -> None:
        super().__init__(f"{message} at {line}:{column}")
        self.line = line
        self.column = column
