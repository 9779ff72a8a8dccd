"""Dialect detection and alias resolution."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from livepen.errors import UnknownDialectError


class Dialect(Enum):
    """Script and template flavours understood by the engine."""

    PLAIN_SCRIPT = "plain-script"
    TYPED_SCRIPT = "typed-script"
    JSX_COMPONENT = "jsx-component"
    TEMPLATE_COMPONENT = "template-component"


DIALECT_ALIASES: dict[str, Dialect] = {
    "js": Dialect.PLAIN_SCRIPT,
    "javascript": Dialect.PLAIN_SCRIPT,
    "ts": Dialect.TYPED_SCRIPT,
    "typescript": Dialect.TYPED_SCRIPT,
    "react": Dialect.JSX_COMPONENT,
    "jsx": Dialect.JSX_COMPONENT,
    "vue": Dialect.TEMPLATE_COMPONENT,
}

SUPPORTED_EXTENSIONS: dict[str, Dialect] = {
    ".js": Dialect.PLAIN_SCRIPT,
    ".mjs": Dialect.PLAIN_SCRIPT,
    ".cjs": Dialect.PLAIN_SCRIPT,
    ".ts": Dialect.TYPED_SCRIPT,
    ".jsx": Dialect.JSX_COMPONENT,
    ".tsx": Dialect.JSX_COMPONENT,
    ".vue": Dialect.TEMPLATE_COMPONENT,
}

# Dialects whose keyword list includes type-level keywords.
TYPED_DIALECTS: frozenset[Dialect] = frozenset({Dialect.TYPED_SCRIPT})


def resolve_dialect(name: str | Dialect) -> Dialect:
    """Return the :class:`Dialect` for a canonical name or a short alias.

    Raises :class:`UnknownDialectError` for anything else.
    """
    if isinstance(name, Dialect):
        return name
    key = name.strip().lower()
    for dialect in Dialect:
        if dialect.value == key:
            return dialect
    if key in DIALECT_ALIASES:
        return DIALECT_ALIASES[key]
    known = [d.value for d in Dialect] + sorted(DIALECT_ALIASES)
    raise UnknownDialectError(name, known)


def get_dialect(file_path: str | Path) -> Dialect | None:
    """Return the dialect implied by *file_path*'s extension.

    Returns ``None`` when the extension is not in :data:`SUPPORTED_EXTENSIONS`.
    """
    return SUPPORTED_EXTENSIONS.get(Path(file_path).suffix.lower())


def is_supported(file_path: str | Path) -> bool:
    """Return ``True`` if *file_path* has a supported extension."""
    return Path(file_path).suffix.lower() in SUPPORTED_EXTENSIONS
