"""livepen configuration: dialect detection and engine defaults."""

from livepen.config.defaults import SessionConfig
from livepen.config.dialects import (
    SUPPORTED_EXTENSIONS,
    Dialect,
    get_dialect,
    is_supported,
    resolve_dialect,
)

__all__ = [
    "SUPPORTED_EXTENSIONS",
    "Dialect",
    "SessionConfig",
    "get_dialect",
    "is_supported",
    "resolve_dialect",
]
