"""Engine defaults and the per-session configuration object."""

from __future__ import annotations

from dataclasses import dataclass

CACHE_TTL_SECONDS: float = 3.0
CACHE_MAX_ENTRIES: int = 128

# Analysis failures tolerated per window before the AST stage is bypassed.
MAX_ANALYSIS_ERRORS: int = 10
ERROR_RESET_SECONDS: float = 60.0

METRIC_SAMPLES: int = 10

# Characters that make the trailing expression syntactically incomplete.
INCOMPLETE_TAIL_CHARS: tuple[str, ...] = (".", "(", "[")


@dataclass
class SessionConfig:
    """Per-session overrides of the module defaults."""

    cache_ttl: float = CACHE_TTL_SECONDS
    cache_max_entries: int = CACHE_MAX_ENTRIES
    use_cache: bool = True
    max_errors: int = MAX_ANALYSIS_ERRORS
    error_reset_seconds: float = ERROR_RESET_SECONDS
    metric_samples: int = METRIC_SAMPLES
    recover_errors: bool = True
