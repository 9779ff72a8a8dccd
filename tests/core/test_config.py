"""Tests for dialect resolution, extension mapping and session defaults."""

from __future__ import annotations

from pathlib import Path

import pytest

from livepen.config import (
    SUPPORTED_EXTENSIONS,
    Dialect,
    SessionConfig,
    get_dialect,
    is_supported,
    resolve_dialect,
)
from livepen.config.defaults import CACHE_TTL_SECONDS, MAX_ANALYSIS_ERRORS
from livepen.errors import LivepenError, UnknownDialectError

# ---------------------------------------------------------------------------
# resolve_dialect
# ---------------------------------------------------------------------------


class TestResolveDialect:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("plain-script", Dialect.PLAIN_SCRIPT),
            ("js", Dialect.PLAIN_SCRIPT),
            ("javascript", Dialect.PLAIN_SCRIPT),
            ("typed-script", Dialect.TYPED_SCRIPT),
            ("ts", Dialect.TYPED_SCRIPT),
            ("typescript", Dialect.TYPED_SCRIPT),
            ("jsx-component", Dialect.JSX_COMPONENT),
            ("react", Dialect.JSX_COMPONENT),
            ("template-component", Dialect.TEMPLATE_COMPONENT),
            ("vue", Dialect.TEMPLATE_COMPONENT),
        ],
    )
    def test_names_and_aliases(self, name: str, expected: Dialect) -> None:
        assert resolve_dialect(name) is expected

    def test_case_and_whitespace_insensitive(self) -> None:
        assert resolve_dialect("  TS ") is Dialect.TYPED_SCRIPT

    def test_dialect_passthrough(self) -> None:
        assert resolve_dialect(Dialect.JSX_COMPONENT) is Dialect.JSX_COMPONENT

    def test_unknown_raises(self) -> None:
        with pytest.raises(UnknownDialectError) as exc_info:
            resolve_dialect("cobol")
        assert "cobol" in str(exc_info.value)
        assert exc_info.value.name == "cobol"

    def test_unknown_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            resolve_dialect("svelte")

    def test_unknown_is_livepen_error(self) -> None:
        with pytest.raises(LivepenError):
            resolve_dialect("")


# ---------------------------------------------------------------------------
# Extension mapping
# ---------------------------------------------------------------------------


class TestGetDialect:
    def test_js_family(self) -> None:
        for name in ("app.js", "app.mjs", "app.cjs"):
            assert get_dialect(name) is Dialect.PLAIN_SCRIPT

    def test_ts(self) -> None:
        assert get_dialect(Path("src/index.ts")) is Dialect.TYPED_SCRIPT

    def test_component_files(self) -> None:
        assert get_dialect("App.jsx") is Dialect.JSX_COMPONENT
        assert get_dialect("App.tsx") is Dialect.JSX_COMPONENT
        assert get_dialect("App.vue") is Dialect.TEMPLATE_COMPONENT

    def test_uppercase_extension(self) -> None:
        assert get_dialect("LEGACY.JS") is Dialect.PLAIN_SCRIPT

    def test_unsupported(self) -> None:
        assert get_dialect("main.py") is None
        assert not is_supported("README.md")

    def test_supported(self) -> None:
        assert is_supported("a.vue")
        assert set(SUPPORTED_EXTENSIONS.values()) == set(Dialect)


# ---------------------------------------------------------------------------
# SessionConfig
# ---------------------------------------------------------------------------


class TestSessionConfig:
    def test_defaults_follow_module_constants(self) -> None:
        config = SessionConfig()
        assert config.cache_ttl == CACHE_TTL_SECONDS == 3.0
        assert config.max_errors == MAX_ANALYSIS_ERRORS == 10
        assert config.error_reset_seconds == 60.0
        assert config.metric_samples == 10
        assert config.use_cache is True
        assert config.recover_errors is True

    def test_overrides(self) -> None:
        config = SessionConfig(cache_ttl=0.5, use_cache=False)
        assert config.cache_ttl == 0.5
        assert config.use_cache is False
