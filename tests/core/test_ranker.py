"""Tests for candidate generation, scoring and filtering."""

from __future__ import annotations

from livepen.config.dialects import Dialect
from livepen.core.analysis.context import ContextDescriptor, ObjectType
from livepen.core.analysis.scope import (
    ClassInfo,
    FunctionInfo,
    ImportInfo,
    MethodInfo,
    ParameterInfo,
    PropertyInfo,
    ScopeTable,
    VariableInfo,
)
from livepen.core.completion.catalog import COMMON_KEYWORDS, GLOBAL_OBJECTS, TYPED_KEYWORDS
from livepen.core.completion.ranker import (
    CompletionItem,
    filter_completions,
    keyword_candidates,
    rank,
    score,
)
from livepen.core.parsers.base import Position

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


def _scope() -> ScopeTable:
    scope = ScopeTable()
    scope.variables["user"] = VariableInfo(
        name="user", type="object", kind="const", properties={"name": "string", "age": "number"}
    )
    scope.variables["title"] = VariableInfo(name="title", type="string", kind="let")
    scope.variables["items"] = VariableInfo(name="items", type="array", kind="const")
    scope.functions["greet"] = FunctionInfo(name="greet", parameters=[ParameterInfo(name="who")])
    cls = ClassInfo(name="Counter", extends="Base")
    cls.methods["create"] = MethodInfo(name="create", is_static=True)
    cls.methods["increment"] = MethodInfo(name="increment")
    cls.properties["instances"] = PropertyInfo(name="instances", type="number", is_static=True)
    cls.properties["count"] = PropertyInfo(name="count", type="number")
    scope.classes["Counter"] = cls
    scope.imports.append(ImportInfo(module="react", members=["default"], is_default=True, alias="React"))
    scope.imports.append(ImportInfo(module="./utils", members=["debounce", "throttle"]))
    return scope


def _ctx(
    object_type: ObjectType,
    access_path: list[str] | None = None,
    dialect: Dialect = Dialect.PLAIN_SCRIPT,
    scope: ScopeTable | None = None,
    from_fallback: bool = False,
) -> ContextDescriptor:
    return ContextDescriptor(
        scope=scope if scope is not None else _scope(),
        object_type=object_type,
        dialect=dialect,
        position=Position(1, 0),
        access_path=access_path or [],
        from_fallback=from_fallback,
    )


def _labels(items: list[CompletionItem]) -> list[str]:
    return [item.label for item in items]


def _by_label(items: list[CompletionItem]) -> dict[str, CompletionItem]:
    return {item.label: item for item in items}


# ---------------------------------------------------------------------------
# Variable context
# ---------------------------------------------------------------------------


class TestVariableContext:
    def test_scope_entries_and_globals(self) -> None:
        items = _by_label(rank(_ctx(ObjectType.VARIABLE)))

        assert items["user"].kind == "variable"
        assert items["user"].detail == "object (const)"
        assert items["greet"].kind == "function"
        assert items["greet"].detail == "function greet(who)"
        assert items["Counter"].kind == "class"
        assert items["Counter"].detail == "class Counter extends Base"
        for name, _doc in GLOBAL_OBJECTS:
            assert name in items

    def test_import_local_names(self) -> None:
        items = _by_label(rank(_ctx(ObjectType.VARIABLE)))

        assert items["React"].kind == "module"
        assert items["debounce"].kind == "module"
        assert items["throttle"].detail == "import from './utils'"
        assert "default" not in items

    def test_no_duplicate_labels(self) -> None:
        scope = _scope()
        scope.variables["console"] = VariableInfo(name="console", type="object")
        labels = _labels(rank(_ctx(ObjectType.VARIABLE, scope=scope)))

        assert labels.count("console") == 1
        assert len(labels) == len(set(labels))

    def test_scope_entry_wins_over_global(self) -> None:
        scope = _scope()
        scope.variables["console"] = VariableInfo(name="console", type="object")
        items = _by_label(rank(_ctx(ObjectType.VARIABLE, scope=scope)))

        assert items["console"].detail == "object (var)"


# ---------------------------------------------------------------------------
# Property context
# ---------------------------------------------------------------------------


class TestPropertyContext:
    def test_object_literal_properties_then_type_members(self) -> None:
        items = rank(_ctx(ObjectType.PROPERTY, ["user"]))
        labels = _labels(items)

        assert labels[:2] == ["name", "age"]
        assert "hasOwnProperty" in labels
        assert _by_label(items)["name"].detail == "string"

    def test_string_members(self) -> None:
        items = _by_label(rank(_ctx(ObjectType.PROPERTY, ["title"])))

        assert items["toUpperCase"].kind == "method"
        assert items["length"].kind == "property"
        assert items["toUpperCase"].detail == "string.toUpperCase"

    def test_array_members(self) -> None:
        labels = _labels(rank(_ctx(ObjectType.PROPERTY, ["items"])))
        assert {"push", "map", "filter", "length"} <= set(labels)

    def test_static_class_members_only(self) -> None:
        labels = _labels(rank(_ctx(ObjectType.PROPERTY, ["Counter"])))

        assert set(labels) == {"create", "instances"}

    def test_builtin_global_members(self) -> None:
        items = _by_label(rank(_ctx(ObjectType.PROPERTY, ["console"])))

        assert {"log", "error", "warn"} <= set(items)
        assert items["log"].kind == "method"
        assert items["log"].detail == "console.log"

    def test_math_constant(self) -> None:
        items = _by_label(rank(_ctx(ObjectType.PROPERTY, ["Math"])))
        assert items["PI"].kind == "property"
        assert items["floor"].kind == "method"

    def test_unknown_root_yields_nothing(self) -> None:
        assert rank(_ctx(ObjectType.PROPERTY, ["mystery"])) == []

    def test_empty_access_path_yields_nothing(self) -> None:
        assert rank(_ctx(ObjectType.PROPERTY, [])) == []

    def test_only_root_of_path_is_resolved(self) -> None:
        labels = _labels(rank(_ctx(ObjectType.PROPERTY, ["user", "name"])))
        assert "name" in labels
        assert "age" in labels


# ---------------------------------------------------------------------------
# Other contexts
# ---------------------------------------------------------------------------


class TestOtherContexts:
    def test_function_context(self) -> None:
        assert _labels(rank(_ctx(ObjectType.FUNCTION))) == ["greet"]

    def test_class_context(self) -> None:
        assert _labels(rank(_ctx(ObjectType.CLASS))) == ["Counter"]

    def test_jsx_context(self) -> None:
        scope = _scope()
        scope.classes["CardComponent"] = ClassInfo(name="CardComponent")
        items = _by_label(rank(_ctx(ObjectType.JSX, dialect=Dialect.JSX_COMPONENT, scope=scope)))

        assert "className" in items
        assert "onClick" in items
        assert "CardComponent" in items
        assert "Counter" not in items

    def test_template_context(self) -> None:
        items = _by_label(rank(_ctx(ObjectType.VUE_TEMPLATE, dialect=Dialect.TEMPLATE_COMPONENT)))

        assert items["v-if"].kind == "keyword"
        assert "@click" in items
        assert "user" not in items

    def test_unknown_context_plain(self) -> None:
        labels = set(_labels(rank(_ctx(ObjectType.UNKNOWN))))

        assert {name for name, _doc in GLOBAL_OBJECTS} <= labels
        assert set(COMMON_KEYWORDS) <= labels
        assert "interface" not in labels

    def test_unknown_context_typed(self) -> None:
        labels = set(_labels(rank(_ctx(ObjectType.UNKNOWN, dialect=Dialect.TYPED_SCRIPT))))
        assert set(TYPED_KEYWORDS) <= labels

    def test_keyword_candidates(self) -> None:
        plain = [label for label, *_rest in keyword_candidates(Dialect.PLAIN_SCRIPT)]
        typed = [label for label, *_rest in keyword_candidates(Dialect.TYPED_SCRIPT)]

        assert plain == list(COMMON_KEYWORDS)
        assert typed == list(COMMON_KEYWORDS) + list(TYPED_KEYWORDS)


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------


class TestScore:
    def test_kind_boosts(self) -> None:
        ctx = _ctx(ObjectType.UNKNOWN)
        assert score("x", "method", ctx) == 12
        assert score("x", "property", ctx) == 10
        assert score("x", "variable", ctx) == 9
        assert score("x", "function", ctx) == 8
        assert score("x", "class", ctx) == 7
        assert score("x", "keyword", ctx) == 5
        assert score("x", "unheard-of", ctx) == 0

    def test_kind_order(self) -> None:
        ctx = _ctx(ObjectType.UNKNOWN)
        kinds = ["method", "property", "variable", "function", "class", "keyword"]
        scores = [score("x", kind, ctx) for kind in kinds]

        assert scores == sorted(scores, reverse=True)
        assert len(set(scores)) == len(scores)

    def test_method_bonus_in_variable_context(self) -> None:
        assert score("x", "method", _ctx(ObjectType.VARIABLE)) == 17

    def test_component_bonus_in_jsx_dialect(self) -> None:
        jsx = _ctx(ObjectType.JSX, dialect=Dialect.JSX_COMPONENT)
        plain = _ctx(ObjectType.JSX)
        assert score("CardComponent", "class", jsx) == 10
        assert score("CardComponent", "class", plain) == 7

    def test_directive_bonus_in_template_dialect(self) -> None:
        ctx = _ctx(ObjectType.VUE_TEMPLATE, dialect=Dialect.TEMPLATE_COMPONENT)
        assert score("v-if", "keyword", ctx) == 8
        assert score("@click", "keyword", ctx) == 5

    def test_fallback_property_bonus(self) -> None:
        ctx = _ctx(ObjectType.PROPERTY, ["user"], from_fallback=True)
        assert score("name", "property", ctx) == 30
        assert score("log", "method", ctx) == 12

    def test_ranked_items_carry_scores(self) -> None:
        items = _by_label(rank(_ctx(ObjectType.PROPERTY, ["console"])))
        assert items["log"].rank_score == 12


# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------


def _item(label: str) -> CompletionItem:
    return CompletionItem(label=label, insert_text=label, kind="variable")


class TestFilter:
    ITEMS = [_item("log"), _item("Logger"), _item("catalog"), _item("warn")]

    def test_empty_token_keeps_all(self) -> None:
        assert filter_completions(self.ITEMS, "") == self.ITEMS

    def test_case_insensitive_substring(self) -> None:
        assert _labels(filter_completions(self.ITEMS, "LOG")) == ["log", "Logger", "catalog"]

    def test_every_prefix_match_survives(self) -> None:
        token = "lo"
        survivors = set(_labels(filter_completions(self.ITEMS, token)))
        for item in self.ITEMS:
            if item.label.lower().startswith(token):
                assert item.label in survivors

    def test_no_match(self) -> None:
        assert filter_completions(self.ITEMS, "zzz") == []

    def test_returns_new_list(self) -> None:
        result = filter_completions(self.ITEMS, "")
        assert result is not self.ITEMS


def test_item_to_dict() -> None:
    item = CompletionItem(label="log", insert_text="log", kind="method", detail="console.log", rank_score=12)
    assert item.to_dict() == {
        "label": "log",
        "insert_text": "log",
        "kind": "method",
        "detail": "console.log",
        "documentation": None,
        "rank_score": 12,
    }
