"""Scope builder: a flat declaration table for one parsed unit.

All declarations anywhere in the unit land in a single table; entering a
function or block body does not open a nested scope.  A later declaration of
the same name replaces the earlier one, so two functions that each declare a
local ``i`` collide and the second wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from livepen.core.parsers.base import (
    CLASS_DECLARATION_KINDS,
    FUNCTION_DECLARATION_KINDS,
    FUNCTION_EXPRESSION_KINDS,
    VARIABLE_DECLARATION_KINDS,
    ASTNode,
)

logger = logging.getLogger(__name__)

# Coarse type tags inferred from the literal shape of an initializer.
_LITERAL_TYPES: dict[str, str] = {
    "string": "string",
    "template_string": "string",
    "number": "number",
    "true": "boolean",
    "false": "boolean",
    "array": "array",
    "object": "object",
    "null": "null",
}

_PLACEHOLDER_PARAM = "param"


@dataclass
class VariableInfo:
    """A declared variable."""

    name: str
    type: str = "any"  # string|number|boolean|array|object|function|null|any
    kind: str = "var"  # const|let|var
    properties: dict[str, str] = field(default_factory=dict)  # object-literal keys


@dataclass
class ParameterInfo:
    name: str
    type: str | None = None
    default: str | None = None


@dataclass
class FunctionInfo:
    name: str
    parameters: list[ParameterInfo] = field(default_factory=list)
    return_type: str | None = None

    def signature(self) -> str:
        params = ", ".join(p.name for p in self.parameters)
        return f"function {self.name}({params})"


@dataclass
class MethodInfo:
    name: str
    parameters: list[ParameterInfo] = field(default_factory=list)
    is_static: bool = False


@dataclass
class PropertyInfo:
    name: str
    type: str = "any"
    is_static: bool = False


@dataclass
class ClassInfo:
    name: str
    extends: str | None = None
    methods: dict[str, MethodInfo] = field(default_factory=dict)
    properties: dict[str, PropertyInfo] = field(default_factory=dict)

    def signature(self) -> str:
        if self.extends:
            return f"class {self.name} extends {self.extends}"
        return f"class {self.name}"


@dataclass
class ImportInfo:
    """A parsed import statement."""

    module: str
    members: list[str] = field(default_factory=list)
    is_default: bool = False
    alias: str | None = None


@dataclass
class ScopeTable:
    """Flat declaration table for one analysis call."""

    variables: dict[str, VariableInfo] = field(default_factory=dict)
    functions: dict[str, FunctionInfo] = field(default_factory=dict)
    classes: dict[str, ClassInfo] = field(default_factory=dict)
    imports: list[ImportInfo] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.variables or self.functions or self.classes or self.imports)


def build_scope(root: ASTNode | None) -> ScopeTable:
    """Traverse *root* once and collect every declaration into a flat table."""
    scope = ScopeTable()
    if root is not None:
        _ScopeBuilder(scope).visit(root)
    logger.debug(
        "Scope built: %d variables, %d functions, %d classes, %d imports",
        len(scope.variables),
        len(scope.functions),
        len(scope.classes),
        len(scope.imports),
    )
    return scope


def infer_type(value: ASTNode | None) -> str:
    """Return the coarse type tag for an initializer node."""
    if value is None:
        return "any"
    if value.kind in FUNCTION_EXPRESSION_KINDS:
        return "function"
    return _LITERAL_TYPES.get(value.kind, "any")


def object_properties(value: ASTNode | None) -> dict[str, str]:
    """Map the keys of an object literal to the coarse type of their values."""
    if value is None or value.kind != "object":
        return {}
    properties: dict[str, str] = {}
    for member in value.iter_children():
        if member.kind == "pair":
            key = _key_name(member.field("key"))
            if key:
                properties[key] = infer_type(member.field("value"))
        elif member.kind == "shorthand_property_identifier":
            properties[member.text] = "any"
        elif member.kind == "method_definition":
            key = _key_name(member.field("name"))
            if key:
                properties[key] = "function"
    return properties


class _ScopeBuilder:
    def __init__(self, scope: ScopeTable) -> None:
        self.scope = scope

    def visit(self, root: ASTNode) -> None:
        # Pre-order: a later declaration of the same name replaces an earlier one.
        for node, _parent in root.walk():
            kind = node.kind
            if kind in VARIABLE_DECLARATION_KINDS:
                self._variable_declaration(node)
            elif kind in FUNCTION_DECLARATION_KINDS:
                self._function_declaration(node)
            elif kind in CLASS_DECLARATION_KINDS:
                self._class_declaration(node)
            elif kind == "import_statement":
                self._import_statement(node)

    def _variable_declaration(self, node: ASTNode) -> None:
        decl_kind = "var"
        for token in node.tokens:
            if token in ("const", "let", "var"):
                decl_kind = token
                break

        for declarator in node.iter_children():
            if declarator.kind != "variable_declarator":
                continue
            name_node = declarator.field("name")
            if name_node is None or name_node.kind != "identifier":
                # Destructuring patterns are not tracked.
                continue
            value = declarator.field("value")
            self.scope.variables[name_node.text] = VariableInfo(
                name=name_node.text,
                type=infer_type(value),
                kind=decl_kind,
                properties=object_properties(value),
            )

    def _function_declaration(self, node: ASTNode) -> None:
        name_node = node.field("name")
        if name_node is None or not name_node.text:
            return
        self.scope.functions[name_node.text] = FunctionInfo(
            name=name_node.text,
            parameters=extract_parameters(node.field("parameters")),
            return_type=_annotation_name(node.field("return_type")),
        )

    def _class_declaration(self, node: ASTNode) -> None:
        name_node = node.field("name")
        if name_node is None or not name_node.text:
            return
        info = ClassInfo(name=name_node.text, extends=_superclass_name(node))

        body = node.field("body")
        if body is not None:
            for member in body.iter_children():
                is_static = "static" in member.tokens
                if member.kind in ("method_definition", "method_signature", "abstract_method_signature"):
                    method_name = _key_name(member.field("name"))
                    if method_name:
                        info.methods[method_name] = MethodInfo(
                            name=method_name,
                            parameters=extract_parameters(member.field("parameters")),
                            is_static=is_static,
                        )
                elif member.kind in ("field_definition", "public_field_definition"):
                    prop_node = member.field("property") or member.field("name")
                    prop_name = _key_name(prop_node)
                    if prop_name:
                        info.properties[prop_name] = PropertyInfo(
                            name=prop_name,
                            type=infer_type(member.field("value")),
                            is_static=is_static,
                        )

        self.scope.classes[info.name] = info

    def _import_statement(self, node: ASTNode) -> None:
        source_node = node.field("source")
        info = ImportInfo(module=_string_value(source_node) if source_node else "")

        for clause in node.iter_children():
            if clause.kind != "import_clause":
                continue
            for spec in clause.iter_children():
                if spec.kind == "identifier":
                    # import Foo from '...'
                    info.is_default = True
                    info.members.append("default")
                    info.alias = spec.text
                elif spec.kind == "named_imports":
                    for item in spec.iter_children():
                        if item.kind != "import_specifier":
                            continue
                        imported = item.field("name")
                        local = item.field("alias")
                        if imported is None:
                            continue
                        info.members.append(imported.text)
                        if local is not None and local.text != imported.text:
                            info.alias = local.text
                elif spec.kind == "namespace_import":
                    # import * as utils from '...'
                    for ns_child in spec.iter_children():
                        if ns_child.kind == "identifier":
                            info.members.append("*")
                            info.alias = ns_child.text
                            break

        self.scope.imports.append(info)


def extract_parameters(params: ASTNode | None) -> list[ParameterInfo]:
    """Best-effort parameter extraction; destructured parameters become ``param``."""
    if params is None:
        return []
    result: list[ParameterInfo] = []
    for param in params.iter_children():
        if param.kind == "identifier":
            result.append(ParameterInfo(name=param.text))
        elif param.kind == "assignment_pattern":
            left = param.field("left")
            right = param.field("right")
            name = left.text if left is not None and left.kind == "identifier" else _PLACEHOLDER_PARAM
            result.append(ParameterInfo(name=name, default=right.text if right and right.text else None))
        elif param.kind == "rest_pattern":
            inner = next((c for c in param.iter_children() if c.kind == "identifier"), None)
            result.append(ParameterInfo(name=inner.text if inner else _PLACEHOLDER_PARAM))
        elif param.kind in ("required_parameter", "optional_parameter"):
            pattern = param.field("pattern")
            name = pattern.text if pattern is not None and pattern.kind == "identifier" else _PLACEHOLDER_PARAM
            value = param.field("value")
            result.append(
                ParameterInfo(
                    name=name,
                    type=_annotation_name(param.field("type")),
                    default=value.text if value and value.text else None,
                )
            )
        elif param.kind in ("object_pattern", "array_pattern"):
            result.append(ParameterInfo(name=_PLACEHOLDER_PARAM))
    return result


def _superclass_name(node: ASTNode) -> str | None:
    for child in node.iter_children():
        if child.kind != "class_heritage":
            continue
        for sub in child.iter_children():
            if sub.kind == "implements_clause":
                continue
            if sub.kind == "extends_clause":
                # TypeScript: class_heritage -> extends_clause -> value
                sub = sub.field("value") or sub
            return dotted_name(sub) or "unknown"
    return None


def dotted_name(node: ASTNode | None) -> str:
    """Render an identifier or member-access chain as ``a.b.c``."""
    parts: list[str] = []
    while node is not None and node.kind == "member_expression":
        prop = node.field("property")
        if prop is None or not prop.text:
            return ""
        parts.append(prop.text)
        node = node.field("object")
    if node is None or node.kind not in ("identifier", "type_identifier", "this") or not node.text:
        return ""
    parts.append(node.text)
    return ".".join(reversed(parts))


def _annotation_name(annotation: ASTNode | None) -> str | None:
    """Return the simple type name from a ``type_annotation`` node."""
    if annotation is None:
        return None
    for child in annotation.iter_children():
        if child.kind in ("type_identifier", "predefined_type", "identifier") and child.text:
            return child.text
    return None


def _key_name(node: ASTNode | None) -> str:
    if node is None:
        return ""
    if node.kind in ("string", "template_string"):
        return _string_value(node)
    return node.text


def _string_value(string_node: ASTNode) -> str:
    """Extract the raw value of a ``string`` node (``string -> string_fragment``)."""
    for child in string_node.iter_children():
        if child.kind == "string_fragment":
            return child.text
    text = string_node.text
    if len(text) >= 2 and text[0] in ("'", '"', "`") and text[-1] == text[0]:
        return text[1:-1]
    return text
