"""Fixed knowledge tables: built-in globals, type members, keywords, and the
attribute/directive vocabularies of the component dialects."""

from __future__ import annotations

from typing import NamedTuple


class Member(NamedTuple):
    name: str
    kind: str  # "method" | "property"
    documentation: str


def _methods(*pairs: tuple[str, str]) -> tuple[Member, ...]:
    return tuple(Member(name, "method", doc) for name, doc in pairs)


GLOBAL_OBJECTS: tuple[tuple[str, str], ...] = (
    ("console", "Console object for logging"),
    ("window", "Window object"),
    ("document", "Document object"),
    ("Math", "Math object"),
    ("Date", "Date constructor"),
    ("Array", "Array constructor"),
    ("Object", "Object constructor"),
    ("String", "String constructor"),
    ("Number", "Number constructor"),
    ("Boolean", "Boolean constructor"),
    ("Promise", "Promise constructor"),
    ("Set", "Set constructor"),
    ("Map", "Map constructor"),
    ("WeakMap", "WeakMap constructor"),
    ("WeakSet", "WeakSet constructor"),
    ("Symbol", "Symbol constructor"),
    ("RegExp", "Regular expression constructor"),
    ("Error", "Error constructor"),
    ("JSON", "JSON object"),
)

COMMON_KEYWORDS: tuple[str, ...] = (
    "const", "let", "var", "function", "class", "if", "else", "for", "while",
    "do", "switch", "case", "default", "break", "continue", "return", "try",
    "catch", "finally", "throw", "new", "delete", "typeof", "instanceof", "in",
    "of", "import", "export", "async", "await", "yield", "super", "this",
    "null", "undefined", "true", "false",
)

TYPED_KEYWORDS: tuple[str, ...] = (
    "interface", "type", "enum", "namespace", "module", "declare", "abstract",
    "implements", "extends", "public", "private", "protected", "readonly",
    "static", "get", "set", "keyof", "infer",
)

STRING_MEMBERS: tuple[Member, ...] = (
    Member("length", "property", "String length"),
) + _methods(
    ("charAt", "Returns character at index"),
    ("charCodeAt", "Returns Unicode value"),
    ("concat", "Joins strings"),
    ("indexOf", "Returns first occurrence index"),
    ("lastIndexOf", "Returns last occurrence index"),
    ("includes", "Checks if contains substring"),
    ("startsWith", "Checks if starts with substring"),
    ("endsWith", "Checks if ends with substring"),
    ("slice", "Extracts a section of a string"),
    ("substring", "Extracts characters"),
    ("toLowerCase", "Converts to lowercase"),
    ("toUpperCase", "Converts to uppercase"),
    ("trim", "Removes whitespace"),
    ("replace", "Replaces substrings"),
    ("split", "Splits string into array"),
)

ARRAY_MEMBERS: tuple[Member, ...] = (
    Member("length", "property", "Array length"),
) + _methods(
    ("push", "Adds elements to the end of an array"),
    ("pop", "Removes the last element from an array"),
    ("shift", "Removes the first element from an array"),
    ("unshift", "Adds elements to the beginning of an array"),
    ("slice", "Extracts a section of an array"),
    ("splice", "Changes array contents"),
    ("concat", "Merges arrays"),
    ("join", "Joins array elements into string"),
    ("reverse", "Reverses array order"),
    ("sort", "Sorts array elements"),
    ("indexOf", "Returns first index of element"),
    ("lastIndexOf", "Returns last index of element"),
    ("forEach", "Calls function for each element"),
    ("map", "Creates new array with results"),
    ("filter", "Creates new array with filtered elements"),
    ("reduce", "Reduces array to single value"),
    ("find", "Returns first element that passes test"),
    ("findIndex", "Returns index of first element that passes test"),
    ("includes", "Checks if array contains element"),
)

OBJECT_MEMBERS: tuple[Member, ...] = _methods(
    ("hasOwnProperty", "Checks if has property"),
    ("isPrototypeOf", "Checks prototype chain"),
    ("propertyIsEnumerable", "Checks if property is enumerable"),
    ("toLocaleString", "Returns localized string"),
    ("toString", "Returns string representation"),
    ("valueOf", "Returns primitive value"),
)

NUMBER_MEMBERS: tuple[Member, ...] = _methods(
    ("toFixed", "Formats number with fixed decimals"),
    ("toPrecision", "Formats number with specified precision"),
    ("toExponential", "Formats number in exponential notation"),
    ("toString", "Converts to string"),
    ("valueOf", "Returns primitive value"),
)

TYPE_MEMBERS: dict[str, tuple[Member, ...]] = {
    "string": STRING_MEMBERS,
    "array": ARRAY_MEMBERS,
    "object": OBJECT_MEMBERS,
    "number": NUMBER_MEMBERS,
}

GLOBAL_MEMBERS: dict[str, tuple[Member, ...]] = {
    "console": _methods(
        ("log", "Logs a message to the console"),
        ("error", "Logs an error message to the console"),
        ("warn", "Logs a warning message to the console"),
        ("info", "Logs an info message to the console"),
        ("debug", "Logs a debug message to the console"),
        ("table", "Displays tabular data"),
        ("clear", "Clears the console"),
    ),
    "document": _methods(
        ("getElementById", "Gets an element by its ID"),
        ("getElementsByClassName", "Gets elements by their class name"),
        ("getElementsByTagName", "Gets elements by their tag name"),
        ("querySelector", "Selects the first element that matches a CSS selector"),
        ("querySelectorAll", "Selects all elements that match a CSS selector"),
        ("createElement", "Creates a new element"),
        ("addEventListener", "Registers an event handler"),
    ),
    "Math": _methods(
        ("floor", "Returns the largest integer less than or equal to a number"),
        ("ceil", "Returns the smallest integer greater than or equal to a number"),
        ("round", "Rounds a number to the nearest integer"),
        ("random", "Returns a random number between 0 and 1"),
        ("abs", "Returns the absolute value of a number"),
        ("max", "Returns the largest of zero or more numbers"),
        ("min", "Returns the smallest of zero or more numbers"),
        ("pow", "Returns base to the exponent power"),
        ("sqrt", "Returns the square root of a number"),
    ) + (Member("PI", "property", "Ratio of a circle's circumference to its diameter"),),
    "JSON": _methods(
        ("parse", "Parses a JSON string"),
        ("stringify", "Converts a value to a JSON string"),
    ),
    "Object": _methods(
        ("keys", "Returns own enumerable property names"),
        ("values", "Returns own enumerable property values"),
        ("entries", "Returns own enumerable [key, value] pairs"),
        ("assign", "Copies properties onto a target object"),
        ("create", "Creates an object with the given prototype"),
        ("freeze", "Freezes an object"),
        ("defineProperty", "Defines a property on an object"),
        ("getPrototypeOf", "Returns the prototype of an object"),
    ),
    "Array": _methods(
        ("isArray", "Checks whether a value is an array"),
        ("from", "Creates an array from an iterable"),
        ("of", "Creates an array from its arguments"),
    ),
}

JSX_ATTRIBUTES: tuple[str, ...] = (
    "className", "style", "onClick", "onChange", "onSubmit", "onKeyDown",
    "onKeyUp", "onKeyPress", "onFocus", "onBlur", "onMouseEnter",
    "onMouseLeave", "disabled", "readOnly", "required", "type", "value",
    "placeholder", "id", "name", "key", "ref",
)

TEMPLATE_DIRECTIVES: tuple[str, ...] = (
    "v-if", "v-else", "v-else-if", "v-show", "v-for", "v-bind", "v-on",
    "v-model", "v-slot", "v-text", "v-html", "v-pre", "v-cloak", "v-once",
)

TEMPLATE_EVENTS: tuple[str, ...] = (
    "@click", "@change", "@submit", "@keydown", "@keyup", "@keypress",
    "@focus", "@blur", "@mouseenter", "@mouseleave", "@input",
)
