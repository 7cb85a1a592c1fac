"""Ordered rewrite rules that turn generated JavaScript into Swift."""

from __future__ import annotations

import re
from typing import Optional, Tuple

from .structures import Replacement, RewriteRule, RuleGroup

HEADER = "// Swift code converted from JavaScript\n"

IDENTIFIER = r"[a-zA-Z0-9_]+"
INTERPOLATION_PATTERN = re.compile(r"\$\{([^}]*)\}")
SPLICE_NOTE = "/* splice not directly supported in Swift - use removeSubrange or insert */"


def _rule(name: str, pattern: str, replacement: Replacement, flags: int = 0) -> RewriteRule:
    return RewriteRule(name=name, pattern=re.compile(pattern, flags), replacement=replacement)


def _rename(name: str, source: str, target: str) -> RewriteRule:
    """Literal rename of a call prefix such as ``.push(``."""

    return RewriteRule(name=name, pattern=re.compile(re.escape(source)), replacement=lambda _m: target)


def _interpolate(expression: str) -> str:
    return "\\(" + expression + ")"


def _print_concatenation(match: "re.Match[str]") -> str:
    return f'print("{match.group(1)}{_interpolate(match.group(2))}")'


def _literal_left(match: "re.Match[str]") -> str:
    return f'{match.group(1)} + "{_interpolate(match.group(2))}"'


def _literal_right(match: "re.Match[str]") -> str:
    return f'"{_interpolate(match.group(1))}" + {match.group(2)}'


def _template_literal(match: "re.Match[str]") -> str:
    body = INTERPOLATION_PATTERN.sub(lambda inner: _interpolate(inner.group(1)), match.group(1))
    return '"' + body + '"'


def _array_slice(match: "re.Match[str]") -> str:
    start: str = match.group(1)
    end: Optional[str] = match.group(2)
    if end:
        return f".prefix({end}).suffix(from: {start})"
    return f".suffix(from: {start})"


DECLARATIONS = RuleGroup(
    "declarations",
    (
        _rule("var", rf"var\s+({IDENTIFIER})\s*=\s*([^;]+);", r"var \1 = \2"),
        _rule("let", rf"let\s+({IDENTIFIER})\s*=\s*([^;]+);", r"let \1 = \2"),
        _rule("const", rf"const\s+({IDENTIFIER})\s*=\s*([^;]+);", r"let \1 = \2"),
    ),
)

TERMINATORS = RuleGroup(
    "terminators",
    (_rule("semicolon", r";", ""),),
)

FUNCTIONS = RuleGroup(
    "functions",
    (_rule("function", rf"function\s+({IDENTIFIER})\s*\(([^)]*)\)\s*\{{", r"func \1(\2) {"),),
)

ARROW_FUNCTIONS = RuleGroup(
    "arrow-functions",
    (_rule("arrow", r"\(([^)]*)\)\s*=>\s*\{", r"func(\1) {"),),
)

OUTPUT_CALLS = RuleGroup(
    "output-calls",
    (
        _rule("console-log", r"(?:console\.log|window\.alert)\s*\(([^)]*)\)", r"print(\1)"),
        _rule("document-write", r"document\.write\s*\(([^)]*)\)", r"print(\1)"),
        _rule("alert", r"alert\s*\(([^)]*)\)", r"print(\1)"),
    ),
)

PRINT_QUOTES = RuleGroup(
    "print-quotes",
    (_rule("single-quoted", r"print\('([^']*)'\)", r'print("\1")'),),
)

CONCATENATION = RuleGroup(
    "concatenation",
    (
        _rule("print-literal-plus", r'print\("([^"]*)"\s*\+\s*([^)]*)\)', _print_concatenation),
        _rule("literal-left", r'("[^"]*")\s*\+\s*([^\s;,)]+)', _literal_left),
        _rule("literal-right", r'([^\s;,+()]+)\s*\+\s*("[^"]*")', _literal_right),
    ),
)

TEMPLATE_LITERALS = RuleGroup(
    "template-literals",
    (_rule("backtick", r"`([^`]*)`", _template_literal),),
)

CONDITIONALS = RuleGroup(
    "conditionals",
    (
        _rule("if", r"if\s*\(([^)]*)\)\s*\{", r"if \1 {"),
        _rule("else-if", r"\}\s*else\s*if\s*\(([^)]*)\)\s*\{", r"} else if \1 {"),
        _rule("else", r"\}\s*else\s*\{", "} else {"),
    ),
)

FOR_LOOPS = RuleGroup(
    "for-loops",
    (
        _rule(
            "c-style",
            rf"for\s*\(let\s+({IDENTIFIER})\s*=\s*([^;]+);\s*([^;]+);\s*([^)]*)\)\s*\{{",
            r"for var \1 = \2; \3; \4 {",
        ),
        _rule("for-of", rf"for\s*\(let\s+({IDENTIFIER})\s+of\s+([^)]*)\)\s*\{{", r"for \1 in \2 {"),
        _rule("for-in", rf"for\s*\(let\s+({IDENTIFIER})\s+in\s+([^)]*)\)\s*\{{", r"for \1 in \2 {"),
    ),
)

WHILE_LOOPS = RuleGroup(
    "while-loops",
    (
        _rule("while", r"while\s*\(([^)]*)\)\s*\{", r"while \1 {"),
        _rule("do-while", r"do\s*\{([^}]*)\}\s*while\s*\(([^)]*)\);?", r"repeat {\1} while \2"),
    ),
)

ARRAY_METHODS = RuleGroup(
    "array-methods",
    (
        _rule("forEach-closure", r"\.forEach\(([^=>]+?)\s*=>\s*\{([^}]*)\}\)", r".forEach { \1 in\2}"),
        _rule("map-closure", r"\.map\(([^=>]+?)\s*=>\s*\{([^}]*)\}\)", r".map { \1 in\2}"),
        _rule("filter-closure", r"\.filter\(([^=>]+?)\s*=>\s*\{([^}]*)\}\)", r".filter { \1 in\2}"),
        _rename("push", ".push(", ".append("),
        _rename("pop", ".pop()", ".popLast()"),
        _rename("shift", ".shift()", ".removeFirst()"),
        _rename("unshift", ".unshift(", ".insert(at: 0, "),
        _rule("join", r"\.join\(([^)]*)\)", r".joined(separator: \1)"),
        _rename("indexOf", ".indexOf(", ".firstIndex(of: "),
        _rename("lastIndexOf", ".lastIndexOf(", ".lastIndex(of: "),
        _rename("includes", ".includes(", ".contains("),
        _rule("slice", r"\.slice\(([^,]+)(?:,\s*([^)]*))?\)", _array_slice),
        _rename("splice", ".splice(", SPLICE_NOTE),
        _rename("reverse", ".reverse()", ".reversed()"),
        _rename("sort", ".sort()", ".sorted()"),
    ),
)

COLLECTION_LITERALS = RuleGroup(
    "collection-literals",
    (
        _rule("new-array", r"new Array\(([^)]*)\)", r"[\1]"),
        _rename("empty-object", "{}", "[:]"),
        _rename("new-object", "new Object()", "[:]"),
    ),
)

STRING_METHODS = RuleGroup(
    "string-methods",
    (
        _rename("substring", ".substring(", ".substring("),
        _rename("substr", ".substr(", ".substring(from: "),
        _rename("toUpperCase", ".toUpperCase()", ".uppercased()"),
        _rename("toLowerCase", ".toLowerCase()", ".lowercased()"),
        _rename("trim", ".trim()", ".trimmingCharacters(in: .whitespacesAndNewlines)"),
        _rule("replace", r"\.replace\(([^,]+),\s*([^)]+)\)", r".replacingOccurrences(of: \1, with: \2)"),
        _rule("split", r"\.split\(([^)]+)\)", r".split(separator: \1)"),
        _rule("charAt", r"\.charAt\(([^)]+)\)", r"[\1]"),
        _rule("slice", r"\.slice\(([^)]+)\)", r".dropFirst(\1)"),
        _rule("startsWith", r"\.startsWith\(([^)]+)\)", r".hasPrefix(\1)"),
        _rule("endsWith", r"\.endsWith\(([^)]+)\)", r".hasSuffix(\1)"),
    ),
)

LENGTH = RuleGroup(
    "length",
    (_rename("length", ".length", ".count"),),
)

MATH = RuleGroup(
    "math",
    (
        _rename("abs", "Math.abs(", "abs("),
        _rename("sqrt", "Math.sqrt(", "sqrt("),
        _rule("pow", r"Math\.pow\(([^,]+),\s*([^)]+)\)", r"pow(\1, \2)"),
        _rename("floor", "Math.floor(", "floor("),
        _rename("ceil", "Math.ceil(", "ceil("),
        _rename("round", "Math.round(", "round("),
        _rename("random", "Math.random()", "Double.random(in: 0..<1)"),
        _rename("min", "Math.min(", "min("),
        _rename("max", "Math.max(", "max("),
        _rename("sin", "Math.sin(", "sin("),
        _rename("cos", "Math.cos(", "cos("),
        _rename("tan", "Math.tan(", "tan("),
        _rename("log", "Math.log(", "log("),
        _rename("log10", "Math.log10(", "log10("),
        _rename("exp", "Math.exp(", "exp("),
        _rename("pi", "Math.PI", "Double.pi"),
        # Kept as the C constant rather than Foundation's Double.e spelling.
        _rename("e", "Math.E", "M_E"),
        _rule("exponent", r"(\w+)\s*\*\*\s*(\w+)", r"pow(\1, \2)", re.ASCII),
        _rule("modulo", r"(\w+)\s*%\s*(\w+)", r"\1.truncatingRemainder(dividingBy: \2)", re.ASCII),
    ),
)

INCREMENTS = RuleGroup(
    "increments",
    (
        _rule("postfix-increment", rf"({IDENTIFIER})\+\+", r"\1 += 1"),
        _rule("postfix-decrement", rf"({IDENTIFIER})--", r"\1 -= 1"),
        _rule("prefix-increment", rf"\+\+({IDENTIFIER})", r"\1 += 1"),
        _rule("prefix-decrement", rf"--({IDENTIFIER})", r"\1 -= 1"),
    ),
)

NIL = RuleGroup(
    "nil",
    (
        _rule("null-identity", r"([a-zA-Z0-9_\.]+)\s*===\s*null", r"\1 == nil"),
        _rule("null-non-identity", r"([a-zA-Z0-9_\.]+)\s*!==\s*null", r"\1 != nil"),
        _rule("undefined-identity", r"([a-zA-Z0-9_\.]+)\s*===\s*undefined", r"\1 == nil"),
        _rule("undefined-non-identity", r"([a-zA-Z0-9_\.]+)\s*!==\s*undefined", r"\1 != nil"),
        _rename("null", "null", "nil"),
        _rename("undefined", "undefined", "nil"),
    ),
)

EQUALITY = RuleGroup(
    "equality",
    (
        _rule("strict-equal", r"===\s", "== "),
        _rule("strict-not-equal", r"!==\s", "!= "),
    ),
)

TERNARY = RuleGroup(
    "ternary",
    (_rule("conditional", r"([^\s]+)\s*\?\s*([^:]+?)\s*:\s*([^;\s]+)", r"\1 ? \2 : \3"),),
)

SWITCH = RuleGroup(
    "switch",
    (
        _rule("switch", r"switch\s*\(([^)]*)\)\s*\{", r"switch \1 {"),
        _rule("case", r"case\s+([^:]+):", r"case \1:"),
        _rule("break", r"break;?", "break"),
    ),
)

HEADER_COMMENT = RuleGroup(
    "header",
    (_rule("header", r"\A", lambda _m: HEADER),),
)

RULE_GROUPS: Tuple[RuleGroup, ...] = (
    DECLARATIONS,
    TERMINATORS,
    FUNCTIONS,
    ARROW_FUNCTIONS,
    OUTPUT_CALLS,
    PRINT_QUOTES,
    CONCATENATION,
    TEMPLATE_LITERALS,
    CONDITIONALS,
    FOR_LOOPS,
    WHILE_LOOPS,
    ARRAY_METHODS,
    COLLECTION_LITERALS,
    STRING_METHODS,
    LENGTH,
    MATH,
    INCREMENTS,
    NIL,
    EQUALITY,
    TERNARY,
    SWITCH,
    HEADER_COMMENT,
)
