"""
Regex compiler - convert template literals and key types to JSON Schema patterns.

The compiler needs regular expressions in two places: the `pattern` keyword of
a compiled TemplateLiteral, and the `patternProperties` keys derived from
index-signature parameters. Both are built here from the AST parts.

Usage:
    ```python
    from schemasmith.schema.types import Primitive, TemplateLiteral
    from schemasmith.schema.regex_compiler import get_template_literal_pattern

    node = TemplateLiteral(["id-", Primitive("number")])
    get_template_literal_pattern(node)
    # '^id-[+-]?\\d*\\.?\\d+(?:[Ee][+-]?\\d+)?$'
    ```

Regex Strategy:
    - Literal text: escaped so it matches itself
    - string holes: [\\s\\S]* (any text, newlines included)
    - number holes: optional sign, digits, optional fraction and exponent
    - integer holes: optional sign and digits
    - Unions: (?:a|b|c)
    - Nested template literals: inlined without anchors

Patterns are written for the ECMA-262 dialect JSON Schema uses, so escaping
is limited to the characters that are special there.
"""

import re
from typing import Any, Union

from schemasmith.schema.types import Literal, Primitive, SchemaNode, TemplateLiteral
from schemasmith.schema.types import Union as UnionNode

STRING_PATTERN = r"[\s\S]*"
NUMBER_PATTERN = r"[+-]?\d*\.?\d+(?:[Ee][+-]?\d+)?"
INTEGER_PATTERN = r"[+-]?\d+"
NUMBER_KEY_PATTERN = r"^[0-9]+$"

_SPECIAL_CHARACTERS = re.compile(r"[/\\^$*+?.()|[\]{}]")


def escape_regex(text: str) -> str:
    """
    Escape the characters that are special in an ECMA-262 pattern.

    Python's re.escape() escapes more than ECMA-262 allows in unicode mode
    (e.g. "\\ " and "\\-"), so it is not used here.

    Args:
        text: Literal text

    Returns:
        str: Pattern matching exactly `text`
    """
    return _SPECIAL_CHARACTERS.sub(lambda m: "\\" + m.group(0), text)


def _literal_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _part_pattern(part: Union[str, SchemaNode]) -> str:
    if isinstance(part, str):
        return escape_regex(part)

    if isinstance(part, Literal):
        return escape_regex(_literal_text(part.value))

    if isinstance(part, Primitive):
        if part.kind == "string":
            return STRING_PATTERN
        if part.kind == "number":
            return NUMBER_PATTERN
        if part.kind == "integer":
            return INTEGER_PATTERN

    if isinstance(part, TemplateLiteral):
        return "".join(_part_pattern(p) for p in part.parts)

    if isinstance(part, UnionNode):
        return "(?:" + "|".join(_part_pattern(m) for m in part.members) + ")"

    raise ValueError(f"Unsupported template literal part {_describe(part)}")


def _describe(part: SchemaNode) -> str:
    if isinstance(part, Primitive):
        return f"{part.tag}({part.kind})"
    return part.tag


def get_template_literal_pattern(node: TemplateLiteral) -> str:
    """
    Build the anchored pattern a TemplateLiteral compiles to.

    Args:
        node: Template literal node

    Returns:
        str: Pattern of the form "^...$"

    Raises:
        ValueError: If a part has no pattern form (e.g. a boolean primitive)

    Example:
        ```python
        node = TemplateLiteral([UnionNode([Literal("a"), Literal("b")]), "-", Primitive("string")])
        get_template_literal_pattern(node)
        # '^(?:a|b)-[\\s\\S]*$'
        ```
    """
    return "^" + "".join(_part_pattern(part) for part in node.parts) + "$"


def validate_regex(regex: str) -> bool:
    """
    Check that a generated pattern is well-formed.

    Args:
        regex: Pattern to check

    Returns:
        bool: True if Python's regex engine accepts it
    """
    try:
        re.compile(regex)
        return True
    except re.error:
        return False
