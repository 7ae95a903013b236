"""
JSON helpers shared by the compiler, converter and rewriter.
"""

import json
from typing import Any, Sequence, Union

PathSegment = Union[str, int]


def escape_json_pointer(identifier: str) -> str:
    """
    Escape an identifier so it can be embedded in a JSON Pointer.

    Args:
        identifier: Raw definition name

    Returns:
        str: Identifier with "~" replaced by "~0" and "/" by "~1"

    Example:
        ```python
        escape_json_pointer("a/b")  # "a~1b"
        ```
    """
    return identifier.replace("~", "~0").replace("/", "~1")


def unescape_json_pointer(token: str) -> str:
    """Inverse of escape_json_pointer()."""
    return token.replace("~1", "/").replace("~0", "~")


def format_path(path: Sequence[PathSegment]) -> str:
    """
    Format a traversal path for error messages.

    Args:
        path: Property names and array indices from the document root

    Returns:
        str: "root" for an empty path, otherwise e.g. '["a"][0]["b"]'
    """
    if not path:
        return "root"
    return "".join(
        f"[{segment}]" if isinstance(segment, int) and not isinstance(segment, bool)
        else f"[{json.dumps(str(segment))}]"
        for segment in path
    )


def json_equal(a: Any, b: Any) -> bool:
    """
    Structural equality over JSON values.

    Python's == treats True == 1 and 1 == 1.0; JSON Schema keywords such as
    `additionalProperties: true` and `minimum: 1` must not compare equal,
    so booleans are only equal to booleans.

    Args:
        a: First JSON value
        b: Second JSON value

    Returns:
        bool: True if both values have the same JSON structure and content
    """
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b

    if isinstance(a, dict):
        if not isinstance(b, dict) or a.keys() != b.keys():
            return False
        return all(json_equal(a[key], b[key]) for key in a)

    if isinstance(a, (list, tuple)):
        if not isinstance(b, (list, tuple)) or len(a) != len(b):
            return False
        return all(json_equal(x, y) for x, y in zip(a, b))

    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        return a == b

    return type(a) is type(b) and a == b
