"""
Utility functions and helpers.

This module contains shared utilities used across SchemaSmith components.

Components:
    - json_utils: JSON Pointer escaping, path formatting and strict JSON equality

Example:
    ```python
    from schemasmith.utils import escape_json_pointer, json_equal

    escape_json_pointer("a/b~c")  # "a~1b~0c"
    json_equal({"a": 1}, {"a": True})  # False, booleans are not numbers
    ```
"""

from schemasmith.utils.json_utils import (
    escape_json_pointer,
    format_path,
    json_equal,
    unescape_json_pointer,
)

__all__ = [
    "escape_json_pointer",
    "unescape_json_pointer",
    "format_path",
    "json_equal",
]
