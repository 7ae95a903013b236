"""
Annotation accessors.

Nodes carry an open annotations dict. The compiler only reads two views of
it: the identifier (which names a definition) and the JSON Schema
annotations (which are copied onto the compiled fragment).
"""

from typing import Any, Dict, Optional, Set

from schemasmith.schema.types import SchemaNode, Suspend

JSON_SCHEMA_ANNOTATION_KEYS = ("title", "description", "default", "examples")


def get_identifier(node: SchemaNode) -> Optional[str]:
    """
    Return the identifier of a node.

    A Suspend without its own identifier takes the identifier of the node its
    thunk returns, following chains of Suspend nodes.

    Args:
        node: AST node

    Returns:
        Optional[str]: Identifier, or None if the node is anonymous
    """
    seen: Set[int] = set()
    while True:
        identifier = node.annotations.get("identifier")
        if isinstance(identifier, str):
            return identifier
        if not isinstance(node, Suspend) or id(node) in seen:
            return None
        seen.add(id(node))
        node = node.resolve()


def get_json_schema_annotations(annotations: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Extract the annotations that are emitted as JSON Schema keywords.

    Args:
        annotations: Annotations of a node, property key, element or check

    Returns:
        Optional[Dict]: title/description/default/examples that are present,
            or None if there are none

    Example:
        ```python
        get_json_schema_annotations({"identifier": "A", "title": "a", "default": None})
        # {"title": "a", "default": None}
        ```
    """
    out: Dict[str, Any] = {}

    title = annotations.get("title")
    if isinstance(title, str):
        out["title"] = title

    description = annotations.get("description")
    if isinstance(description, str):
        out["description"] = description

    if "default" in annotations:
        out["default"] = annotations["default"]

    examples = annotations.get("examples")
    if isinstance(examples, (list, tuple)):
        out["examples"] = list(examples)

    return out or None
