"""
Dialect converter - normalize draft-07 and OpenAPI 3.0 schemas to draft 2020-12.

The converter works on already-serialized JSON values, not on the AST. Every
function is pure: the input is never mutated and a new value is returned.
Malformed input is passed through rather than rejected.

Usage:
    ```python
    from schemasmith.schema.converter import from_draft07, from_openapi3_0

    from_draft07({"type": "array", "items": [{"type": "string"}], "additionalItems": {"type": "number"}})
    # {"type": "array", "prefixItems": [{"type": "string"}], "items": {"type": "number"}}

    from_openapi3_0({"type": "string", "nullable": True})
    # {"type": ["string", "null"]}
    ```

draft-07 → 2020-12:
    - `$schema` is dropped
    - `#/definitions/...` refs become `#/$defs/...`
    - `definitions` becomes `$defs` (dropped when it is not an object)
    - tuple `items: [...]` becomes `prefixItems`, `additionalItems` becomes `items`
    - `additionalItems` next to a single-schema `items`, or without `items`, is dropped

OpenAPI 3.0 → 2020-12 (after the draft-07 rules):
    - boolean `exclusiveMinimum` / `exclusiveMaximum` become numeric bounds
    - `nullable: true` widens `enum`, `type` or wraps the node in anyOf
    - only schema positions are walked, so `x-*` vendor extensions and
      other unknown keywords are left untouched
"""

import logging
from typing import Any, Dict

from schemasmith.schema.document import Dialect, Document, Fragment, get_pointer

logger = logging.getLogger(__name__)

DRAFT_07_REF_PREFIX = "#/definitions/"
DEFS_REF_PREFIX = "#/$defs/"

SCHEMA_ARRAY_KEYWORDS = ("allOf", "anyOf", "oneOf")
SCHEMA_KEYWORDS = (
    "not",
    "if",
    "then",
    "else",
    "contains",
    "propertyNames",
    "additionalProperties",
    "unevaluatedProperties",
    "unevaluatedItems",
)
SCHEMA_MAP_KEYWORDS = ("properties", "patternProperties", "$defs", "dependentSchemas")


def from_draft07(schema: Any) -> Any:
    """
    Convert a draft-07 schema to draft 2020-12.

    Args:
        schema: draft-07 JSON value (object or boolean schema)

    Returns:
        Any: Equivalent draft 2020-12 value

    Example:
        ```python
        from_draft07({"$ref": "#/definitions/A", "definitions": {"A": {"type": "string"}}})
        # {"$ref": "#/$defs/A", "$defs": {"A": {"type": "string"}}}
        ```
    """
    if not isinstance(schema, dict):
        return schema

    out: Dict[str, Any] = {}
    has_definitions = False
    definitions = None
    has_items = False
    items = None
    has_additional_items = False
    additional_items = None

    for key, value in schema.items():
        if key == "$schema":
            continue
        elif key == "$ref":
            if isinstance(value, str) and value.startswith(DRAFT_07_REF_PREFIX):
                out[key] = DEFS_REF_PREFIX + value[len(DRAFT_07_REF_PREFIX):]
            else:
                out[key] = value
        elif key == "definitions":
            has_definitions = True
            definitions = value
        elif key == "items":
            has_items = True
            items = value
        elif key == "additionalItems":
            has_additional_items = True
            additional_items = value
        elif key in SCHEMA_ARRAY_KEYWORDS:
            out[key] = [from_draft07(v) for v in value] if isinstance(value, list) else value
        elif key in SCHEMA_KEYWORDS:
            out[key] = from_draft07(value)
        elif key in SCHEMA_MAP_KEYWORDS:
            out[key] = _map_values(value)
        else:
            out[key] = value

    if has_items:
        if isinstance(items, list):
            out["prefixItems"] = [from_draft07(v) for v in items]
            if has_additional_items:
                out["items"] = from_draft07(additional_items)
        elif isinstance(items, (dict, bool)):
            out["items"] = from_draft07(items)
        else:
            out["items"] = items

    if has_definitions and isinstance(definitions, dict):
        converted = _map_values(definitions)
        existing = out.get("$defs")
        out["$defs"] = {**existing, **converted} if isinstance(existing, dict) else converted

    return out


def _map_values(value: Any) -> Any:
    if not isinstance(value, dict):
        return value
    return {k: from_draft07(v) for k, v in value.items()}


def from_openapi3_0(schema: Any) -> Any:
    """
    Convert an OpenAPI 3.0 schema object to draft 2020-12.

    Args:
        schema: OpenAPI 3.0 schema (object or boolean schema)

    Returns:
        Any: Equivalent draft 2020-12 value

    Example:
        ```python
        from_openapi3_0({"type": "number", "nullable": True, "minimum": 1, "exclusiveMinimum": True})
        # {"type": ["number", "null"], "exclusiveMinimum": 1}
        ```
    """
    return _openapi_pass(from_draft07(schema))


def _openapi_pass(value: Any) -> Any:
    if not isinstance(value, dict):
        return value

    out: Dict[str, Any] = {}
    for key, v in value.items():
        if key in SCHEMA_ARRAY_KEYWORDS or key == "prefixItems":
            out[key] = [_openapi_pass(s) for s in v] if isinstance(v, list) else v
        elif key in SCHEMA_KEYWORDS or key == "items":
            out[key] = _openapi_pass(v)
        elif key in SCHEMA_MAP_KEYWORDS and isinstance(v, dict):
            out[key] = {name: _openapi_pass(s) for name, s in v.items()}
        else:
            out[key] = v

    out = _convert_exclusive_bound(out, "exclusiveMinimum", "minimum")
    out = _convert_exclusive_bound(out, "exclusiveMaximum", "maximum")
    return _convert_nullable(out)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _convert_exclusive_bound(node: Dict[str, Any], exclusive_key: str, bound_key: str) -> Dict[str, Any]:
    flag = node.get(exclusive_key)
    if not isinstance(flag, bool):
        return node

    out = dict(node)
    if flag is True and _is_number(out.get(bound_key)):
        out[exclusive_key] = out.pop(bound_key)
    else:
        del out[exclusive_key]
    return out


def _convert_nullable(node: Dict[str, Any]) -> Dict[str, Any]:
    if "nullable" not in node:
        return node

    out = {k: v for k, v in node.items() if k != "nullable"}
    if node["nullable"] is not True:
        return out

    enum = out.get("enum")
    json_type = out.get("type")
    if isinstance(enum, list):
        if None not in enum:
            out["enum"] = [*enum, None]
    elif isinstance(json_type, str):
        if json_type != "null":
            out["type"] = [json_type, "null"]
    elif isinstance(json_type, list):
        if "null" not in json_type:
            out["type"] = [*json_type, "null"]
    else:
        out = {"anyOf": [out, {"type": "null"}]}
    return out


def to_draft2020_12(document: Document) -> Document:
    """
    Convert a Document of any supported dialect to draft 2020-12.

    The schema and every definition are converted with the dialect's rules,
    and refs into the dialect's definitions location are re-pointed to
    `#/$defs/`.

    Args:
        document: Source document

    Returns:
        Document: Canonical draft 2020-12 document
    """
    if document.dialect == Dialect.DRAFT_2020_12:
        return Document(Dialect.DRAFT_2020_12, document.schema, dict(document.definitions))

    if document.dialect == Dialect.DRAFT_07:
        convert = from_draft07
    elif document.dialect == Dialect.OPENAPI_3_0:
        convert = lambda fragment: _repoint_refs(from_openapi3_0(fragment), get_pointer(Dialect.OPENAPI_3_0))
    else:
        convert = lambda fragment: _repoint_refs(fragment, get_pointer(Dialect.OPENAPI_3_1))

    logger.debug(f"Converting {len(document.definitions)} definition(s) from {document.dialect.value}")
    return Document(
        dialect=Dialect.DRAFT_2020_12,
        schema=convert(document.schema),
        definitions={name: convert(fragment) for name, fragment in document.definitions.items()},
    )


def _repoint_refs(value: Any, prefix: str) -> Any:
    if isinstance(value, list):
        return [_repoint_refs(v, prefix) for v in value]
    if not isinstance(value, dict):
        return value
    out = {}
    for key, v in value.items():
        if key == "$ref" and isinstance(v, str) and v.startswith(prefix):
            out[key] = DEFS_REF_PREFIX + v[len(prefix):]
        elif key.startswith("x-"):
            out[key] = v
        else:
            out[key] = _repoint_refs(v, prefix)
    return out


def convert_fragment(fragment: Fragment, dialect: Dialect) -> Fragment:
    """Convert a standalone schema value from `dialect` to draft 2020-12."""
    dialect = Dialect(dialect)
    if dialect == Dialect.DRAFT_07:
        return from_draft07(fragment)
    if dialect == Dialect.OPENAPI_3_0:
        return from_openapi3_0(fragment)
    return fragment
