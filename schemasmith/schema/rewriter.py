"""
Output rewriter - narrow a draft 2020-12 document to the OpenAI structured-output subset.

OpenAI's structured outputs accept a small, strict slice of JSON Schema: the
root must be an object, every object must list all of its properties as
required and forbid additional ones, and only a handful of keywords are
understood. This module rewrites a canonical document into that slice,
keeping the document's meaning where the subset can express it.

Usage:
    ```python
    from schemasmith.schema.document import Document
    from schemasmith.schema.rewriter import RecordingTracer, openai

    document = Document("draft-2020-12", {
        "type": "object",
        "properties": {"a": {"type": "string", "minLength": 1}},
        "required": [],
    })
    tracer = RecordingTracer()
    rewritten = openai(document, tracer)

    rewritten.schema
    # {"type": "object", "properties": {"a": {"type": ["string", "null"]}},
    #  "required": ["a"], "additionalProperties": False}
    for change in tracer.changes:
        print(change.name, change.path, change.summary)
    ```

Rules (first match wins, applied to the root and to every definition):
    1. anyOf: keep anyOf and annotations, rewrite every member
    2. oneOf: renamed to anyOf
    3. allOf: branches folded into one fragment, then rewritten
    4. string / number / integer / boolean / null: type, enum and annotations
    5. array: type, items, prefixItems and annotations
    6. object: every property required (optional ones widened to admit
       null), additionalProperties false
    7. $ref: unchanged
    8. const: becomes a one-value enum
    9. anything else: empty object placeholder
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from schemasmith.schema.converter import to_draft2020_12
from schemasmith.schema.document import Dialect, Document, Fragment, get_pointer
from schemasmith.utils.json_utils import PathSegment, unescape_json_pointer

logger = logging.getLogger(__name__)

ANNOTATION_KEYS = ("title", "description", "default", "examples")
ANY_OF_KEYS = ("anyOf",) + ANNOTATION_KEYS
SCALAR_KEYS = ("type", "enum") + ANNOTATION_KEYS
ARRAY_KEYS = ("type", "items", "prefixItems") + ANNOTATION_KEYS
OBJECT_KEYS = ("type", "properties", "required", "additionalProperties") + ANNOTATION_KEYS

SCALAR_TYPES = ("string", "number", "integer", "boolean", "null")


@dataclass
class Change:
    """
    One rewrite step.

    Attributes:
        name: Short machine id, e.g. "merge-allOf-fragments"
        path: Where it happened, starting with "schema" or "definitions"
        summary: Human readable one-liner
    """

    name: str
    path: List[PathSegment]
    summary: str


class Tracer(ABC):
    """Receives every Change made by the rewriter."""

    @abstractmethod
    def push(self, change: Change) -> None:
        pass


class NoopTracer(Tracer):
    """Tracer that discards changes."""

    def push(self, change: Change) -> None:
        pass


@dataclass
class RecordingTracer(Tracer):
    """Tracer that keeps changes in order."""

    changes: List[Change] = field(default_factory=list)

    def push(self, change: Change) -> None:
        self.changes.append(change)


class _Context:
    def __init__(self, tracer: Tracer):
        self.tracer = tracer

    def trace(self, name: str, path: Sequence[PathSegment], summary: str) -> None:
        change = Change(name=name, path=list(path), summary=summary)
        logger.debug(f"{name} at {'/'.join(str(p) for p in path)}: {summary}")
        self.tracer.push(change)


def openai(document: Document, tracer: Optional[Tracer] = None) -> Document:
    """
    Rewrite a document into the OpenAI structured-output subset.

    Args:
        document: Source document; converted to draft 2020-12 first if needed
        tracer: Receives a Change for every rewrite step

    Returns:
        Document: New draft 2020-12 document; the input is not modified
    """
    ctx = _Context(tracer or NoopTracer())

    if document.dialect != Dialect.DRAFT_2020_12:
        document = to_draft2020_12(document)

    definitions = document.definitions
    schema = document.schema

    identifier = _local_ref_identifier(schema)
    if identifier is not None and identifier in definitions:
        ctx.trace(
            "replace-top-level-ref-with-definition",
            ["schema"],
            f'replaced top level ref "{identifier}" with its definition',
        )
        schema = definitions[identifier]

    if not isinstance(schema, dict) or schema.get("type") != "object":
        ctx.trace("root-must-be-an-object", ["schema"], "replaced top level non-object with an empty object")
        schema = _placeholder(schema)
    else:
        schema = _rewrite(schema, ["schema"], ctx)

    return Document(
        dialect=Dialect.DRAFT_2020_12,
        schema=schema,
        definitions={name: _rewrite(fragment, ["definitions", name], ctx) for name, fragment in definitions.items()},
    )


def _local_ref_identifier(schema: Fragment) -> Optional[str]:
    if not isinstance(schema, dict):
        return None
    ref = schema.get("$ref")
    prefix = get_pointer(Dialect.DRAFT_2020_12)
    if isinstance(ref, str) and ref.startswith(prefix):
        return unescape_json_pointer(ref[len(prefix):])
    return None


def _placeholder(schema: Fragment) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "type": "object",
        "properties": {},
        "required": [],
        "additionalProperties": False,
    }
    if isinstance(schema, dict):
        for key in ("title", "description"):
            if key in schema:
                out[key] = schema[key]
    return out


def _whitelist(schema: Dict[str, Any], keys: Sequence[str], path: List[PathSegment], ctx: _Context) -> Dict[str, Any]:
    out = {}
    for key, value in schema.items():
        if key in keys:
            out[key] = value
        else:
            ctx.trace("remove-unsupported-property", path, f'removed unsupported property "{key}"')
    return out


def _is_scalar_type(json_type: Any) -> bool:
    if isinstance(json_type, str):
        return json_type in SCALAR_TYPES
    if isinstance(json_type, list) and json_type:
        return all(isinstance(t, str) and t in SCALAR_TYPES for t in json_type)
    return False


def _rewrite(fragment: Fragment, path: List[PathSegment], ctx: _Context) -> Fragment:
    if not isinstance(fragment, dict):
        return fragment

    if "anyOf" in fragment:
        out = _whitelist(fragment, ANY_OF_KEYS, path, ctx)
        if isinstance(out["anyOf"], list):
            out["anyOf"] = [_rewrite(m, [*path, "anyOf", i], ctx) for i, m in enumerate(out["anyOf"])]
        return out

    if "oneOf" in fragment:
        ctx.trace("rewrite-oneOf-to-anyOf", path, "rewrote oneOf to anyOf")
        out = {("anyOf" if k == "oneOf" else k): v for k, v in fragment.items()}
        return _rewrite(out, path, ctx)

    if "allOf" in fragment:
        all_of = fragment["allOf"]
        rest = {k: v for k, v in fragment.items() if k != "allOf"}
        branches = all_of if isinstance(all_of, list) else []
        ctx.trace("merge-allOf-fragments", path, f"merged {len(branches)} allOf fragment(s)")
        return _rewrite(_merge_all_of(rest, branches), path, ctx)

    json_type = fragment.get("type")

    if _is_scalar_type(json_type):
        return _whitelist(fragment, SCALAR_KEYS, path, ctx)

    if json_type == "array":
        out = _whitelist(fragment, ARRAY_KEYS, path, ctx)
        if isinstance(out.get("prefixItems"), list):
            out["prefixItems"] = [_rewrite(m, [*path, "prefixItems", i], ctx) for i, m in enumerate(out["prefixItems"])]
        if "items" in out:
            out["items"] = _rewrite(out["items"], [*path, "items"], ctx)
        return out

    if json_type == "object":
        return _rewrite_object(fragment, path, ctx)

    if "$ref" in fragment:
        return fragment

    if "const" in fragment:
        ctx.trace("rewrite-const-to-enum", path, "rewrote const to a single value enum")
        out = {"enum": [fragment["const"]]}
        out.update({k: fragment[k] for k in ANNOTATION_KEYS if k in fragment})
        return out

    ctx.trace("replace-unsupported-schema", path, "replaced unsupported schema with an empty object")
    return _placeholder(fragment)


def _rewrite_object(fragment: Dict[str, Any], path: List[PathSegment], ctx: _Context) -> Dict[str, Any]:
    out = _whitelist(fragment, OBJECT_KEYS, path, ctx)

    source = out.get("properties")
    properties = {
        key: _rewrite(value, [*path, "properties", key], ctx)
        for key, value in (source.items() if isinstance(source, dict) else [])
    }

    declared = out.get("required")
    required = [name for name in declared if name in properties] if isinstance(declared, list) else []
    for key in properties:
        if key not in required:
            ctx.trace("add-required-property", path, f'added required property "{key}"')
            required.append(key)
            properties[key] = _widen_nullable(properties[key])
    # keep the property order
    required = [key for key in properties if key in required]

    if out.get("additionalProperties") is not False:
        ctx.trace("additionalProperties-must-be-false", path, "set additionalProperties to false")

    out["properties"] = properties
    out["required"] = required
    out["additionalProperties"] = False
    return out


def _widen_nullable(schema: Fragment) -> Fragment:
    if isinstance(schema, dict):
        json_type = schema.get("type")
        if isinstance(json_type, str):
            if json_type == "null":
                return schema
            return _with_null_enum({**schema, "type": [json_type, "null"]})
        if isinstance(json_type, list):
            if "null" in json_type:
                return schema
            return _with_null_enum({**schema, "type": [*json_type, "null"]})
        if isinstance(schema.get("anyOf"), list):
            return {**schema, "anyOf": [*schema["anyOf"], {"type": "null"}]}
    return {"anyOf": [schema, {"type": "null"}]}


def _with_null_enum(schema: Dict[str, Any]) -> Dict[str, Any]:
    enum = schema.get("enum")
    if isinstance(enum, list) and None not in enum:
        return {**schema, "enum": [*enum, None]}
    return schema


def _join(a: Any, b: Any) -> Any:
    if not isinstance(a, str) or not a.strip():
        return b
    if not isinstance(b, str) or not b.strip():
        return a
    return f"{a.strip()}, {b.strip()}"


def _merge_all_of(schema: Dict[str, Any], branches: Sequence[Fragment]) -> Dict[str, Any]:
    out = dict(schema)
    for branch in branches:
        if not isinstance(branch, dict):
            continue
        for key, value in branch.items():
            if key not in out:
                out[key] = value
            elif key in ("title", "description"):
                out[key] = _join(out[key], value)
            elif key == "examples" and isinstance(out[key], list) and isinstance(value, list):
                out[key] = [*out[key], *value]
            else:
                out[key] = value
    return out
