"""
High-level Python API for SchemaSmith.

This module provides the main user-facing functions: one per compile target,
plus the dialect converters and the OpenAI rewriter.
"""

from typing import Callable, Optional

from schemasmith.schema.compiler import CompileOptions, make_document
from schemasmith.schema.converter import from_draft07, from_openapi3_0, to_draft2020_12
from schemasmith.schema.document import Dialect, Document, Fragment
from schemasmith.schema.rewriter import openai
from schemasmith.schema.types import SchemaNode


def _make(
    target: Dialect,
    node: SchemaNode,
    reference_strategy: str,
    additional_properties: Fragment,
    on_missing_annotation: Optional[Callable[[SchemaNode], Optional[Fragment]]],
) -> Document:
    options = CompileOptions(
        target=target,
        reference_strategy=reference_strategy,
        additional_properties=additional_properties,
        on_missing_annotation=on_missing_annotation,
    )
    return make_document(node, options)


def make_json_schema_draft07(
    node: SchemaNode,
    reference_strategy: str = "keep",
    additional_properties: Fragment = False,
    on_missing_annotation: Optional[Callable[[SchemaNode], Optional[Fragment]]] = None,
) -> Document:
    """
    Compile an AST into a draft-07 Document.

    Args:
        node: Root AST node
        reference_strategy: "keep" or "skip"
        additional_properties: Default `additionalProperties` for structs
        on_missing_annotation: Fallback for Declaration / Undefined nodes

    Returns:
        Document: Refs under `#/definitions/`, tuples as items + additionalItems

    Example:
        ```python
        from schemasmith.api import make_json_schema_draft07
        from schemasmith.schema.types import Primitive

        make_json_schema_draft07(Primitive("string")).to_json()
        # {"$schema": "http://json-schema.org/draft-07/schema", "type": "string"}
        ```
    """
    return _make(Dialect.DRAFT_07, node, reference_strategy, additional_properties, on_missing_annotation)


def make_json_schema_draft2020_12(
    node: SchemaNode,
    reference_strategy: str = "keep",
    additional_properties: Fragment = False,
    on_missing_annotation: Optional[Callable[[SchemaNode], Optional[Fragment]]] = None,
) -> Document:
    """Compile an AST into a draft 2020-12 Document (refs under `#/$defs/`)."""
    return _make(Dialect.DRAFT_2020_12, node, reference_strategy, additional_properties, on_missing_annotation)


def make_json_schema_openapi3_1(
    node: SchemaNode,
    reference_strategy: str = "keep",
    additional_properties: Fragment = False,
    on_missing_annotation: Optional[Callable[[SchemaNode], Optional[Fragment]]] = None,
) -> Document:
    """Compile an AST into an OpenAPI 3.1 Document (refs under `#/components/schemas/`)."""
    return _make(Dialect.OPENAPI_3_1, node, reference_strategy, additional_properties, on_missing_annotation)


__all__ = [
    "make_json_schema_draft07",
    "make_json_schema_draft2020_12",
    "make_json_schema_openapi3_1",
    "from_draft07",
    "from_openapi3_0",
    "to_draft2020_12",
    "openai",
]
