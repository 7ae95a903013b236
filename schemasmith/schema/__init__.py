"""
Schema compilation, conversion and rewriting module.

This module turns schema ASTs into JSON Schema documents, converts existing
documents between dialects, and narrows documents to the OpenAI
structured-output subset.

Components:
    - types: AST node definitions (Struct, Tuple, Union, Suspend, etc.)
    - annotations: Identifier and JSON Schema annotation accessors
    - checks: Constraint constructors and their JSON Schema keywords
    - regex_compiler: Patterns for template literals and index signatures
    - compiler: AST → JSON Schema (draft-07, draft 2020-12, OpenAPI 3.1)
    - converter: draft-07 / OpenAPI 3.0 → draft 2020-12
    - rewriter: draft 2020-12 → OpenAI structured-output subset
    - document: Dialects and the Document container

Example:
    ```python
    from schemasmith.schema import CompileOptions, make_document, openai
    from schemasmith.schema.types import Primitive, PropertySignature, Struct

    user = Struct([
        PropertySignature("name", Primitive("string")),
        PropertySignature("email", Primitive("string"), is_optional=True),
    ]).annotate(identifier="User")

    document = make_document(user, CompileOptions(target="draft-2020-12"))
    strict = openai(document)
    ```
"""

from schemasmith.schema.compiler import CompileOptions, compile_node, make_document
from schemasmith.schema.converter import convert_fragment, from_draft07, from_openapi3_0, to_draft2020_12
from schemasmith.schema.document import Dialect, Document, get_meta_schema_uri, get_pointer
from schemasmith.schema.errors import (
    CompilationError,
    MissingIdentifierError,
    UnsupportedNodeError,
    UnsupportedShapeError,
)
from schemasmith.schema.rewriter import Change, NoopTracer, RecordingTracer, Tracer, openai

__all__ = [
    "CompileOptions",
    "compile_node",
    "make_document",
    "convert_fragment",
    "from_draft07",
    "from_openapi3_0",
    "to_draft2020_12",
    "Dialect",
    "Document",
    "get_meta_schema_uri",
    "get_pointer",
    "CompilationError",
    "MissingIdentifierError",
    "UnsupportedNodeError",
    "UnsupportedShapeError",
    "Change",
    "NoopTracer",
    "RecordingTracer",
    "Tracer",
    "openai",
]
