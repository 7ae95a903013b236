"""
CLI command implementations.

This module contains the business logic for each CLI command:
- convert: draft-07 / OpenAPI 3.0 schema file → draft 2020-12
- rewrite: draft 2020-12 schema file → OpenAI structured-output subset
- check: meta-schema check of a schema file
- validate: validate a JSON file against a schema file
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

from schemasmith.schema.converter import to_draft2020_12
from schemasmith.schema.document import Dialect, Document, get_meta_schema_uri
from schemasmith.schema.rewriter import RecordingTracer, openai
from schemasmith.validation import SchemaCheckError, check_schema, validate

from .display import (
    console,
    print_changes,
    print_document_summary,
    print_error,
    print_header,
    print_info,
    print_json,
    print_messages,
    print_schema,
    print_separator,
    print_success,
    print_validation_errors,
    print_warning,
)

CONVERTIBLE_DIALECTS = (Dialect.DRAFT_07, Dialect.OPENAPI_3_0)


def load_json_file(path: Path, kind: str = "Schema") -> Any:
    """
    Load and parse a JSON file.

    Args:
        path: Path to the JSON file
        kind: What the file holds, used in error messages

    Returns:
        Parsed JSON value

    Raises:
        ValueError: If the file doesn't exist or isn't valid JSON
    """
    if not path.exists():
        raise ValueError(f"{kind} file not found: {path}")

    try:
        with open(path) as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {kind.lower()} file: {e}")


def save_json_file(data: Dict[str, Any], path: Path) -> None:
    """Write pretty-printed JSON, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(data, f, indent=2)
        f.write("\n")


def _load_schema(schema_path: Path) -> Any:
    try:
        schema = load_json_file(schema_path)
    except ValueError as e:
        print_error(f"Failed to load schema: {e}")
        raise SystemExit(1)
    print_success(f"Loaded schema from: {schema_path}")
    return schema


def _emit(data: Dict[str, Any], output_path: Optional[Path], title: str) -> None:
    if output_path:
        try:
            save_json_file(data, output_path)
        except OSError as e:
            print_error(f"Failed to save output: {e}")
            raise SystemExit(1)
        print_success(f"Output saved to: {output_path}")
    else:
        print_json(data, title=title)


def convert_command(
    schema_path: Path,
    source: str,
    output_path: Optional[Path],
    show_schema: bool
) -> None:
    """
    Execute the convert command.

    Args:
        schema_path: Path to the source schema file
        source: Source dialect ("draft-07" or "openapi-3.0")
        output_path: Optional path to save the converted schema
        show_schema: Whether to display the source schema
    """
    print_header("SchemaSmith - Convert to draft 2020-12")

    try:
        dialect = Dialect(source)
    except ValueError:
        dialect = None
    if dialect not in CONVERTIBLE_DIALECTS:
        choices = ", ".join(d.value for d in CONVERTIBLE_DIALECTS)
        print_error(f"Unsupported source dialect: {source} (choose from {choices})")
        raise SystemExit(1)

    data = _load_schema(schema_path)
    if show_schema:
        print_schema(data, title=f"Source ({dialect.value})")

    converted = to_draft2020_12(Document.from_json(data, dialect))
    print_document_summary(converted, title="Converted Document")

    _emit(converted.to_json(), output_path, "draft 2020-12")


def rewrite_command(
    schema_path: Path,
    output_path: Optional[Path],
    show_changes: bool
) -> None:
    """
    Execute the rewrite command.

    Args:
        schema_path: Path to a draft 2020-12 schema file
        output_path: Optional path to save the rewritten schema
        show_changes: Whether to display every rewrite step
    """
    print_header("SchemaSmith - Rewrite for OpenAI structured outputs")

    data = _load_schema(schema_path)
    declared = data.get("$schema") if isinstance(data, dict) else None
    if isinstance(declared, str) and declared.rstrip("#") != get_meta_schema_uri(Dialect.DRAFT_2020_12):
        print_warning(f"Input declares {declared}, reading it as draft 2020-12 (run convert first)")

    tracer = RecordingTracer()
    rewritten = openai(Document.from_json(data, Dialect.DRAFT_2020_12), tracer)
    print_info(f"Applied {len(tracer.changes)} change(s)")

    if show_changes:
        print_changes(tracer.changes)

    _emit(rewritten.to_json(include_uri=False), output_path, "OpenAI subset")


def check_command(
    schema_path: Path,
    dialect: str
) -> None:
    """
    Execute the check command.

    Args:
        schema_path: Path to the schema file
        dialect: Dialect the schema is written in
    """
    print_header("SchemaSmith - Check schema")

    try:
        parsed_dialect = Dialect(dialect)
    except ValueError:
        print_error(f"Unknown dialect: {dialect}")
        raise SystemExit(1)

    data = _load_schema(schema_path)
    document = Document.from_json(data, parsed_dialect)

    print_separator()
    print_info(f"Checking against the {parsed_dialect.value} meta-schema...")

    try:
        check_schema(document)
    except SchemaCheckError as e:
        print_error("Schema check failed")
        print_messages(e.messages, title="Meta-schema violations")
        raise SystemExit(1)

    print_success("Schema is valid")


def validate_command(
    json_path: Path,
    schema_path: Path,
    show_schema: bool
) -> None:
    """
    Execute the validate command.

    Args:
        json_path: Path to JSON file to validate
        schema_path: Path to JSON schema file
        show_schema: Whether to display the schema
    """
    print_header("SchemaSmith - Validate JSON")

    schema = _load_schema(schema_path)
    if show_schema:
        print_schema(schema)

    try:
        data = load_json_file(json_path, kind="JSON")
    except ValueError as e:
        print_error(str(e))
        raise SystemExit(1)
    print_success(f"Loaded JSON from: {json_path}")

    print_separator()
    print_info("Validating...")

    result = validate(json.dumps(data), schema)

    console.print()
    if result.is_valid:
        print_success("Validation passed!")
    else:
        print_error("Validation failed")
        print_validation_errors(result.errors)
        raise SystemExit(1)

