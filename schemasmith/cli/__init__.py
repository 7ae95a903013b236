"""
Command-line interface module.

This module provides a rich terminal interface for SchemaSmith using Typer and Rich.

Commands:
    - convert: Convert a draft-07 / OpenAPI 3.0 schema to draft 2020-12
    - rewrite: Narrow a draft 2020-12 schema to the OpenAI structured-output subset
    - check: Check a schema against its dialect's meta-schema
    - validate: Validate existing JSON against a schema

Features:
    - Syntax-highlighted JSON output
    - Table of rewrite changes
    - Colored error messages with suggestions

Example Usage:
    ```bash
    # Legacy schema to draft 2020-12
    schemasmith convert --schema legacy.json --from draft-07 --output schema.json

    # draft 2020-12 to the OpenAI subset, listing every change
    schemasmith rewrite --schema schema.json --show-changes --output openai.json

    # Sanity checks
    schemasmith check --schema openai.json
    schemasmith validate --json response.json --schema openai.json
    ```
"""

from .main import app

__all__ = ["app"]
