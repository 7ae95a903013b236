"""
Main CLI entry point using Typer.

This module defines the command-line interface for SchemaSmith using Typer.
It provides four commands: convert, rewrite, check and validate.
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from .commands import check_command, convert_command, rewrite_command, validate_command
from .display import print_error


# Create Typer app
app = typer.Typer(
    name="schemasmith",
    help="SchemaSmith - JSON Schema dialect conversion and OpenAI rewriting",
    add_completion=False,
    rich_markup_mode="rich"
)


@app.command("convert")
def convert(
    schema: Annotated[
        Path,
        typer.Option("--schema", "-s", help="Path to the source schema file", exists=True, file_okay=True, dir_okay=False)
    ],
    source: Annotated[
        str,
        typer.Option("--from", "-f", help="Source dialect: draft-07 or openapi-3.0")
    ] = "draft-07",
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Path to save the converted schema")
    ] = None,
    show_schema: Annotated[
        bool,
        typer.Option("--show-schema", help="Display the source schema")
    ] = False,
) -> None:
    """
    Convert a draft-07 or OpenAPI 3.0 schema to draft 2020-12.

    Example:
        schemasmith convert \\
            --schema legacy.json \\
            --from draft-07 \\
            --output schema.json
    """
    try:
        convert_command(
            schema_path=schema,
            source=source,
            output_path=output,
            show_schema=show_schema
        )
    except Exception as e:
        print_error(f"Command failed: {e}")
        raise typer.Exit(code=1)


@app.command("rewrite")
def rewrite(
    schema: Annotated[
        Path,
        typer.Option("--schema", "-s", help="Path to a draft 2020-12 schema file", exists=True, file_okay=True, dir_okay=False)
    ],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Path to save the rewritten schema")
    ] = None,
    show_changes: Annotated[
        bool,
        typer.Option("--show-changes", help="List every rewrite step")
    ] = False,
) -> None:
    """
    Rewrite a draft 2020-12 schema for OpenAI structured outputs.

    Example:
        schemasmith rewrite \\
            --schema schema.json \\
            --show-changes \\
            --output openai.json
    """
    try:
        rewrite_command(
            schema_path=schema,
            output_path=output,
            show_changes=show_changes
        )
    except Exception as e:
        print_error(f"Command failed: {e}")
        raise typer.Exit(code=1)


@app.command("check")
def check(
    schema: Annotated[
        Path,
        typer.Option("--schema", "-s", help="Path to the schema file", exists=True, file_okay=True, dir_okay=False)
    ],
    dialect: Annotated[
        str,
        typer.Option("--dialect", "-d", help="draft-07, draft-2020-12, openapi-3.0 or openapi-3.1")
    ] = "draft-2020-12",
) -> None:
    """
    Check a schema against its dialect's meta-schema.

    Example:
        schemasmith check --schema schema.json --dialect draft-07
    """
    try:
        check_command(
            schema_path=schema,
            dialect=dialect
        )
    except Exception as e:
        print_error(f"Command failed: {e}")
        raise typer.Exit(code=1)


@app.command("validate")
def validate(
    json_file: Annotated[
        Path,
        typer.Option("--json", "-j", help="Path to JSON file to validate", exists=True, file_okay=True, dir_okay=False)
    ],
    schema: Annotated[
        Path,
        typer.Option("--schema", "-s", help="Path to JSON schema file", exists=True, file_okay=True, dir_okay=False)
    ],
    show_schema: Annotated[
        bool,
        typer.Option("--show-schema", help="Display the schema")
    ] = False,
) -> None:
    """
    Validate existing JSON against a schema.

    Example:
        schemasmith validate \\
            --json output.json \\
            --schema schema.json
    """
    try:
        validate_command(
            json_path=json_file,
            schema_path=schema,
            show_schema=show_schema
        )
    except Exception as e:
        print_error(f"Command failed: {e}")
        raise typer.Exit(code=1)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option("--version", "-v", help="Show version and exit")
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Log compiler and rewriter steps")
    ] = False,
) -> None:
    """
    SchemaSmith - JSON Schema dialect conversion and OpenAI rewriting.

    Converts legacy schemas to draft 2020-12 and narrows them to the subset
    OpenAI structured outputs accept.
    """
    if version:
        from schemasmith import __version__
        typer.echo(f"SchemaSmith version {__version__}")
        raise typer.Exit()

    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def cli() -> None:
    """CLI entry point for the console script."""
    app()


if __name__ == "__main__":
    cli()
