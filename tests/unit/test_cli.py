"""
Unit tests for the CLI commands.
"""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from schemasmith import __version__
from schemasmith.cli import app

FIXTURES = Path(__file__).parent.parent / "fixtures" / "schemas"

runner = CliRunner()


def write_json(path: Path, data) -> Path:
    path.write_text(json.dumps(data))
    return path


@pytest.fixture
def person_schema(tmp_path):
    return write_json(tmp_path / "person.json", {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "type": "object",
        "properties": {
            "name": {"type": "string", "minLength": 1},
            "age": {"type": "integer"}
        },
        "required": ["name"]
    })


class TestMain:
    """Test the top-level options."""

    def test_version(self):
        """Test that --version prints the package version."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"SchemaSmith version {__version__}" in result.output

    def test_no_command_shows_help(self):
        """Test that running without a command prints the help text."""
        result = runner.invoke(app, [])

        assert result.exit_code == 0
        assert "convert" in result.output
        assert "rewrite" in result.output


class TestConvert:
    """Test the convert command."""

    def test_convert_draft07(self, tmp_path):
        """Test converting a draft-07 file to draft 2020-12."""
        output = tmp_path / "out.json"

        result = runner.invoke(app, [
            "convert", "--schema", str(FIXTURES / "legacy_point.draft07.json"), "--output", str(output)
        ])

        assert result.exit_code == 0, result.output
        converted = json.loads(output.read_text())
        assert converted["$schema"] == "https://json-schema.org/draft/2020-12/schema"
        assert converted["properties"]["point"] == {"$ref": "#/$defs/Point"}
        assert converted["$defs"]["Point"] == {
            "type": "array",
            "prefixItems": [{"type": "number"}, {"type": "number"}],
            "items": False
        }
        assert "definitions" not in converted

    def test_convert_openapi(self, tmp_path):
        """Test converting an OpenAPI 3.0 file to draft 2020-12."""
        output = tmp_path / "out.json"

        result = runner.invoke(app, [
            "convert",
            "--schema", str(FIXTURES / "legacy_order.openapi.json"),
            "--from", "openapi-3.0",
            "--output", str(output),
        ])

        assert result.exit_code == 0, result.output
        converted = json.loads(output.read_text())
        properties = converted["properties"]
        assert properties["id"] == {"type": "integer", "exclusiveMinimum": 0}
        assert properties["customer"] == {"$ref": "#/$defs/Customer"}
        assert properties["note"]["type"] == ["string", "null"]
        assert None in properties["status"]["enum"]
        assert set(converted["$defs"]) == {"Customer", "Line"}
        assert "components" not in converted

    def test_convert_unknown_source(self, tmp_path):
        """Test that an unsupported source dialect exits with an error."""
        result = runner.invoke(app, [
            "convert", "--schema", str(FIXTURES / "legacy_point.draft07.json"), "--from", "draft-04"
        ])

        assert result.exit_code == 1

    def test_convert_invalid_json(self, tmp_path):
        """Test that a malformed schema file exits with an error."""
        broken = tmp_path / "broken.json"
        broken.write_text("{not json")

        result = runner.invoke(app, ["convert", "--schema", str(broken)])

        assert result.exit_code == 1


class TestRewrite:
    """Test the rewrite command."""

    def test_rewrite(self, person_schema, tmp_path):
        """Test rewriting a schema for OpenAI."""
        output = tmp_path / "openai.json"

        result = runner.invoke(app, [
            "rewrite", "--schema", str(person_schema), "--output", str(output), "--show-changes"
        ])

        assert result.exit_code == 0, result.output
        assert json.loads(output.read_text()) == {
            "type": "object",
            "properties": {
                "name": {"type": "string"},
                "age": {"type": ["integer", "null"]}
            },
            "required": ["name", "age"],
            "additionalProperties": False
        }

    def test_rewrite_warns_on_other_dialect(self, tmp_path):
        """Test that a draft-07 input is flagged."""
        schema = write_json(tmp_path / "s.json", {
            "$schema": "http://json-schema.org/draft-07/schema#",
            "type": "object",
            "properties": {}
        })

        result = runner.invoke(app, ["rewrite", "--schema", str(schema)])

        assert result.exit_code == 0
        assert "Input declares" in result.output


class TestCheck:
    """Test the check command."""

    def test_check_valid(self, person_schema):
        """Test that a valid schema passes."""
        result = runner.invoke(app, ["check", "--schema", str(person_schema)])

        assert result.exit_code == 0
        assert "Schema is valid" in result.output

    def test_check_invalid(self, tmp_path):
        """Test that an invalid schema fails."""
        schema = write_json(tmp_path / "bad.json", {"type": 5})

        result = runner.invoke(app, ["check", "--schema", str(schema)])

        assert result.exit_code == 1
        assert "Schema check failed" in result.output

    def test_check_draft07(self):
        """Test checking a draft-07 fixture with its own meta-schema."""
        result = runner.invoke(app, [
            "check", "--schema", str(FIXTURES / "legacy_point.draft07.json"), "--dialect", "draft-07"
        ])

        assert result.exit_code == 0

    def test_check_unknown_dialect(self, person_schema):
        """Test that an unknown dialect exits with an error."""
        result = runner.invoke(app, ["check", "--schema", str(person_schema), "--dialect", "draft-03"])

        assert result.exit_code == 1


class TestValidate:
    """Test the validate command."""

    def test_validate_pass(self, person_schema, tmp_path):
        """Test validating conforming JSON."""
        data = write_json(tmp_path / "data.json", {"name": "Alice", "age": 30})

        result = runner.invoke(app, ["validate", "--json", str(data), "--schema", str(person_schema)])

        assert result.exit_code == 0
        assert "Validation passed" in result.output

    def test_validate_fail(self, person_schema, tmp_path):
        """Test validating non-conforming JSON."""
        data = write_json(tmp_path / "data.json", {"name": "", "age": "old"})

        result = runner.invoke(app, ["validate", "--json", str(data), "--schema", str(person_schema)])

        assert result.exit_code == 1
        assert "Validation failed" in result.output
