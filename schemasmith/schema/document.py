"""
Dialects and documents.

A Document is what every stage of the pipeline produces: the root schema, the
definitions map its `$ref`s point into, and the dialect both are written in.

Dialects:
    - draft-07: `#/definitions/`, tuples as `items: [...]` + `additionalItems`
    - draft-2020-12: `#/$defs/`, tuples as `prefixItems` + `items`
    - openapi-3.0: converter input only (`nullable`, boolean exclusive bounds)
    - openapi-3.1: `#/components/schemas/`, 2020-12 vocabulary
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Union

Fragment = Union[Dict[str, Any], bool]


class Dialect(str, Enum):
    """Supported JSON Schema / OpenAPI schema dialects."""

    DRAFT_07 = "draft-07"
    DRAFT_2020_12 = "draft-2020-12"
    OPENAPI_3_0 = "openapi-3.0"
    OPENAPI_3_1 = "openapi-3.1"


META_SCHEMA_URIS = {
    Dialect.DRAFT_07: "http://json-schema.org/draft-07/schema",
    Dialect.DRAFT_2020_12: "https://json-schema.org/draft/2020-12/schema",
    Dialect.OPENAPI_3_1: "https://json-schema.org/draft/2020-12/schema",
}

REF_POINTERS = {
    Dialect.DRAFT_07: "#/definitions/",
    Dialect.DRAFT_2020_12: "#/$defs/",
    Dialect.OPENAPI_3_0: "#/components/schemas/",
    Dialect.OPENAPI_3_1: "#/components/schemas/",
}


def get_meta_schema_uri(dialect: Dialect) -> str:
    """
    Return the `$schema` URI for a dialect.

    Raises:
        ValueError: For openapi-3.0, which has no JSON Schema meta-schema
    """
    dialect = Dialect(dialect)
    if dialect not in META_SCHEMA_URIS:
        raise ValueError(f"No meta-schema URI for dialect: {dialect.value}")
    return META_SCHEMA_URIS[dialect]


def get_pointer(dialect: Dialect) -> str:
    """Return the `$ref` prefix under which definitions live for a dialect."""
    return REF_POINTERS[Dialect(dialect)]


@dataclass
class Document:
    """
    A root schema plus the named definitions it references.

    Attributes:
        dialect: Dialect both schema and definitions are written in
        schema: Root fragment
        definitions: Ordered map of definition name to fragment
    """

    dialect: Dialect
    schema: Fragment
    definitions: Dict[str, Fragment] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.dialect = Dialect(self.dialect)

    @property
    def uri(self) -> str:
        """Meta-schema URI of this document's dialect."""
        return get_meta_schema_uri(self.dialect)

    def to_json(self, include_uri: bool = True) -> Dict[str, Any]:
        """
        Serialize to a single standalone JSON value.

        The definitions are embedded at the location the dialect's `$ref`
        pointer addresses, so the document resolves its own references.

        Args:
            include_uri: Prepend `$schema` for the JSON Schema dialects

        Returns:
            Dict: Standalone schema

        Example:
            ```python
            doc = Document(Dialect.DRAFT_2020_12, {"$ref": "#/$defs/A"}, {"A": {"type": "string"}})
            doc.to_json()
            # {"$schema": "https://json-schema.org/draft/2020-12/schema",
            #  "$ref": "#/$defs/A", "$defs": {"A": {"type": "string"}}}
            ```
        """
        if isinstance(self.schema, bool):
            out: Dict[str, Any] = {} if self.schema else {"not": {}}
        else:
            out = dict(self.schema)

        if include_uri and self.dialect in (Dialect.DRAFT_07, Dialect.DRAFT_2020_12):
            out = {"$schema": self.uri, **out}

        if self.definitions:
            if self.dialect == Dialect.DRAFT_07:
                out["definitions"] = dict(self.definitions)
            elif self.dialect == Dialect.DRAFT_2020_12:
                out["$defs"] = dict(self.definitions)
            else:
                out["components"] = {"schemas": dict(self.definitions)}

        return out

    @classmethod
    def from_json(cls, data: Fragment, dialect: Dialect) -> "Document":
        """
        Split a standalone schema into root schema and definitions.

        Args:
            data: Standalone JSON schema
            dialect: Dialect the data is written in

        Returns:
            Document: Root schema without `$schema` and definitions container
        """
        dialect = Dialect(dialect)
        if not isinstance(data, dict):
            return cls(dialect=dialect, schema=data, definitions={})

        schema = {k: v for k, v in data.items() if k != "$schema"}
        definitions: Dict[str, Fragment] = {}

        if dialect == Dialect.DRAFT_07:
            found = schema.pop("definitions", None)
        elif dialect == Dialect.DRAFT_2020_12:
            found = schema.pop("$defs", None)
        else:
            components = schema.get("components")
            found = components.get("schemas") if isinstance(components, dict) else None
            if isinstance(found, dict):
                rest = {k: v for k, v in components.items() if k != "schemas"}
                if rest:
                    schema["components"] = rest
                else:
                    del schema["components"]

        if isinstance(found, dict):
            definitions = dict(found)

        return cls(dialect=dialect, schema=schema, definitions=definitions)
