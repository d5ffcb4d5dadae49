import pytest
import yaml

from apidrift.models.document import (
    Operation,
    Parameter,
    Reference,
    RequestBody,
    Response,
    SchemaNode,
)
from apidrift.services.document_loader import InvalidDocumentError, load_document


def test_loads_schemas_and_info(raw_spec):
    spec = raw_spec(
        schemas={
            "User": {
                "type": "object",
                "description": "A user",
                "required": ["id"],
                "properties": {
                    "id": {"type": "string", "format": "uuid"},
                    "role": {"type": "string", "enum": ["admin", "member"]},
                    "manager": {"$ref": "#/components/schemas/User"},
                },
            },
            "Member": {"$ref": "#/components/schemas/User"},
        }
    )

    doc = load_document(spec)

    assert doc.openapi == "3.0.0"
    assert doc.title == "Test API"
    assert doc.version == "1.0.0"
    user = doc.schemas["User"]
    assert isinstance(user, SchemaNode)
    assert user.schema_type == "object"
    assert user.required == ["id"]
    assert user.properties["id"].format == "uuid"
    assert user.properties["role"].enum_values == ["admin", "member"]
    assert user.properties["manager"] == Reference("#/components/schemas/User")
    assert doc.schemas["Member"] == Reference("#/components/schemas/User")


def test_type_lists_and_nullable():
    doc = load_document(
        {
            "components": {
                "schemas": {
                    "A": {"type": ["string", "null"]},
                    "B": {"type": "string", "nullable": True},
                    "C": {"type": "string", "nullable": "yes"},
                }
            }
        }
    )

    assert doc.schemas["A"].schema_type == ("string", "null")
    assert doc.schemas["A"].nullable is True
    assert doc.schemas["B"].nullable is True
    assert doc.schemas["C"].nullable is False


def test_yaml_dates_in_enums_become_iso_strings():
    raw = yaml.safe_load(
        "components:\n"
        "  schemas:\n"
        "    Day:\n"
        "      type: string\n"
        "      enum: [2024-01-01, 2024-02-01T10:00:00]\n"
    )

    doc = load_document(raw)

    assert doc.schemas["Day"].enum_values == ["2024-01-01", "2024-02-01T10:00:00"]


def test_array_items_are_loaded():
    doc = load_document(
        {"components": {"schemas": {"Tags": {"type": "array", "items": {"type": "string"}}}}}
    )

    assert doc.schemas["Tags"].items == SchemaNode(schema_type="string")


def test_operations_parameters_and_bodies(raw_spec):
    spec = raw_spec(
        paths={
            "/users/{id}": {
                "summary": "path level keys are ignored",
                "parameters": [{"name": "ignored", "in": "path"}],
                "GET": {
                    "summary": "Get user",
                    "operationId": "getUser",
                    "parameters": [
                        {"name": "id", "in": "path", "required": True, "schema": {"type": "string"}},
                        {"$ref": "#/components/parameters/Trace"},
                        {"description": "no name"},
                    ],
                    "responses": {
                        200: {
                            "description": "ok",
                            "content": {"application/json": {"schema": {"$ref": "#/components/schemas/User"}}},
                        },
                        "404": {"$ref": "#/components/responses/NotFound"},
                    },
                },
                "put": {
                    "requestBody": {
                        "required": True,
                        "content": {"application/json": {"schema": {"$ref": "#/components/schemas/User"}}},
                    },
                },
            }
        }
    )

    doc = load_document(spec)

    item = doc.paths["/users/{id}"]
    get = item.operation("get")
    assert get.summary == "Get user"
    assert get.operation_id == "getUser"
    assert get.parameters == [
        Parameter(name="id", location="path", required=True, schema=SchemaNode(schema_type="string")),
        Reference("#/components/parameters/Trace"),
    ]
    # YAML-style integer status codes become strings
    assert set(get.responses) == {"200", "404"}
    assert isinstance(get.responses["200"], Response)
    assert get.responses["404"] == Reference("#/components/responses/NotFound")

    put = item.operation("put")
    assert isinstance(put.request_body, RequestBody)
    assert put.request_body.required is True
    assert put.responses is None
    assert item.operation("post") is None
    assert item.operation("trace") is None


def test_identical_operations_compare_equal(raw_spec):
    paths = {"/a": {"get": {"responses": {"200": {"description": "ok"}}}}}

    first = load_document(raw_spec(paths=paths)).paths["/a"].get
    second = load_document(raw_spec(paths=paths)).paths["/a"].get

    assert isinstance(first, Operation)
    assert first == second


def test_missing_sections_give_empty_document():
    doc = load_document({"openapi": "3.1.0"})

    assert doc.schemas == {}
    assert doc.paths == {}


def test_malformed_entries_are_skipped(raw_spec):
    spec = raw_spec(
        schemas={"Bad": "not a schema", "Good": {"type": "string"}},
        paths={"/bad": ["nope"], "/ok": {"get": "nope", "post": {}}},
    )

    doc = load_document(spec)

    assert list(doc.schemas) == ["Good"]
    assert list(doc.paths) == ["/ok"]
    assert doc.paths["/ok"].get is None
    assert doc.paths["/ok"].post == Operation()


@pytest.mark.parametrize(
    "raw",
    [
        ["not", "a", "mapping"],
        {"paths": ["a"]},
        {"components": "x"},
        {"components": {"schemas": ["a"]}},
    ],
)
def test_structurally_invalid_documents_raise(raw):
    with pytest.raises(InvalidDocumentError):
        load_document(raw)
