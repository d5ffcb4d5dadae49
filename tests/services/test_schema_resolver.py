from apidrift.models.document import Document, Reference, SchemaNode, extract_schema_name
from apidrift.services.schema_resolver import resolve_schema_ref

USER = SchemaNode(schema_type="object")

DOC = Document(
    schemas={
        "User": USER,
        "Member": Reference("#/components/schemas/User"),
    }
)


def test_extract_schema_name():
    assert extract_schema_name(Reference("#/components/schemas/User")) == "User"
    assert extract_schema_name(Reference("#/definitions/User")) is None
    assert extract_schema_name(USER) is None
    assert extract_schema_name(None) is None


def test_inline_schema_returned_as_is():
    inline = SchemaNode(schema_type="string")
    assert resolve_schema_ref(inline, DOC) is inline


def test_pointer_resolves_one_hop():
    assert resolve_schema_ref(Reference("#/components/schemas/User"), DOC) is USER


def test_alias_of_alias_is_not_followed():
    assert resolve_schema_ref(Reference("#/components/schemas/Member"), DOC) is None


def test_unknown_and_foreign_pointers_resolve_to_none():
    assert resolve_schema_ref(Reference("#/components/schemas/Missing"), DOC) is None
    assert resolve_schema_ref(Reference("other.yaml#/User"), DOC) is None
    assert resolve_schema_ref(None, DOC) is None
