import pytest

from apidrift.services.api_spec_parser import SpecParseError, parse_api_spec


def test_parse_json():
    data = b'{"openapi": "3.0.0", "paths": {}}'
    out = parse_api_spec("spec.json", data)
    assert isinstance(out, dict)
    assert out["openapi"] == "3.0.0"


def test_parse_yaml():
    data = b"openapi: 3.0.0\npaths:\n  /users:\n    get:\n      responses:\n        200:\n          description: ok\n"
    out = parse_api_spec("spec.yaml", data)
    assert isinstance(out, dict)
    assert "/users" in out["paths"]


def test_parse_without_extension_sniffs_content():
    assert parse_api_spec("upload", b'{"a": 1}') == {"a": 1}
    assert parse_api_spec("upload", b"a: 1\n") == {"a": 1}


def test_json_root_must_be_an_object():
    with pytest.raises(SpecParseError, match="JSON root must be an object"):
        parse_api_spec("spec.json", b"[1, 2]")


def test_yaml_root_must_be_a_mapping():
    with pytest.raises(SpecParseError, match="YAML root must be a mapping"):
        parse_api_spec("spec.yml", b"- a\n- b\n")


def test_invalid_json_is_wrapped():
    with pytest.raises(SpecParseError, match="Invalid json"):
        parse_api_spec("spec.json", b"{")


def test_invalid_yaml_is_wrapped():
    with pytest.raises(SpecParseError, match="Invalid yaml"):
        parse_api_spec("spec.yaml", b"a: [1, 2\n")


def test_parse_unknown_raises():
    # Use non-decodable bytes so detection falls back to 'unknown'
    data = b"\xff\xfe\x00"

    with pytest.raises(ValueError):
        parse_api_spec("unknown.bin", data)


def test_parse_failures_are_counted():
    from apidrift.metrics import spec_parse_failures_total

    before = spec_parse_failures_total._value.get()
    with pytest.raises(SpecParseError):
        parse_api_spec("spec.json", b"[]")

    assert spec_parse_failures_total._value.get() == before + 1
