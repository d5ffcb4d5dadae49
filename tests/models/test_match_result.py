from apidrift.models.match_result import (
    AnchorKind,
    ChangeAnchor,
    RouteInfo,
    SchemaLocation,
    SchemaReference,
)


class TestChangeAnchor:
    def test_schema_level_kinds(self):
        assert ChangeAnchor.schema().is_schema_level
        assert ChangeAnchor.required().is_schema_level
        assert not ChangeAnchor.property("id").is_schema_level

    def test_property_path_only_for_property_kinds(self):
        assert ChangeAnchor(AnchorKind.FORMAT, "a.b").property_path == "a.b"
        assert ChangeAnchor.property("a").is_property_level
        assert ChangeAnchor.parameter("sort").property_path is None
        assert ChangeAnchor.response_status("404").property_path is None
        assert not ChangeAnchor.route().is_property_level

    def test_str(self):
        assert str(ChangeAnchor.route()) == "route"
        assert str(ChangeAnchor.response_status("200")) == "response_status:200"


def test_route_info_to_dict():
    route = RouteInfo(
        path="/users",
        method="get",
        response_schemas=[SchemaReference("User", "application/json", SchemaLocation.response("200"))],
    )

    assert route.key == "GET /users"
    assert route.to_dict() == {
        "path": "/users",
        "method": "GET",
        "request_schemas": [],
        "response_schemas": [
            {
                "schema_name": "User",
                "content_type": "application/json",
                "location": "response",
                "status_code": "200",
            }
        ],
    }
