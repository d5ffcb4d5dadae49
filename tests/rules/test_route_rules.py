from apidrift.models.change_level import ChangeLevel
from apidrift.models.document import (
    MediaType,
    Operation,
    Parameter,
    Reference,
    RequestBody,
    Response,
)
from apidrift.models.match_result import ChangeAnchor, RuleCategory
from apidrift.rules.base import run_route_rules
from apidrift.rules.route import (
    ROUTE_DETAIL_RULES,
    ParameterRemovedRule,
    RequestSchemaChangedRule,
    RequiredParameterAddedRule,
    ResponseSchemaChangedRule,
    ResponseStatusAddedRule,
    ResponseStatusRemovedRule,
    RouteAddedRule,
    RouteDescriptionChangedRule,
    RouteRemovedRule,
    RouteSummaryChangedRule,
    request_schema_names,
    response_schema_names,
)


def _ref(name):
    return Reference(f"#/components/schemas/{name}")


def _json_body(name):
    return RequestBody(content={"application/json": MediaType(schema=_ref(name))})


def _json_response(name):
    return Response(description="ok", content={"application/json": MediaType(schema=_ref(name))})


def test_route_added_and_removed():
    op = Operation()

    added = RouteAddedRule.detect("/users", "get", None, op)
    removed = RouteRemovedRule.detect("/users", "get", op, None)

    assert added[0].description == "Route Added: GET /users"
    assert added[0].change_level == ChangeLevel.CHANGE
    assert added[0].category == RuleCategory.ENDPOINT
    assert added[0].anchor == ChangeAnchor.route()
    assert removed[0].description == "Route Removed: GET /users"
    assert removed[0].change_level == ChangeLevel.BREAKING


def test_description_changed_needs_both_texts():
    assert RouteDescriptionChangedRule.detect("/x", "get", Operation(), Operation(description="new")) == []
    assert RouteDescriptionChangedRule.detect("/x", "get", Operation(description="old"), Operation()) == []

    rules = RouteDescriptionChangedRule.detect(
        "/x", "get", Operation(description="old"), Operation(description="new")
    )
    assert len(rules) == 1
    assert rules[0].description == "Description Changed: GET /x"
    assert rules[0].change_level == ChangeLevel.CHANGE


def test_summary_changed():
    rules = RouteSummaryChangedRule.detect("/x", "post", Operation(summary="List"), Operation(summary="Search"))
    assert rules[0].description == "Summary Changed: POST /x"
    assert RouteSummaryChangedRule.detect("/x", "post", Operation(summary=""), Operation(summary="New")) == []


def test_required_parameter_added():
    base = Operation()
    current = Operation(parameters=[Parameter(name="sort", location="query", required=True)])

    rules = RequiredParameterAddedRule.detect("/users", "get", base, current)

    assert len(rules) == 1
    assert rules[0].description == "Required Parameter Added: sort (in: query)"
    assert rules[0].change_level == ChangeLevel.BREAKING
    assert rules[0].category == RuleCategory.PARAMETER
    assert rules[0].anchor == ChangeAnchor.parameter("sort")


def test_optional_parameter_added_is_not_reported():
    current = Operation(parameters=[Parameter(name="page", location="query")])
    assert RequiredParameterAddedRule.detect("/users", "get", Operation(), current) == []


def test_parameter_made_required_in_place_is_not_reported():
    base = Operation(parameters=[Parameter(name="page", location="query", required=False)])
    current = Operation(parameters=[Parameter(name="page", location="query", required=True)])

    assert run_route_rules(ROUTE_DETAIL_RULES, "/users", "get", base, current) == []


def test_parameter_moved_between_locations_is_add_plus_remove():
    base = Operation(parameters=[Parameter(name="id", location="query", required=True)])
    current = Operation(parameters=[Parameter(name="id", location="path", required=True)])

    added = RequiredParameterAddedRule.detect("/users", "get", base, current)
    removed = ParameterRemovedRule.detect("/users", "get", base, current)

    assert added[0].description == "Required Parameter Added: id (in: path)"
    assert removed[0].description == "Parameter Removed: id (in: query)"
    assert removed[0].change_level == ChangeLevel.BREAKING


def test_parameter_refs_are_not_inspected():
    base = Operation(parameters=[Reference("#/components/parameters/Page")])
    assert ParameterRemovedRule.detect("/users", "get", base, Operation()) == []


def test_response_status_added_and_removed():
    base = Operation(responses={"200": Response(), "404": Response()})
    current = Operation(responses={"200": Response(), "400": Response()})

    added = ResponseStatusAddedRule.detect("/users", "get", base, current)
    removed = ResponseStatusRemovedRule.detect("/users", "get", base, current)

    assert added[0].description == "Response Status Added: 400"
    assert added[0].change_level == ChangeLevel.CHANGE
    assert added[0].anchor == ChangeAnchor.response_status("400")
    assert removed[0].description == "Response Status Removed: 404"
    assert removed[0].change_level == ChangeLevel.WARNING


def test_response_status_rules_need_responses_on_both_sides():
    current = Operation(responses={"200": Response()})
    assert ResponseStatusAddedRule.detect("/users", "get", Operation(), current) == []
    assert ResponseStatusRemovedRule.detect("/users", "get", current, Operation()) == []


def test_request_schema_changed():
    base = Operation(request_body=_json_body("NewUser"))
    current = Operation(request_body=_json_body("CreateUser"))

    rules = RequestSchemaChangedRule.detect("/users", "post", base, current)

    assert len(rules) == 1
    assert rules[0].description == "Request schema 'CreateUser' changed"
    assert rules[0].old_schema_name == "NewUser"
    assert rules[0].change_level == ChangeLevel.BREAKING
    assert rules[0].anchor == ChangeAnchor.route()
    assert rules[0].category == RuleCategory.REQUEST_BODY


def test_request_schema_new_content_type_is_not_a_rebinding():
    base = Operation(request_body=_json_body("User"))
    current = Operation(
        request_body=RequestBody(
            content={
                "application/json": MediaType(schema=_ref("User")),
                "application/xml": MediaType(schema=_ref("UserXml")),
            }
        )
    )
    assert RequestSchemaChangedRule.detect("/users", "post", base, current) == []


def test_response_schema_changed():
    base = Operation(responses={"200": _json_response("User")})
    current = Operation(responses={"200": _json_response("UserV2")})

    rules = ResponseSchemaChangedRule.detect("/users/{id}", "get", base, current)

    assert rules[0].description == "Response schema 'UserV2' changed for status 200"
    assert rules[0].anchor == ChangeAnchor.response_status("200")
    assert rules[0].change_level == ChangeLevel.BREAKING


def test_schema_name_extraction_skips_inline_schemas():
    op = Operation(
        request_body=RequestBody(content={"application/json": MediaType(schema=None)}),
        responses={
            "200": _json_response("User"),
            "default": Reference("#/components/responses/Error"),
        },
    )
    assert request_schema_names(op) == {}
    assert response_schema_names(op) == {("200", "application/json"): "User"}
