from apidrift.models.change_level import ChangeLevel
from apidrift.models.document import SchemaNode
from apidrift.models.match_result import ChangeAnchor, RuleCategory
from apidrift.rules.cross_link import RequestSchemaViolationRule, ResponseSchemaViolationRule
from apidrift.rules.schema import FormatChangedRule, TypeChangedRule


def _type_changed():
    rule = TypeChangedRule.detect("User", "age", SchemaNode(schema_type="string"), SchemaNode(schema_type="integer"))[0]
    return rule.to_violation()


def test_request_wrapper_keeps_change_level():
    violation = RequestSchemaViolationRule(
        schema_name="User",
        content_type="application/json",
        violation=_type_changed(),
    ).to_violation()

    assert violation.name == "RequestSchemaViolation"
    assert violation.description == (
        "Request schema 'User' (application/json) - Type changed from 'string' to 'integer'"
    )
    assert violation.change_level == ChangeLevel.BREAKING
    assert violation.anchor == ChangeAnchor.route()
    assert violation.category == RuleCategory.REQUEST_BODY


def test_response_wrapper_anchors_to_status_code():
    inner = FormatChangedRule.detect("User", "born", SchemaNode(format="date"), SchemaNode(format="date-time"))[0]

    violation = ResponseSchemaViolationRule(
        schema_name="User",
        content_type="application/json",
        status_code="200",
        violation=inner.to_violation(),
    ).to_violation()

    assert violation.name == "ResponseSchemaViolation"
    assert violation.description == (
        "Response schema 'User' (application/json) for status 200 - "
        "Format changed from 'date' to 'date-time'"
    )
    assert violation.change_level == ChangeLevel.WARNING
    assert violation.anchor == ChangeAnchor.response_status("200")
    assert violation.category == RuleCategory.RESPONSE
