# src/apidrift/rules/cross_link.py

"""
Route-scoped wrappers around schema violations.

A wrapper never re-judges severity: its change level is the wrapped
violation's change level.
"""

from __future__ import annotations

from dataclasses import dataclass

from apidrift.models.change_level import ChangeLevel
from apidrift.models.match_result import ChangeAnchor, RuleCategory, RuleViolation
from apidrift.rules.base import Rule


@dataclass(frozen=True)
class RequestSchemaViolationRule(Rule):
    rule_name = "RequestSchemaViolation"
    category = RuleCategory.REQUEST_BODY

    schema_name: str
    content_type: str
    violation: RuleViolation

    @property
    def description(self) -> str:
        return f"Request schema '{self.schema_name}' ({self.content_type}) - {self.violation.description}"

    @property
    def change_level(self) -> ChangeLevel:
        return self.violation.change_level

    @property
    def anchor(self) -> ChangeAnchor:
        return ChangeAnchor.route()


@dataclass(frozen=True)
class ResponseSchemaViolationRule(Rule):
    rule_name = "ResponseSchemaViolation"
    category = RuleCategory.RESPONSE

    schema_name: str
    content_type: str
    status_code: str
    violation: RuleViolation

    @property
    def description(self) -> str:
        return (
            f"Response schema '{self.schema_name}' ({self.content_type}) "
            f"for status {self.status_code} - {self.violation.description}"
        )

    @property
    def change_level(self) -> ChangeLevel:
        return self.violation.change_level

    @property
    def anchor(self) -> ChangeAnchor:
        return ChangeAnchor.response_status(self.status_code)
