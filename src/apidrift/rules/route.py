# src/apidrift/rules/route.py

"""
Route-level, parameter-level and response-level rules.

Parameters are identified by their (name, location) pair, so moving a
parameter from query to path shows up as one addition plus one removal.
Parameters, request bodies and responses given as `$ref` are not inspected.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Tuple

from apidrift.models.change_level import ChangeLevel
from apidrift.models.document import Operation, Parameter, RequestBody, Response, extract_schema_name
from apidrift.models.match_result import ChangeAnchor, RuleCategory
from apidrift.rules.base import RouteRule


def _parameters(operation: Operation) -> List[Parameter]:
    return [p for p in operation.parameters if isinstance(p, Parameter)]


def _parameter_keys(operation: Operation) -> Set[Tuple[str, str]]:
    return {(p.name, p.location) for p in _parameters(operation)}


def request_schema_names(operation: Operation) -> Dict[str, str]:
    """content-type -> component schema name for the request body."""
    schemas: Dict[str, str] = {}
    body = operation.request_body
    if not isinstance(body, RequestBody):
        return schemas
    for content_type, media_type in body.content.items():
        schema_name = extract_schema_name(media_type.schema)
        if schema_name is not None:
            schemas[content_type] = schema_name
    return schemas


def response_schema_names(operation: Operation) -> Dict[Tuple[str, str], str]:
    """(status code, content-type) -> component schema name for responses."""
    schemas: Dict[Tuple[str, str], str] = {}
    for status_code, response in (operation.responses or {}).items():
        if not isinstance(response, Response):
            continue
        for content_type, media_type in response.content.items():
            schema_name = extract_schema_name(media_type.schema)
            if schema_name is not None:
                schemas[(status_code, content_type)] = schema_name
    return schemas


# ---------------------------------------------------------------------------
# Route presence
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RouteAddedRule(RouteRule):
    rule_name = "RouteAdded"
    category = RuleCategory.ENDPOINT

    path: str
    method: str

    @property
    def description(self) -> str:
        return f"Route Added: {self.method.upper()} {self.path}"

    @property
    def change_level(self) -> ChangeLevel:
        return ChangeLevel.CHANGE

    @property
    def anchor(self) -> ChangeAnchor:
        return ChangeAnchor.route()

    @classmethod
    def detect(cls, path, method, base, current):
        if base is None and current is not None:
            return [cls(path=path, method=method)]
        return []


@dataclass(frozen=True)
class RouteRemovedRule(RouteRule):
    rule_name = "RouteRemoved"
    category = RuleCategory.ENDPOINT

    path: str
    method: str

    @property
    def description(self) -> str:
        return f"Route Removed: {self.method.upper()} {self.path}"

    @property
    def change_level(self) -> ChangeLevel:
        return ChangeLevel.BREAKING

    @property
    def anchor(self) -> ChangeAnchor:
        return ChangeAnchor.route()

    @classmethod
    def detect(cls, path, method, base, current):
        if base is not None and current is None:
            return [cls(path=path, method=method)]
        return []


# ---------------------------------------------------------------------------
# Route text
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RouteDescriptionChangedRule(RouteRule):
    """Only fires when both the old and the new description are non-empty."""

    rule_name = "RouteDescriptionChanged"
    category = RuleCategory.ENDPOINT

    path: str
    method: str
    old_description: str
    new_description: str

    @property
    def description(self) -> str:
        return f"Description Changed: {self.method.upper()} {self.path}"

    @property
    def change_level(self) -> ChangeLevel:
        return ChangeLevel.CHANGE

    @property
    def anchor(self) -> ChangeAnchor:
        return ChangeAnchor.route()

    @classmethod
    def detect(cls, path, method, base, current):
        if base is None or current is None:
            return []
        old = base.description or ""
        new = current.description or ""
        if old and new and old != new:
            return [cls(path=path, method=method, old_description=old, new_description=new)]
        return []


@dataclass(frozen=True)
class RouteSummaryChangedRule(RouteRule):
    """Only fires when both the old and the new summary are non-empty."""

    rule_name = "RouteSummaryChanged"
    category = RuleCategory.ENDPOINT

    path: str
    method: str
    old_summary: str
    new_summary: str

    @property
    def description(self) -> str:
        return f"Summary Changed: {self.method.upper()} {self.path}"

    @property
    def change_level(self) -> ChangeLevel:
        return ChangeLevel.CHANGE

    @property
    def anchor(self) -> ChangeAnchor:
        return ChangeAnchor.route()

    @classmethod
    def detect(cls, path, method, base, current):
        if base is None or current is None:
            return []
        old = base.summary or ""
        new = current.summary or ""
        if old and new and old != new:
            return [cls(path=path, method=method, old_summary=old, new_summary=new)]
        return []


# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RequiredParameterAddedRule(RouteRule):
    """
    A required parameter with a (name, location) not seen before.

    An existing optional parameter that becomes required is not reported.
    """

    rule_name = "RequiredParameterAdded"
    category = RuleCategory.PARAMETER

    path: str
    method: str
    parameter_name: str
    parameter_in: str

    @property
    def description(self) -> str:
        return f"Required Parameter Added: {self.parameter_name} (in: {self.parameter_in})"

    @property
    def change_level(self) -> ChangeLevel:
        return ChangeLevel.BREAKING

    @property
    def anchor(self) -> ChangeAnchor:
        return ChangeAnchor.parameter(self.parameter_name)

    @classmethod
    def detect(cls, path, method, base, current):
        if base is None or current is None:
            return []
        base_keys = _parameter_keys(base)
        return [
            cls(path=path, method=method, parameter_name=p.name, parameter_in=p.location)
            for p in _parameters(current)
            if p.required and (p.name, p.location) not in base_keys
        ]


@dataclass(frozen=True)
class ParameterRemovedRule(RouteRule):
    rule_name = "ParameterRemoved"
    category = RuleCategory.PARAMETER

    path: str
    method: str
    parameter_name: str
    parameter_in: str

    @property
    def description(self) -> str:
        return f"Parameter Removed: {self.parameter_name} (in: {self.parameter_in})"

    @property
    def change_level(self) -> ChangeLevel:
        return ChangeLevel.BREAKING

    @property
    def anchor(self) -> ChangeAnchor:
        return ChangeAnchor.parameter(self.parameter_name)

    @classmethod
    def detect(cls, path, method, base, current):
        if base is None or current is None:
            return []
        current_keys = _parameter_keys(current)
        return [
            cls(path=path, method=method, parameter_name=p.name, parameter_in=p.location)
            for p in _parameters(base)
            if (p.name, p.location) not in current_keys
        ]


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ResponseStatusAddedRule(RouteRule):
    rule_name = "ResponseStatusAdded"
    category = RuleCategory.RESPONSE

    path: str
    method: str
    status_code: str

    @property
    def description(self) -> str:
        return f"Response Status Added: {self.status_code}"

    @property
    def change_level(self) -> ChangeLevel:
        return ChangeLevel.CHANGE

    @property
    def anchor(self) -> ChangeAnchor:
        return ChangeAnchor.response_status(self.status_code)

    @classmethod
    def detect(cls, path, method, base, current):
        if base is None or current is None:
            return []
        if base.responses is None or current.responses is None:
            return []
        return [
            cls(path=path, method=method, status_code=status_code)
            for status_code in current.responses
            if status_code not in base.responses
        ]


@dataclass(frozen=True)
class ResponseStatusRemovedRule(RouteRule):
    rule_name = "ResponseStatusRemoved"
    category = RuleCategory.RESPONSE

    path: str
    method: str
    status_code: str

    @property
    def description(self) -> str:
        return f"Response Status Removed: {self.status_code}"

    @property
    def change_level(self) -> ChangeLevel:
        return ChangeLevel.WARNING

    @property
    def anchor(self) -> ChangeAnchor:
        return ChangeAnchor.response_status(self.status_code)

    @classmethod
    def detect(cls, path, method, base, current):
        if base is None or current is None:
            return []
        if base.responses is None or current.responses is None:
            return []
        return [
            cls(path=path, method=method, status_code=status_code)
            for status_code in base.responses
            if status_code not in current.responses
        ]


# ---------------------------------------------------------------------------
# Bound schemas
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RequestSchemaChangedRule(RouteRule):
    """A content type of the request body now points at a different schema."""

    rule_name = "RequestSchemaChanged"
    category = RuleCategory.REQUEST_BODY

    path: str
    method: str
    schema_name: str
    content_type: str
    old_schema_name: Optional[str] = None

    @property
    def description(self) -> str:
        return f"Request schema '{self.schema_name}' changed"

    @property
    def change_level(self) -> ChangeLevel:
        return ChangeLevel.BREAKING

    @property
    def anchor(self) -> ChangeAnchor:
        return ChangeAnchor.route()

    @classmethod
    def detect(cls, path, method, base, current):
        if base is None or current is None:
            return []
        base_schemas = request_schema_names(base)
        rules = []
        for content_type, schema_name in request_schema_names(current).items():
            old_name = base_schemas.get(content_type)
            if old_name is not None and old_name != schema_name:
                rules.append(
                    cls(
                        path=path,
                        method=method,
                        schema_name=schema_name,
                        content_type=content_type,
                        old_schema_name=old_name,
                    )
                )
        return rules


@dataclass(frozen=True)
class ResponseSchemaChangedRule(RouteRule):
    """A (status, content type) of a response now points at a different schema."""

    rule_name = "ResponseSchemaChanged"
    category = RuleCategory.RESPONSE

    path: str
    method: str
    schema_name: str
    content_type: str
    status_code: str
    old_schema_name: Optional[str] = None

    @property
    def description(self) -> str:
        return f"Response schema '{self.schema_name}' changed for status {self.status_code}"

    @property
    def change_level(self) -> ChangeLevel:
        return ChangeLevel.BREAKING

    @property
    def anchor(self) -> ChangeAnchor:
        return ChangeAnchor.response_status(self.status_code)

    @classmethod
    def detect(cls, path, method, base, current):
        if base is None or current is None:
            return []
        base_schemas = response_schema_names(base)
        rules = []
        for (status_code, content_type), schema_name in response_schema_names(current).items():
            old_name = base_schemas.get((status_code, content_type))
            if old_name is not None and old_name != schema_name:
                rules.append(
                    cls(
                        path=path,
                        method=method,
                        schema_name=schema_name,
                        content_type=content_type,
                        status_code=status_code,
                        old_schema_name=old_name,
                    )
                )
        return rules


# Registered rule lists, run in this order by RouteMatcher.
ROUTE_PRESENCE_RULES = (
    RouteAddedRule,
    RouteRemovedRule,
)

ROUTE_DETAIL_RULES = (
    RouteDescriptionChangedRule,
    RouteSummaryChangedRule,
    RequiredParameterAddedRule,
    ParameterRemovedRule,
    ResponseStatusAddedRule,
    ResponseStatusRemovedRule,
    RequestSchemaChangedRule,
    ResponseSchemaChangedRule,
)
