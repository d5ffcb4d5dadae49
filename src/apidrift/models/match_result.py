# src/apidrift/models/match_result.py

"""
Result types produced by the schema and route matchers.

A `MatchResult` exists for every schema or route that has at least one
`RuleViolation`. Each violation is self-describing: rule name, rendered
description, change level, structural anchor and category.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from apidrift.models.change_level import ChangeLevel, calculate_overall_change_level


class AnchorKind(str, Enum):
    SCHEMA = "schema"
    PROPERTY = "property"
    PROPERTY_TYPE = "property_type"
    REQUIRED = "required"
    ENUM_VALUES = "enum_values"
    FORMAT = "format"
    NULLABLE = "nullable"
    ARRAY_ITEMS = "array_items"
    DESCRIPTION = "description"
    ROUTE = "route"
    PARAMETER = "parameter"
    RESPONSE_STATUS = "response_status"


_PROPERTY_KINDS = {
    AnchorKind.PROPERTY,
    AnchorKind.PROPERTY_TYPE,
    AnchorKind.ENUM_VALUES,
    AnchorKind.FORMAT,
    AnchorKind.NULLABLE,
    AnchorKind.ARRAY_ITEMS,
    AnchorKind.DESCRIPTION,
}


@dataclass(frozen=True)
class ChangeAnchor:
    """
    Where in the structure a change happened.

    value:
        Dotted property path for property-related kinds, parameter name for
        PARAMETER, status code for RESPONSE_STATUS, None otherwise.
    """
    kind: AnchorKind
    value: Optional[str] = None

    @property
    def property_path(self) -> Optional[str]:
        if self.kind in _PROPERTY_KINDS:
            return self.value
        return None

    @property
    def is_schema_level(self) -> bool:
        return self.kind in (AnchorKind.SCHEMA, AnchorKind.REQUIRED)

    @property
    def is_property_level(self) -> bool:
        return self.property_path is not None

    @classmethod
    def schema(cls) -> "ChangeAnchor":
        return cls(AnchorKind.SCHEMA)

    @classmethod
    def required(cls) -> "ChangeAnchor":
        return cls(AnchorKind.REQUIRED)

    @classmethod
    def route(cls) -> "ChangeAnchor":
        return cls(AnchorKind.ROUTE)

    @classmethod
    def property(cls, path: str) -> "ChangeAnchor":
        return cls(AnchorKind.PROPERTY, path)

    @classmethod
    def parameter(cls, name: str) -> "ChangeAnchor":
        return cls(AnchorKind.PARAMETER, name)

    @classmethod
    def response_status(cls, status_code: str) -> "ChangeAnchor":
        return cls(AnchorKind.RESPONSE_STATUS, status_code)

    def __str__(self) -> str:
        if self.value is None:
            return self.kind.value
        return f"{self.kind.value}:{self.value}"


class RuleCategory(str, Enum):
    SCHEMA = "schema"
    ENDPOINT = "endpoint"
    PARAMETER = "parameter"
    RESPONSE = "response"
    REQUEST_BODY = "request_body"


@dataclass(frozen=True)
class RuleViolation:
    name: str
    description: str
    change_level: ChangeLevel
    anchor: ChangeAnchor
    category: RuleCategory = RuleCategory.SCHEMA

    @classmethod
    def from_rule(cls, rule) -> "RuleViolation":
        return cls(
            name=rule.name,
            description=rule.description,
            change_level=rule.change_level,
            anchor=rule.anchor,
            category=rule.category,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rule": self.name,
            "description": self.description,
            "change_level": self.change_level.value,
            "anchor": {"kind": self.anchor.kind.value, "value": self.anchor.value},
            "category": self.category.value,
        }


@dataclass
class MatchResult:
    """
    name:
        Schema name, or "METHOD path" for a route.
    change_level:
        Aggregate of the violations, computed on construction.
    """
    name: str
    violations: List[RuleViolation]
    change_level: ChangeLevel = field(init=False)

    def __post_init__(self) -> None:
        self.change_level = calculate_overall_change_level(self.violations)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "change_level": self.change_level.value,
            "violations": [v.to_dict() for v in self.violations],
        }


class SchemaLocationKind(str, Enum):
    REQUEST_BODY = "request_body"
    RESPONSE = "response"


@dataclass(frozen=True)
class SchemaLocation:
    kind: SchemaLocationKind
    status_code: Optional[str] = None

    @classmethod
    def request_body(cls) -> "SchemaLocation":
        return cls(SchemaLocationKind.REQUEST_BODY)

    @classmethod
    def response(cls, status_code: str) -> "SchemaLocation":
        return cls(SchemaLocationKind.RESPONSE, status_code)


@dataclass(frozen=True)
class SchemaReference:
    """A named component schema used by a route under one content type."""
    schema_name: str
    content_type: str
    location: SchemaLocation

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schema_name": self.schema_name,
            "content_type": self.content_type,
            "location": self.location.kind.value,
            "status_code": self.location.status_code,
        }


@dataclass
class RouteInfo:
    path: str
    method: str
    request_schemas: List[SchemaReference] = field(default_factory=list)
    response_schemas: List[SchemaReference] = field(default_factory=list)

    @property
    def key(self) -> str:
        return f"{self.method.upper()} {self.path}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "method": self.method.upper(),
            "request_schemas": [s.to_dict() for s in self.request_schemas],
            "response_schemas": [s.to_dict() for s in self.response_schemas],
        }


@dataclass(frozen=True)
class ViolationInfo:
    """Lightweight copy of a violation for the full schema view."""
    rule_name: str
    description: str
    change_level: str
    anchor: str

    @classmethod
    def from_violation(cls, violation: RuleViolation) -> "ViolationInfo":
        return cls(
            rule_name=violation.name,
            description=violation.description,
            change_level=violation.change_level.value,
            anchor=str(violation.anchor),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rule": self.rule_name,
            "description": self.description,
            "change_level": self.change_level,
            "anchor": self.anchor,
        }


@dataclass
class SchemaProperty:
    name: str
    property_type: Optional[str]
    format: Optional[str]
    description: Optional[str]
    required: bool
    nullable: bool
    enum_values: List[Any] = field(default_factory=list)
    violations: List[ViolationInfo] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.property_type,
            "format": self.format,
            "description": self.description,
            "required": self.required,
            "nullable": self.nullable,
            "enum_values": list(self.enum_values),
            "violations": [v.to_dict() for v in self.violations],
        }


@dataclass
class FullSchemaInfo:
    name: str
    description: Optional[str]
    properties: List[SchemaProperty]
    schema_level_violations: List[ViolationInfo]
    change_level: str
    change_level_class: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "change_level": self.change_level,
            "properties": [p.to_dict() for p in self.properties],
            "schema_level_violations": [v.to_dict() for v in self.schema_level_violations],
        }
