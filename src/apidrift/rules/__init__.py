# src/apidrift/rules/__init__.py
from .base import Rule, RouteRule, SchemaRule
from .cross_link import RequestSchemaViolationRule, ResponseSchemaViolationRule
from .route import ROUTE_DETAIL_RULES, ROUTE_PRESENCE_RULES
from .schema import SCHEMA_ATTRIBUTE_RULES, SCHEMA_PRESENCE_RULES, SCHEMA_STRUCTURE_RULES

__all__ = [
    "Rule",
    "RouteRule",
    "SchemaRule",
    "RequestSchemaViolationRule",
    "ResponseSchemaViolationRule",
    "ROUTE_DETAIL_RULES",
    "ROUTE_PRESENCE_RULES",
    "SCHEMA_ATTRIBUTE_RULES",
    "SCHEMA_PRESENCE_RULES",
    "SCHEMA_STRUCTURE_RULES",
]
