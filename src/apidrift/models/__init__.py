from .change_level import ChangeLevel, calculate_overall_change_level
from .document import (
    Document,
    MediaType,
    Operation,
    Parameter,
    PathItem,
    Reference,
    RequestBody,
    Response,
    SchemaNode,
)
from .match_result import (
    AnchorKind,
    ChangeAnchor,
    FullSchemaInfo,
    MatchResult,
    RouteInfo,
    RuleCategory,
    RuleViolation,
    SchemaLocation,
    SchemaProperty,
    SchemaReference,
    ViolationInfo,
)

__all__ = [
    "AnchorKind",
    "ChangeAnchor",
    "ChangeLevel",
    "Document",
    "FullSchemaInfo",
    "MatchResult",
    "MediaType",
    "Operation",
    "Parameter",
    "PathItem",
    "Reference",
    "RequestBody",
    "Response",
    "RouteInfo",
    "RuleCategory",
    "RuleViolation",
    "SchemaLocation",
    "SchemaNode",
    "SchemaProperty",
    "SchemaReference",
    "ViolationInfo",
    "calculate_overall_change_level",
]
