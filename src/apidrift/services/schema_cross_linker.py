# src/apidrift/services/schema_cross_linker.py

from __future__ import annotations
from typing import Dict, List, Sequence
import logging

from apidrift.models.match_result import MatchResult, RouteInfo, RuleViolation
from apidrift.rules.cross_link import RequestSchemaViolationRule, ResponseSchemaViolationRule

logger = logging.getLogger(__name__)


def index_schema_violations(schema_results: Sequence[MatchResult]) -> Dict[str, List[RuleViolation]]:
    index: Dict[str, List[RuleViolation]] = {}
    for result in schema_results:
        index.setdefault(result.name, []).extend(result.violations)
    return index


def link_schema_violations(
    route_info: RouteInfo,
    schema_results: Sequence[MatchResult],
) -> List[RuleViolation]:
    """
    Turn the violations of every schema a route uses into route-scoped
    violations, so an unchanged operation still reports unstable schemas.

    Request body schemas are anchored to the route, response schemas to
    their status code. Change levels are carried over unchanged.
    """
    index = index_schema_violations(schema_results)
    violations: List[RuleViolation] = []

    for ref in route_info.request_schemas:
        for violation in index.get(ref.schema_name, []):
            violations.append(
                RequestSchemaViolationRule(
                    schema_name=ref.schema_name,
                    content_type=ref.content_type,
                    violation=violation,
                ).to_violation()
            )

    for ref in route_info.response_schemas:
        for violation in index.get(ref.schema_name, []):
            violations.append(
                ResponseSchemaViolationRule(
                    schema_name=ref.schema_name,
                    content_type=ref.content_type,
                    status_code=ref.location.status_code or "unknown",
                    violation=violation,
                ).to_violation()
            )

    if violations:
        logger.debug("Linked %d schema violations onto %s", len(violations), route_info.key)
    return violations
