# src/apidrift/services/spec_compare_service.py

"""
Spec Compare Service

Runs a full comparison of a base and a current API description:
1. SchemaMatcher over the union of component schema names
2. RouteMatcher over every path x method, linking schema violations
3. Route schema usage and full schema views for reporting collaborators

The result is a ComparisonReport. `to_dict()` gives a JSON-ready structure;
turning it into human-readable output is left to callers.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List
import logging
import time
from opentelemetry import trace

from apidrift.metrics import comparison_duration_seconds, comparisons_total, violations_total
from apidrift.models.change_level import ChangeLevel, calculate_overall_change_level
from apidrift.models.document import Document
from apidrift.models.match_result import FullSchemaInfo, MatchResult, RouteInfo
from apidrift.services.api_spec_parser import parse_api_spec
from apidrift.services.document_loader import load_document
from apidrift.services.route_matcher import RouteMatcher
from apidrift.services.schema_matcher import SchemaMatcher

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


@dataclass
class ComparisonReport:
    schema_results: List[MatchResult]
    route_results: List[MatchResult]
    route_infos: List[RouteInfo] = field(default_factory=list)
    full_schema_infos: List[FullSchemaInfo] = field(default_factory=list)
    base_schema_count: int = 0
    current_schema_count: int = 0

    @property
    def change_level(self) -> ChangeLevel:
        """Overall verdict across both schema and route results."""
        return calculate_overall_change_level(self.schema_results + self.route_results)

    @property
    def breaking(self) -> bool:
        return self.change_level == ChangeLevel.BREAKING

    @property
    def has_changes(self) -> bool:
        return bool(self.schema_results or self.route_results)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "change_level": self.change_level.value if self.has_changes else None,
            "breaking": self.breaking,
            "stats": {
                "base_schemas": self.base_schema_count,
                "current_schemas": self.current_schema_count,
                "changed_schemas": len(self.schema_results),
                "total_routes": len(self.route_infos),
                "changed_routes": len(self.route_results),
            },
            "schemas": [r.to_dict() for r in self.schema_results],
            "routes": [r.to_dict() for r in self.route_results],
            "full_schemas": [s.to_dict() for s in self.full_schema_infos],
            "route_usage": [r.to_dict() for r in self.route_infos],
        }


def compare_documents(base: Document, current: Document) -> ComparisonReport:
    """
    Compare two loaded documents.

    Never raises for unresolvable references or deep schema graphs; those
    branches are skipped and the rest of the comparison proceeds.
    """
    with tracer.start_as_current_span("service.compare_documents") as span:
        started = time.perf_counter()

        if not base.schemas:
            logger.warning("Base specification has no schemas defined")
        if not current.schemas:
            logger.warning("Current specification has no schemas defined")

        schema_matcher = SchemaMatcher(base.schemas, current.schemas, base, current)
        schema_results = schema_matcher.match_schemas()
        full_schema_infos = schema_matcher.build_full_schema_infos(schema_results)

        route_matcher = RouteMatcher(base, current)
        route_results = route_matcher.match_routes(schema_results)
        route_infos = route_matcher.get_all_routes_with_schemas()

        report = ComparisonReport(
            schema_results=schema_results,
            route_results=route_results,
            route_infos=route_infos,
            full_schema_infos=full_schema_infos,
            base_schema_count=len(base.schemas),
            current_schema_count=len(current.schemas),
        )

        _record_metrics(report)
        comparison_duration_seconds.observe(time.perf_counter() - started)

        span.set_attribute("diff.schemas_changed", len(schema_results))
        span.set_attribute("diff.routes_changed", len(route_results))
        span.set_attribute("diff.breaking", report.breaking)

        logger.info(
            "Comparison complete: %d schemas changed, %d routes changed, breaking=%s",
            len(schema_results),
            len(route_results),
            report.breaking,
        )
        return report


def compare_spec_files(
    base_filename: str,
    base_bytes: bytes,
    current_filename: str,
    current_bytes: bytes,
) -> ComparisonReport:
    """
    Convenience helper: parse and load two raw spec files, then compare.

    Raises SpecParseError / InvalidDocumentError (both ValueError) when
    either file is not a usable API description.
    """
    base = load_document(parse_api_spec(base_filename, base_bytes))
    current = load_document(parse_api_spec(current_filename, current_bytes))
    return compare_documents(base, current)


def _record_metrics(report: ComparisonReport) -> None:
    level = report.change_level.value if report.has_changes else "none"
    comparisons_total.labels(change_level=level).inc()

    for scope, results in (("schema", report.schema_results), ("route", report.route_results)):
        for result in results:
            for violation in result.violations:
                violations_total.labels(scope=scope, change_level=violation.change_level.value).inc()
