# src/apidrift/services/route_matcher.py

"""
Route Matcher

Compares every path x HTTP method between two documents:
- route added / removed
- summary and description edits
- required parameters added, parameters removed
- response status codes added / removed
- request / response bodies bound to a different named schema

Schema violations computed by the SchemaMatcher are linked onto every
route whose request or response bodies reference the changed schema, even
when the operation itself is identical.
"""

from __future__ import annotations
from typing import List, Optional, Sequence
import logging
from opentelemetry import trace

from apidrift.models.document import (
    HTTP_METHODS,
    Document,
    Operation,
    RequestBody,
    Response,
    extract_schema_name,
)
from apidrift.models.match_result import (
    MatchResult,
    RouteInfo,
    RuleViolation,
    SchemaLocation,
    SchemaReference,
)
from apidrift.rules.base import run_route_rules
from apidrift.rules.route import ROUTE_DETAIL_RULES, ROUTE_PRESENCE_RULES
from apidrift.services.schema_cross_linker import link_schema_violations

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class RouteMatcher:
    def __init__(self, base_spec: Document, current_spec: Document):
        self.base_spec = base_spec
        self.current_spec = current_spec

    def match_routes(self, schema_results: Sequence[MatchResult] = ()) -> List[MatchResult]:
        """
        Return one MatchResult per "METHOD path" with at least one own or
        linked violation, sorted by path then method order.
        """
        with tracer.start_as_current_span("service.compare_routes") as span:
            results: List[MatchResult] = []
            all_paths = set(self.base_spec.paths) | set(self.current_spec.paths)

            for path in sorted(all_paths):
                base_item = self.base_spec.paths.get(path)
                current_item = self.current_spec.paths.get(path)

                for method in HTTP_METHODS:
                    base_op = base_item.operation(method) if base_item else None
                    current_op = current_item.operation(method) if current_item else None

                    if base_op is None and current_op is None:
                        continue

                    violations: List[RuleViolation] = []

                    identical = base_op is not None and current_op is not None and base_op == current_op
                    if not identical:
                        logger.info("Route %s %s differs", method.upper(), path)
                        violations.extend(self.compare_operations(path, method, base_op, current_op))

                    if current_op is not None:
                        route_info = self.extract_route_schemas(path, method, current_op)
                        violations.extend(link_schema_violations(route_info, schema_results))

                    if violations:
                        results.append(MatchResult(f"{method.upper()} {path}", violations))

            span.set_attribute("paths.count", len(all_paths))
            span.set_attribute("routes.changed", len(results))
            logger.info("Route comparison complete: %d routes changed", len(results))
            return results

    def compare_operations(
        self,
        path: str,
        method: str,
        base: Optional[Operation],
        current: Optional[Operation],
    ) -> List[RuleViolation]:
        violations = run_route_rules(ROUTE_PRESENCE_RULES, path, method, base, current)

        if base is not None and current is not None:
            violations.extend(run_route_rules(ROUTE_DETAIL_RULES, path, method, base, current))

        return violations

    def extract_route_schemas(self, path: str, method: str, operation: Operation) -> RouteInfo:
        """Collect the named schemas a route uses in its request and response bodies."""
        request_schemas: List[SchemaReference] = []
        response_schemas: List[SchemaReference] = []

        if isinstance(operation.request_body, RequestBody):
            for content_type, media_type in operation.request_body.content.items():
                schema_name = extract_schema_name(media_type.schema)
                if schema_name is not None:
                    request_schemas.append(
                        SchemaReference(schema_name, content_type, SchemaLocation.request_body())
                    )

        for status_code, response in (operation.responses or {}).items():
            if not isinstance(response, Response):
                continue
            for content_type, media_type in response.content.items():
                schema_name = extract_schema_name(media_type.schema)
                if schema_name is not None:
                    response_schemas.append(
                        SchemaReference(schema_name, content_type, SchemaLocation.response(status_code))
                    )

        return RouteInfo(
            path=path,
            method=method,
            request_schemas=request_schemas,
            response_schemas=response_schemas,
        )

    def get_all_routes_with_schemas(self) -> List[RouteInfo]:
        """Every route of the current document with its schema usage."""
        routes: List[RouteInfo] = []
        for path in sorted(self.current_spec.paths):
            path_item = self.current_spec.paths[path]
            for method in HTTP_METHODS:
                operation = path_item.operation(method)
                if operation is not None:
                    routes.append(self.extract_route_schemas(path, method, operation))
        return routes


def compare_routes(
    base_doc: Document,
    current_doc: Document,
    schema_results: Sequence[MatchResult] = (),
) -> List[MatchResult]:
    """Functional entry point: compare routes, linking schema results."""
    return RouteMatcher(base_doc, current_doc).match_routes(schema_results)


def list_all_routes_with_schema_usage(current_doc: Document) -> List[RouteInfo]:
    return RouteMatcher(current_doc, current_doc).get_all_routes_with_schemas()
