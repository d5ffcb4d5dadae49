# src/apidrift/services/schema_matcher.py

"""
Schema Matcher

Compares the component schemas of two documents and reports, per schema
name, every rule violation found in the schema tree:
- schema added / removed
- type, required list and property set changes at every level
- description, enum, format and nullable changes at every level

Nested properties are compared recursively. A pair of references already
being compared further up the same branch is not entered again, so
self-referencing schemas are walked once per cycle. MAX_DEPTH caps deep
inline trees. Array item schemas are not compared.
"""

from __future__ import annotations
from typing import Dict, FrozenSet, List, Mapping, Optional, Tuple
import logging
from opentelemetry import trace

from apidrift.models.document import SCHEMA_REF_PREFIX, Document, Reference, SchemaRef
from apidrift.models.match_result import (
    FullSchemaInfo,
    MatchResult,
    RuleViolation,
    SchemaProperty,
    ViolationInfo,
)
from apidrift.models.change_level import calculate_overall_change_level
from apidrift.rules.base import join_path, run_schema_rules
from apidrift.rules.schema import (
    SCHEMA_ATTRIBUTE_RULES,
    SCHEMA_PRESENCE_RULES,
    SCHEMA_STRUCTURE_RULES,
    format_schema_type,
)
from apidrift.services.schema_resolver import resolve_schema_ref

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

MAX_DEPTH = 30

RefPair = Tuple[str, str]


def _ref_pair(base: SchemaRef, current: SchemaRef) -> Optional[RefPair]:
    if isinstance(base, Reference) and isinstance(current, Reference):
        return base.ref_path, current.ref_path
    return None


class SchemaMatcher:
    """
    Matches schemas between a base and a current document.

    References found in base schemas resolve against `base_spec`, those in
    current schemas against `current_spec`.
    """

    def __init__(
        self,
        base_schemas: Mapping[str, SchemaRef],
        current_schemas: Mapping[str, SchemaRef],
        base_spec: Document,
        current_spec: Document,
    ):
        self.base_schemas = base_schemas
        self.current_schemas = current_schemas
        self.base_spec = base_spec
        self.current_spec = current_spec

    def match_schemas(self) -> List[MatchResult]:
        """Return one MatchResult per changed schema, sorted by name."""
        with tracer.start_as_current_span("service.compare_schemas") as span:
            results: List[MatchResult] = []
            all_names = set(self.base_schemas) | set(self.current_schemas)

            for schema_name in sorted(all_names):
                violations = self.compare_schemas(
                    schema_name,
                    self.base_schemas.get(schema_name),
                    self.current_schemas.get(schema_name),
                )
                if violations:
                    result = MatchResult(schema_name, violations)
                    logger.debug(
                        "Schema %s changed: %d violations, level=%s",
                        schema_name,
                        len(violations),
                        result.change_level.value,
                    )
                    results.append(result)

            span.set_attribute("schemas.count", len(all_names))
            span.set_attribute("schemas.changed", len(results))
            logger.info("Schema comparison complete: %d of %d schemas changed", len(results), len(all_names))
            return results

    def compare_schemas(
        self,
        schema_name: str,
        base: Optional[SchemaRef],
        current: Optional[SchemaRef],
    ) -> List[RuleViolation]:
        violations: List[RuleViolation] = []

        if base is not None and current is not None and base == current:
            return violations

        base_schema = resolve_schema_ref(base, self.base_spec)
        current_schema = resolve_schema_ref(current, self.current_spec)

        violations.extend(
            run_schema_rules(SCHEMA_PRESENCE_RULES, schema_name, "", base_schema, current_schema)
        )

        if base is not None and current is not None:
            # the component itself counts as being compared
            own_ref = SCHEMA_REF_PREFIX + schema_name
            visiting = frozenset({(own_ref, own_ref)})
            violations.extend(self.compare_schema_details(schema_name, "", base, current, visiting=visiting))

        return violations

    def compare_schema_details(
        self,
        schema_name: str,
        property_path: str,
        base: SchemaRef,
        current: SchemaRef,
        depth: int = 0,
        visiting: FrozenSet[RefPair] = frozenset(),
    ) -> List[RuleViolation]:
        violations: List[RuleViolation] = []

        if depth >= MAX_DEPTH:
            logger.debug("Max depth reached for %s at '%s'", schema_name, property_path)
            return violations

        pair = _ref_pair(base, current)
        if pair is not None:
            if pair in visiting:
                logger.debug("Reference cycle for %s at '%s': %s", schema_name, property_path, pair[1])
                return violations
            visiting = visiting | {pair}

        base_schema = resolve_schema_ref(base, self.base_spec)
        current_schema = resolve_schema_ref(current, self.current_spec)
        if base_schema is None or current_schema is None:
            return violations

        violations.extend(
            run_schema_rules(SCHEMA_STRUCTURE_RULES, schema_name, property_path, base_schema, current_schema)
        )

        for prop_name, current_prop in current_schema.properties.items():
            base_prop = base_schema.properties.get(prop_name)
            if base_prop is None:
                continue
            violations.extend(
                self.compare_schema_details(
                    schema_name,
                    join_path(property_path, prop_name),
                    base_prop,
                    current_prop,
                    depth + 1,
                    visiting,
                )
            )

        violations.extend(
            run_schema_rules(SCHEMA_ATTRIBUTE_RULES, schema_name, property_path, base_schema, current_schema)
        )

        return violations

    def build_full_schema_infos(self, results: List[MatchResult]) -> List[FullSchemaInfo]:
        """
        Build the full property view of every changed schema that still
        exists in the current document.
        """
        full_schemas: List[FullSchemaInfo] = []
        for result in results:
            current_ref = self.current_schemas.get(result.name)
            current_schema = resolve_schema_ref(current_ref, self.current_spec)
            if current_schema is None:
                continue
            full_schemas.append(self._build_full_schema_info(result.name, current_schema, result.violations))
        return full_schemas

    def _build_full_schema_info(self, schema_name, schema, violations: List[RuleViolation]) -> FullSchemaInfo:
        schema_level: List[ViolationInfo] = []
        by_property: Dict[str, List[ViolationInfo]] = {}

        for violation in violations:
            info = ViolationInfo.from_violation(violation)
            if violation.anchor.is_schema_level:
                schema_level.append(info)
            elif violation.anchor.property_path is not None:
                # nested paths such as "address.city" belong to "address"
                top_level = violation.anchor.property_path.split(".", 1)[0]
                by_property.setdefault(top_level, []).append(info)

        required = set(schema.required)
        properties: List[SchemaProperty] = []

        for prop_name, prop_ref in schema.properties.items():
            prop_schema = resolve_schema_ref(prop_ref, self.current_spec)
            properties.append(
                SchemaProperty(
                    name=prop_name,
                    property_type=format_schema_type(prop_schema.schema_type)
                    if prop_schema and prop_schema.schema_type is not None
                    else None,
                    format=prop_schema.format if prop_schema else None,
                    description=prop_schema.description if prop_schema else None,
                    required=prop_name in required,
                    nullable=prop_schema.nullable if prop_schema else False,
                    enum_values=list(prop_schema.enum_values) if prop_schema else [],
                    violations=by_property.get(prop_name, []),
                )
            )

        properties.sort(key=lambda p: (not p.required, p.name))

        change_level = calculate_overall_change_level(violations)
        return FullSchemaInfo(
            name=schema_name,
            description=schema.description,
            properties=properties,
            schema_level_violations=schema_level,
            change_level=change_level.value,
            change_level_class=change_level.css_class,
        )


def compare_schemas(
    base_schemas: Mapping[str, SchemaRef],
    current_schemas: Mapping[str, SchemaRef],
    base_doc: Document,
    current_doc: Document,
) -> List[MatchResult]:
    """Functional entry point: compare two schema collections."""
    return SchemaMatcher(base_schemas, current_schemas, base_doc, current_doc).match_schemas()
