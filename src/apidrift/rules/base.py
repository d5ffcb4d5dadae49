# src/apidrift/rules/base.py

"""
Rule abstraction.

A rule is a frozen dataclass describing one detected difference. Its class
method `detect` inspects a before/after pair and returns zero or more
instances; each instance knows its own name, rendered description, change
level, anchor and category.

Rules are pure: they never mutate their inputs and only read the two
fragments plus the path context they are given. Matchers run them from
explicitly registered, ordered lists, so adding a check means writing a new
rule class and appending it to a list.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, List, Optional, Sequence

from apidrift.models.change_level import ChangeLevel
from apidrift.models.document import Operation, SchemaNode
from apidrift.models.match_result import ChangeAnchor, RuleCategory, RuleViolation


class Rule(ABC):
    rule_name: ClassVar[str]
    category: ClassVar[RuleCategory] = RuleCategory.SCHEMA

    @property
    def name(self) -> str:
        return self.rule_name

    @property
    @abstractmethod
    def description(self) -> str:
        ...

    @property
    @abstractmethod
    def change_level(self) -> ChangeLevel:
        ...

    @property
    @abstractmethod
    def anchor(self) -> ChangeAnchor:
        ...

    def to_violation(self) -> RuleViolation:
        return RuleViolation.from_rule(self)


class SchemaRule(Rule):
    """Rule over a pair of resolved schema nodes at one property path."""

    @classmethod
    @abstractmethod
    def detect(
        cls,
        schema_name: str,
        property_path: str,
        base: Optional[SchemaNode],
        current: Optional[SchemaNode],
    ) -> List["SchemaRule"]:
        ...


class RouteRule(Rule):
    """Rule over a pair of operations for one path + method."""

    @classmethod
    @abstractmethod
    def detect(
        cls,
        path: str,
        method: str,
        base: Optional[Operation],
        current: Optional[Operation],
    ) -> List["RouteRule"]:
        ...


def run_schema_rules(
    rules: Sequence[type],
    schema_name: str,
    property_path: str,
    base: Optional[SchemaNode],
    current: Optional[SchemaNode],
) -> List[RuleViolation]:
    violations: List[RuleViolation] = []
    for rule_cls in rules:
        for rule in rule_cls.detect(schema_name, property_path, base, current):
            violations.append(rule.to_violation())
    return violations


def run_route_rules(
    rules: Sequence[type],
    path: str,
    method: str,
    base: Optional[Operation],
    current: Optional[Operation],
) -> List[RuleViolation]:
    violations: List[RuleViolation] = []
    for rule_cls in rules:
        for rule in rule_cls.detect(path, method, base, current):
            violations.append(rule.to_violation())
    return violations


def join_path(parent: str, key: str) -> str:
    if not parent:
        return key
    return f"{parent}.{key}"
