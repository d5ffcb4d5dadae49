# src/apidrift/rules/schema.py

"""
Schema-level and property-level rules.

Each rule fixes its own change level. The reasoning, from a client's point
of view:
- removing things a client may rely on (schemas, properties, enum values)
  is Breaking; adding them is a Change
- newly required properties are Breaking; dropping a name from `required`
  while keeping the property is a Change (more permissive)
- a type change is Breaking, a format change is a Warning
- nullable true -> false is Breaking, false -> true is a Warning
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from apidrift.models.change_level import ChangeLevel
from apidrift.models.document import SchemaNode
from apidrift.models.match_result import AnchorKind, ChangeAnchor
from apidrift.rules.base import SchemaRule, join_path


def _attribute_anchor(kind: AnchorKind, property_path: str) -> ChangeAnchor:
    # top-level attribute changes belong to the schema itself
    if not property_path:
        return ChangeAnchor.schema()
    return ChangeAnchor(kind, property_path)


def _required_anchor(property_path: str) -> ChangeAnchor:
    if not property_path:
        return ChangeAnchor.required()
    return ChangeAnchor.property(property_path)


def format_schema_type(schema_type) -> str:
    if schema_type is None:
        return "(none)"
    if isinstance(schema_type, tuple):
        return " | ".join(schema_type)
    return str(schema_type)


def _value_key(value: Any) -> str:
    # JSON text keeps true/1 and 1/1.0 apart, unlike ==
    return json.dumps(value, sort_keys=True, default=str)


def _format_values(values: List[Any]) -> str:
    return ", ".join(_value_key(v) for v in values)


def _values_difference(left: List[Any], right: List[Any]) -> List[Any]:
    """Values of `left` absent from `right`, first occurrence order kept."""
    right_keys = {_value_key(v) for v in right}
    seen = set()
    out: List[Any] = []
    for value in left:
        key = _value_key(value)
        if key not in right_keys and key not in seen:
            seen.add(key)
            out.append(value)
    return out


def _both(base: Optional[SchemaNode], current: Optional[SchemaNode]) -> Optional[Tuple[SchemaNode, SchemaNode]]:
    if base is None or current is None:
        return None
    return base, current


# ---------------------------------------------------------------------------
# Schema presence
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SchemaAddedRule(SchemaRule):
    rule_name = "SchemaAdded"

    schema_name: str

    @property
    def description(self) -> str:
        return f"Schema '{self.schema_name}' was added"

    @property
    def change_level(self) -> ChangeLevel:
        return ChangeLevel.CHANGE

    @property
    def anchor(self) -> ChangeAnchor:
        return ChangeAnchor.schema()

    @classmethod
    def detect(cls, schema_name, property_path, base, current):
        if base is None and current is not None:
            return [cls(schema_name=schema_name)]
        return []


@dataclass(frozen=True)
class SchemaRemovedRule(SchemaRule):
    rule_name = "SchemaRemoved"

    schema_name: str

    @property
    def description(self) -> str:
        return f"Schema '{self.schema_name}' was removed"

    @property
    def change_level(self) -> ChangeLevel:
        return ChangeLevel.BREAKING

    @property
    def anchor(self) -> ChangeAnchor:
        return ChangeAnchor.schema()

    @classmethod
    def detect(cls, schema_name, property_path, base, current):
        if base is not None and current is None:
            return [cls(schema_name=schema_name)]
        return []


# ---------------------------------------------------------------------------
# Structure
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TypeChangedRule(SchemaRule):
    rule_name = "TypeChanged"

    schema_name: str
    property_path: str
    old_type: str
    new_type: str

    @property
    def description(self) -> str:
        return f"Type changed from '{self.old_type}' to '{self.new_type}'"

    @property
    def change_level(self) -> ChangeLevel:
        return ChangeLevel.BREAKING

    @property
    def anchor(self) -> ChangeAnchor:
        return _attribute_anchor(AnchorKind.PROPERTY_TYPE, self.property_path)

    @classmethod
    def detect(cls, schema_name, property_path, base, current):
        pair = _both(base, current)
        if pair is None or pair[0].schema_type == pair[1].schema_type:
            return []
        return [
            cls(
                schema_name=schema_name,
                property_path=property_path,
                old_type=format_schema_type(pair[0].schema_type),
                new_type=format_schema_type(pair[1].schema_type),
            )
        ]


@dataclass(frozen=True)
class PropertyAddedRule(SchemaRule):
    rule_name = "PropertyAdded"

    schema_name: str
    property_path: str
    property_name: str

    @property
    def description(self) -> str:
        return f"Property '{self.property_name}' was added"

    @property
    def change_level(self) -> ChangeLevel:
        return ChangeLevel.CHANGE

    @property
    def anchor(self) -> ChangeAnchor:
        return ChangeAnchor.property(join_path(self.property_path, self.property_name))

    @classmethod
    def detect(cls, schema_name, property_path, base, current):
        pair = _both(base, current)
        if pair is None:
            return []
        base_schema, current_schema = pair
        return [
            cls(schema_name=schema_name, property_path=property_path, property_name=name)
            for name in current_schema.properties
            if name not in base_schema.properties
        ]


@dataclass(frozen=True)
class PropertyRemovedRule(SchemaRule):
    """A property no longer exists at all. Breaking whether or not it was required."""

    rule_name = "PropertyRemoved"

    schema_name: str
    property_path: str
    property_name: str
    was_required: bool = False

    @property
    def description(self) -> str:
        if self.was_required:
            return f"Property '{self.property_name}' was removed (was required)"
        return f"Property '{self.property_name}' was removed"

    @property
    def change_level(self) -> ChangeLevel:
        return ChangeLevel.BREAKING

    @property
    def anchor(self) -> ChangeAnchor:
        return ChangeAnchor.property(join_path(self.property_path, self.property_name))

    @classmethod
    def detect(cls, schema_name, property_path, base, current):
        pair = _both(base, current)
        if pair is None:
            return []
        base_schema, current_schema = pair
        return [
            cls(
                schema_name=schema_name,
                property_path=property_path,
                property_name=name,
                was_required=name in base_schema.required,
            )
            for name in base_schema.properties
            if name not in current_schema.properties
        ]


@dataclass(frozen=True)
class RequiredPropertyAddedRule(SchemaRule):
    rule_name = "RequiredPropertyAdded"

    schema_name: str
    property_path: str
    property_name: str

    @property
    def description(self) -> str:
        return f"Required property '{self.property_name}' was added"

    @property
    def change_level(self) -> ChangeLevel:
        return ChangeLevel.BREAKING

    @property
    def anchor(self) -> ChangeAnchor:
        return _required_anchor(self.property_path)

    @classmethod
    def detect(cls, schema_name, property_path, base, current):
        pair = _both(base, current)
        if pair is None:
            return []
        base_schema, current_schema = pair
        return [
            cls(schema_name=schema_name, property_path=property_path, property_name=name)
            for name in _values_difference(current_schema.required, base_schema.required)
        ]


@dataclass(frozen=True)
class RequiredPropertyRemovedRule(SchemaRule):
    """
    A property was dropped from `required` but is still declared, i.e. it
    was made optional. Full removal is reported by PropertyRemovedRule.
    """

    rule_name = "RequiredPropertyRemoved"

    schema_name: str
    property_path: str
    property_name: str

    @property
    def description(self) -> str:
        return f"Required property '{self.property_name}' was removed (now optional)"

    @property
    def change_level(self) -> ChangeLevel:
        return ChangeLevel.CHANGE

    @property
    def anchor(self) -> ChangeAnchor:
        return _required_anchor(self.property_path)

    @classmethod
    def detect(cls, schema_name, property_path, base, current):
        pair = _both(base, current)
        if pair is None:
            return []
        base_schema, current_schema = pair
        return [
            cls(schema_name=schema_name, property_path=property_path, property_name=name)
            for name in _values_difference(base_schema.required, current_schema.required)
            if name in current_schema.properties
        ]


# ---------------------------------------------------------------------------
# Attributes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DescriptionChangedRule(SchemaRule):
    rule_name = "DescriptionChanged"

    schema_name: str
    property_path: str
    old_description: Optional[str]
    new_description: Optional[str]

    @property
    def description(self) -> str:
        return (
            f"Description changed from '{self.old_description or '(none)'}' "
            f"to '{self.new_description or '(none)'}'"
        )

    @property
    def change_level(self) -> ChangeLevel:
        return ChangeLevel.CHANGE

    @property
    def anchor(self) -> ChangeAnchor:
        return _attribute_anchor(AnchorKind.DESCRIPTION, self.property_path)

    @classmethod
    def detect(cls, schema_name, property_path, base, current):
        pair = _both(base, current)
        if pair is None or pair[0].description == pair[1].description:
            return []
        return [
            cls(
                schema_name=schema_name,
                property_path=property_path,
                old_description=pair[0].description,
                new_description=pair[1].description,
            )
        ]


@dataclass(frozen=True)
class EnumValuesAddedRule(SchemaRule):
    rule_name = "EnumValuesAdded"

    schema_name: str
    property_path: str
    values: Tuple[Any, ...]

    @property
    def description(self) -> str:
        return f"Enum values added: [{_format_values(list(self.values))}]"

    @property
    def change_level(self) -> ChangeLevel:
        return ChangeLevel.CHANGE

    @property
    def anchor(self) -> ChangeAnchor:
        return _attribute_anchor(AnchorKind.ENUM_VALUES, self.property_path)

    @classmethod
    def detect(cls, schema_name, property_path, base, current):
        pair = _both(base, current)
        if pair is None:
            return []
        added = _values_difference(pair[1].enum_values, pair[0].enum_values)
        if not added:
            return []
        return [cls(schema_name=schema_name, property_path=property_path, values=tuple(added))]


@dataclass(frozen=True)
class EnumValuesRemovedRule(SchemaRule):
    rule_name = "EnumValuesRemoved"

    schema_name: str
    property_path: str
    values: Tuple[Any, ...]

    @property
    def description(self) -> str:
        return f"Enum values removed: [{_format_values(list(self.values))}]"

    @property
    def change_level(self) -> ChangeLevel:
        return ChangeLevel.BREAKING

    @property
    def anchor(self) -> ChangeAnchor:
        return _attribute_anchor(AnchorKind.ENUM_VALUES, self.property_path)

    @classmethod
    def detect(cls, schema_name, property_path, base, current):
        pair = _both(base, current)
        if pair is None:
            return []
        removed = _values_difference(pair[0].enum_values, pair[1].enum_values)
        if not removed:
            return []
        return [cls(schema_name=schema_name, property_path=property_path, values=tuple(removed))]


@dataclass(frozen=True)
class FormatChangedRule(SchemaRule):
    rule_name = "FormatChanged"

    schema_name: str
    property_path: str
    old_format: Optional[str]
    new_format: Optional[str]

    @property
    def description(self) -> str:
        return (
            f"Format changed from '{self.old_format or '(none)'}' "
            f"to '{self.new_format or '(none)'}'"
        )

    @property
    def change_level(self) -> ChangeLevel:
        return ChangeLevel.WARNING

    @property
    def anchor(self) -> ChangeAnchor:
        return _attribute_anchor(AnchorKind.FORMAT, self.property_path)

    @classmethod
    def detect(cls, schema_name, property_path, base, current):
        pair = _both(base, current)
        if pair is None or pair[0].format == pair[1].format:
            return []
        return [
            cls(
                schema_name=schema_name,
                property_path=property_path,
                old_format=pair[0].format,
                new_format=pair[1].format,
            )
        ]


@dataclass(frozen=True)
class NullableChangedRule(SchemaRule):
    rule_name = "NullableChanged"

    schema_name: str
    property_path: str
    old_nullable: bool
    new_nullable: bool

    @property
    def description(self) -> str:
        return f"Nullable changed from {str(self.old_nullable).lower()} to {str(self.new_nullable).lower()}"

    @property
    def change_level(self) -> ChangeLevel:
        if self.old_nullable and not self.new_nullable:
            return ChangeLevel.BREAKING
        if not self.old_nullable and self.new_nullable:
            return ChangeLevel.WARNING
        return ChangeLevel.CHANGE

    @property
    def anchor(self) -> ChangeAnchor:
        return _attribute_anchor(AnchorKind.NULLABLE, self.property_path)

    @classmethod
    def detect(cls, schema_name, property_path, base, current):
        pair = _both(base, current)
        if pair is None or pair[0].nullable == pair[1].nullable:
            return []
        return [
            cls(
                schema_name=schema_name,
                property_path=property_path,
                old_nullable=pair[0].nullable,
                new_nullable=pair[1].nullable,
            )
        ]


# Registered rule lists, run in this order by SchemaMatcher.
SCHEMA_PRESENCE_RULES = (
    SchemaAddedRule,
    SchemaRemovedRule,
)

SCHEMA_STRUCTURE_RULES = (
    TypeChangedRule,
    RequiredPropertyAddedRule,
    PropertyAddedRule,
    PropertyRemovedRule,
    RequiredPropertyRemovedRule,
)

SCHEMA_ATTRIBUTE_RULES = (
    DescriptionChangedRule,
    EnumValuesAddedRule,
    EnumValuesRemovedRule,
    FormatChangedRule,
    NullableChangedRule,
)
