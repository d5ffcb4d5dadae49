# src/apidrift/models/document.py

"""
In-memory OpenAPI document model.

These are the read-only inputs of a comparison run. They are produced by
`apidrift.services.document_loader.load_document` from a parsed spec and are
never mutated afterwards.

Every type is a frozen dataclass so equality is structural: two operations
that compare equal are treated as unchanged by the route matcher.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

SCHEMA_REF_PREFIX = "#/components/schemas/"

HTTP_METHODS = ("get", "post", "put", "delete", "patch", "head", "options")


@dataclass(frozen=True)
class Reference:
    """A `$ref` pointer, e.g. "#/components/schemas/User"."""
    ref_path: str


@dataclass(frozen=True)
class SchemaNode:
    schema_type: Union[None, str, Tuple[str, ...]] = None
    properties: Dict[str, "SchemaRef"] = field(default_factory=dict)
    required: List[str] = field(default_factory=list)
    description: Optional[str] = None
    enum_values: List[Any] = field(default_factory=list)
    format: Optional[str] = None
    nullable: bool = False
    items: Optional["SchemaRef"] = None


SchemaRef = Union[SchemaNode, Reference]


@dataclass(frozen=True)
class Parameter:
    name: str
    location: str
    required: bool = False
    schema: Optional[SchemaRef] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class MediaType:
    schema: Optional[SchemaRef] = None


@dataclass(frozen=True)
class RequestBody:
    description: Optional[str] = None
    content: Dict[str, MediaType] = field(default_factory=dict)
    required: bool = False


@dataclass(frozen=True)
class Response:
    description: Optional[str] = None
    content: Dict[str, MediaType] = field(default_factory=dict)


@dataclass(frozen=True)
class Operation:
    summary: Optional[str] = None
    description: Optional[str] = None
    operation_id: Optional[str] = None
    parameters: List[Union[Parameter, Reference]] = field(default_factory=list)
    request_body: Optional[Union[RequestBody, Reference]] = None
    # None means the operation declares no responses mapping at all
    responses: Optional[Dict[str, Union[Response, Reference]]] = None


@dataclass(frozen=True)
class PathItem:
    get: Optional[Operation] = None
    post: Optional[Operation] = None
    put: Optional[Operation] = None
    delete: Optional[Operation] = None
    patch: Optional[Operation] = None
    head: Optional[Operation] = None
    options: Optional[Operation] = None

    def operation(self, method: str) -> Optional[Operation]:
        if method not in HTTP_METHODS:
            return None
        return getattr(self, method)


@dataclass(frozen=True)
class Document:
    """
    A parsed API description: named component schemas plus path items.

    openapi / title / version are informational only; the comparison engine
    reads `schemas` and `paths`.
    """
    schemas: Dict[str, SchemaRef] = field(default_factory=dict)
    paths: Dict[str, PathItem] = field(default_factory=dict)
    openapi: Optional[str] = None
    title: Optional[str] = None
    version: Optional[str] = None


def extract_schema_name(schema_ref: Optional[SchemaRef]) -> Optional[str]:
    """
    Return the component name a reference points at, or None for inline
    schemas and pointers outside "#/components/schemas/".
    """
    if isinstance(schema_ref, Reference) and schema_ref.ref_path.startswith(SCHEMA_REF_PREFIX):
        return schema_ref.ref_path[len(SCHEMA_REF_PREFIX):]
    return None
