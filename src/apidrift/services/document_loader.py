# src/apidrift/services/document_loader.py

"""
Document Loader

Turns a parsed OpenAPI 3.x mapping (typically from parse_api_spec) into the
immutable Document model consumed by the matchers.

Only the parts the comparison reads are kept: component schemas and, per
path, the seven standard method operations with their parameters, request
body and responses. Servers, security, examples and extensions are dropped.

Structural problems that make the document unusable (a non-mapping root,
`paths` or `components.schemas`) raise InvalidDocumentError. Anything else
that looks odd is skipped with a warning so one malformed entry does not
abort the whole comparison.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Union
import datetime
import logging
from opentelemetry import trace

from apidrift.models.document import (
    HTTP_METHODS,
    Document,
    MediaType,
    Operation,
    Parameter,
    PathItem,
    Reference,
    RequestBody,
    Response,
    SchemaNode,
    SchemaRef,
)

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class InvalidDocumentError(ValueError):
    """Raised when a parsed spec lacks the structure of an API description."""


def load_document(raw_spec: Any) -> Document:
    """
    Build a Document from a parsed spec mapping.

    Example input:
        {
            "openapi": "3.0.0",
            "components": {"schemas": {"User": {"type": "object"}}},
            "paths": {"/users": {"get": {"responses": {"200": {...}}}}}
        }
    """
    with tracer.start_as_current_span("service.load_document") as span:
        if not isinstance(raw_spec, dict):
            raise InvalidDocumentError(f"Spec root must be a mapping, got {type(raw_spec).__name__}")

        components = raw_spec.get("components") or {}
        if not isinstance(components, dict):
            raise InvalidDocumentError("'components' must be a mapping")

        raw_schemas = components.get("schemas") or {}
        if not isinstance(raw_schemas, dict):
            raise InvalidDocumentError("'components.schemas' must be a mapping")

        raw_paths = raw_spec.get("paths") or {}
        if not isinstance(raw_paths, dict):
            raise InvalidDocumentError("'paths' must be a mapping")

        schemas: Dict[str, SchemaRef] = {}
        for name, raw_schema in raw_schemas.items():
            schema = _load_schema_ref(raw_schema)
            if schema is None:
                logger.warning("Schema '%s' is not a mapping, skipping", name)
                continue
            schemas[str(name)] = schema

        paths: Dict[str, PathItem] = {}
        for path, raw_item in raw_paths.items():
            if not isinstance(raw_item, dict):
                logger.warning("Path '%s' is not a mapping, skipping", path)
                continue
            paths[str(path)] = _load_path_item(str(path), raw_item)

        info = raw_spec.get("info") if isinstance(raw_spec.get("info"), dict) else {}

        span.set_attribute("schemas.count", len(schemas))
        span.set_attribute("paths.count", len(paths))
        logger.info("Loaded document: %d schemas, %d paths", len(schemas), len(paths))

        return Document(
            schemas=schemas,
            paths=paths,
            openapi=_optional_str(raw_spec.get("openapi")),
            title=_optional_str(info.get("title")),
            version=_optional_str(info.get("version")),
        )


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _json_value(value: Any) -> Any:
    """YAML timestamps (unquoted 2024-01-01) become ISO strings, as in JSON."""
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    if isinstance(value, list):
        return [_json_value(v) for v in value]
    if isinstance(value, dict):
        return {str(k): _json_value(v) for k, v in value.items()}
    return value


def _load_schema_ref(raw: Any) -> Optional[SchemaRef]:
    if not isinstance(raw, dict):
        return None
    if "$ref" in raw:
        return Reference(str(raw["$ref"]))
    return _load_schema(raw)


def _load_schema(raw: Dict[str, Any]) -> SchemaNode:
    raw_type = raw.get("type")
    if isinstance(raw_type, list):
        schema_type: Union[None, str, tuple] = tuple(str(t) for t in raw_type)
    elif raw_type is None:
        schema_type = None
    else:
        schema_type = str(raw_type)

    nullable = raw.get("nullable") is True
    if isinstance(schema_type, tuple) and "null" in schema_type:
        nullable = True

    properties: Dict[str, SchemaRef] = {}
    raw_properties = raw.get("properties")
    if isinstance(raw_properties, dict):
        for prop_name, raw_prop in raw_properties.items():
            prop = _load_schema_ref(raw_prop)
            if prop is not None:
                properties[str(prop_name)] = prop

    required = raw.get("required")
    enum_values = raw.get("enum")
    fmt = raw.get("format")

    return SchemaNode(
        schema_type=schema_type,
        properties=properties,
        required=[str(r) for r in required] if isinstance(required, list) else [],
        description=_optional_str(raw.get("description")),
        enum_values=[_json_value(v) for v in enum_values] if isinstance(enum_values, list) else [],
        format=_optional_str(fmt),
        nullable=nullable,
        items=_load_schema_ref(raw.get("items")),
    )


def _load_path_item(path: str, raw_item: Dict[str, Any]) -> PathItem:
    operations: Dict[str, Operation] = {}
    for key, raw_op in raw_item.items():
        method = str(key).lower()
        if method not in HTTP_METHODS:
            continue
        if not isinstance(raw_op, dict):
            logger.warning("Method '%s' on path '%s' is not a mapping, skipping", key, path)
            continue
        operations[method] = _load_operation(raw_op)
    return PathItem(**operations)


def _load_operation(raw: Dict[str, Any]) -> Operation:
    parameters: List[Union[Parameter, Reference]] = []
    for raw_param in raw.get("parameters") or []:
        param = _load_parameter(raw_param)
        if param is not None:
            parameters.append(param)

    responses: Optional[Dict[str, Union[Response, Reference]]] = None
    raw_responses = raw.get("responses")
    if isinstance(raw_responses, dict):
        responses = {}
        for status_code, raw_response in raw_responses.items():
            if not isinstance(raw_response, dict):
                continue
            # YAML parsers turn 200 into an int
            code = str(status_code)
            if "$ref" in raw_response:
                responses[code] = Reference(str(raw_response["$ref"]))
            else:
                responses[code] = Response(
                    description=_optional_str(raw_response.get("description")),
                    content=_load_content(raw_response.get("content")),
                )

    return Operation(
        summary=_optional_str(raw.get("summary")),
        description=_optional_str(raw.get("description")),
        operation_id=_optional_str(raw.get("operationId")),
        parameters=parameters,
        request_body=_load_request_body(raw.get("requestBody")),
        responses=responses,
    )


def _load_parameter(raw: Any) -> Optional[Union[Parameter, Reference]]:
    if not isinstance(raw, dict):
        return None
    if "$ref" in raw:
        return Reference(str(raw["$ref"]))
    if "name" not in raw or "in" not in raw:
        logger.warning("Parameter without name/in, skipping: %s", raw)
        return None
    return Parameter(
        name=str(raw["name"]),
        location=str(raw["in"]),
        required=raw.get("required") is True,
        schema=_load_schema_ref(raw.get("schema")),
        description=_optional_str(raw.get("description")),
    )


def _load_request_body(raw: Any) -> Optional[Union[RequestBody, Reference]]:
    if not isinstance(raw, dict):
        return None
    if "$ref" in raw:
        return Reference(str(raw["$ref"]))
    return RequestBody(
        description=_optional_str(raw.get("description")),
        content=_load_content(raw.get("content")),
        required=raw.get("required") is True,
    )


def _load_content(raw: Any) -> Dict[str, MediaType]:
    content: Dict[str, MediaType] = {}
    if not isinstance(raw, dict):
        return content
    for content_type, raw_media in raw.items():
        if not isinstance(raw_media, dict):
            continue
        content[str(content_type)] = MediaType(schema=_load_schema_ref(raw_media.get("schema")))
    return content
