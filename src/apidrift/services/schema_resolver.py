# src/apidrift/services/schema_resolver.py

from __future__ import annotations
from typing import Optional
import logging

from apidrift.models.document import Document, SchemaNode, SchemaRef, extract_schema_name

logger = logging.getLogger(__name__)


def resolve_schema_ref(schema_ref: Optional[SchemaRef], document: Document) -> Optional[SchemaNode]:
    """
    Resolve a schema reference against the document it was found in.

    Inline schemas are returned as-is. A pointer is looked up once in
    `document.schemas`; if that entry is itself a pointer the result is None
    (aliases of aliases are not followed). Unknown names and foreign pointers
    also resolve to None and callers skip the comparison.
    """
    if schema_ref is None:
        return None

    if isinstance(schema_ref, SchemaNode):
        return schema_ref

    schema_name = extract_schema_name(schema_ref)
    if schema_name is None:
        logger.debug("Unsupported schema reference: %s", schema_ref.ref_path)
        return None

    target = document.schemas.get(schema_name)
    if isinstance(target, SchemaNode):
        return target

    if target is None:
        logger.debug("Schema reference not found: %s", schema_ref.ref_path)
    else:
        logger.debug("Nested schema reference not followed: %s -> %s", schema_ref.ref_path, target.ref_path)
    return None
