# src/apidrift/api/routes/compare.py

from __future__ import annotations

from typing import Any, List
import asyncio
import logging

from fastapi import APIRouter, File, HTTPException, UploadFile, status
from pydantic import BaseModel

from apidrift.services.spec_compare_service import compare_spec_files

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Compare"])


# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------

class AnchorOut(BaseModel):
    kind: str
    value: str | None = None


class ViolationOut(BaseModel):
    rule: str
    description: str
    change_level: str
    anchor: AnchorOut
    category: str


class MatchResultOut(BaseModel):
    name: str  # schema name, or "METHOD path" for routes
    change_level: str
    violations: List[ViolationOut]


class SchemaUsageOut(BaseModel):
    schema_name: str
    content_type: str
    location: str
    status_code: str | None = None


class RouteUsageOut(BaseModel):
    path: str
    method: str
    request_schemas: List[SchemaUsageOut]
    response_schemas: List[SchemaUsageOut]


class ViolationInfoOut(BaseModel):
    rule: str
    description: str
    change_level: str
    anchor: str


class SchemaPropertyOut(BaseModel):
    name: str
    type: str | None = None
    format: str | None = None
    description: str | None = None
    required: bool
    nullable: bool
    enum_values: List[Any]
    violations: List[ViolationInfoOut]


class FullSchemaOut(BaseModel):
    name: str
    description: str | None = None
    change_level: str
    properties: List[SchemaPropertyOut]  # required first, then by name
    schema_level_violations: List[ViolationInfoOut]


class ComparisonStatsOut(BaseModel):
    base_schemas: int
    current_schemas: int
    changed_schemas: int
    total_routes: int
    changed_routes: int


class ComparisonOut(BaseModel):
    change_level: str | None = None  # None when nothing changed
    breaking: bool
    stats: ComparisonStatsOut
    schemas: List[MatchResultOut]
    routes: List[MatchResultOut]
    full_schemas: List[FullSchemaOut]
    route_usage: List[RouteUsageOut]


# ---------------------------------------------------------------------------
# Endpoint
# ---------------------------------------------------------------------------

@router.post("/compare", response_model=ComparisonOut)
async def compare_specs(
    base: UploadFile = File(...),
    current: UploadFile = File(...),
):
    """
    Compares two uploaded API descriptions (JSON/YAML) and returns the
    machine-readable comparison report.
    """
    base_raw = await base.read()
    current_raw = await current.read()

    if not base_raw:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Empty base file uploaded")
    if not current_raw:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Empty current file uploaded")

    logger.info("Comparing specs: base=%s current=%s", base.filename, current.filename)

    # Matching is CPU bound; keep it off the event loop
    try:
        report = await asyncio.to_thread(
            compare_spec_files,
            base.filename or "",
            base_raw,
            current.filename or "",
            current_raw,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return report.to_dict()
