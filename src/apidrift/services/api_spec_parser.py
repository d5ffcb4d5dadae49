# src/apidrift/services/api_spec_parser.py

from __future__ import annotations
import json
import yaml
from typing import Any, Dict
import logging
from opentelemetry import trace

from apidrift.utils.file_utils import detect_file_type
from apidrift.metrics import spec_parse_failures_total

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class SpecParseError(ValueError):
    """Raised when a spec file cannot be decoded into a mapping."""


def parse_api_spec(filename: str, raw_bytes: bytes) -> Dict[str, Any]:
    """
    Parse a raw API spec file into a Python dict.
    Supports JSON and YAML.
    """
    ftype = detect_file_type(filename, raw_bytes)

    with tracer.start_as_current_span("service.parse_api_spec") as span:
        span.set_attribute("filename", filename or "")
        span.set_attribute("file.type", ftype)
        try:
            text = raw_bytes.decode("utf-8")

            # --- JSON ---
            if ftype == "json":
                obj = json.loads(text)
                if not isinstance(obj, dict):
                    raise SpecParseError("JSON root must be an object")
                return obj

            # --- YAML ---
            if ftype == "yaml":
                obj = yaml.safe_load(text)
                if not isinstance(obj, dict):
                    raise SpecParseError("YAML root must be a mapping")
                return obj

            raise SpecParseError(f"Unsupported or unknown spec format: {ftype}")

        except SpecParseError:
            spec_parse_failures_total.inc()
            logger.exception("Failed to parse API spec: filename=%s ftype=%s", filename, ftype)
            raise
        except (UnicodeDecodeError, ValueError, yaml.YAMLError) as exc:
            spec_parse_failures_total.inc()
            logger.exception("Failed to parse API spec: filename=%s ftype=%s", filename, ftype)
            raise SpecParseError(f"Invalid {ftype} in '{filename}': {exc}") from exc
