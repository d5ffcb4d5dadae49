# src/apidrift/config.py

"""
Runtime settings, read from the environment (and a local .env file).

    LOG_LEVEL               logging level, default INFO
    APIDRIFT_SERVICE_NAME   OpenTelemetry service.name, default "apidrift"
    APIDRIFT_TRACING        "false" disables the console span exporter
    APIDRIFT_HOST           bind host for the HTTP server, default 127.0.0.1
    APIDRIFT_PORT           bind port, default 8000
    APIDRIFT_RELOAD         "true" enables uvicorn auto-reload
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    log_level: str = "INFO"
    service_name: str = "apidrift"
    tracing_enabled: bool = True
    host: str = "127.0.0.1"
    port: int = 8000
    reload: bool = False


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in _TRUE_VALUES


def get_settings() -> Settings:
    load_dotenv()
    return Settings(
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        service_name=os.getenv("APIDRIFT_SERVICE_NAME", "apidrift"),
        tracing_enabled=_flag("APIDRIFT_TRACING", "true"),
        host=os.getenv("APIDRIFT_HOST", "127.0.0.1"),
        port=int(os.getenv("APIDRIFT_PORT", "8000")),
        reload=_flag("APIDRIFT_RELOAD", "false"),
    )
