# tests/conftest.py
import pytest

from fastapi.testclient import TestClient

from apidrift.services.document_loader import load_document


def _openapi(schemas=None, paths=None):
    return {
        "openapi": "3.0.0",
        "info": {"title": "Test API", "version": "1.0.0"},
        "components": {"schemas": schemas or {}},
        "paths": paths or {},
    }


@pytest.fixture
def raw_spec():
    """Return a builder for a minimal OpenAPI mapping."""
    return _openapi


@pytest.fixture
def make_doc():
    """Return a builder that loads schemas/paths mappings into a Document."""

    def _make(schemas=None, paths=None):
        return load_document(_openapi(schemas, paths))

    return _make


@pytest.fixture
def client():
    # import inside fixture so observability setup only runs for API tests
    from apidrift.main import app

    return TestClient(app)
