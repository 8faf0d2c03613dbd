"""
Shared test fixtures — catalog and FastAPI test client.
"""

import pytest
from fastapi.testclient import TestClient

from app.config import settings
from app.core.catalog import build_catalog
from main import app


@pytest.fixture
def catalog():
    return build_catalog()


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def permissive(monkeypatch):
    """关闭范围检查 (旧版前端行为)"""
    monkeypatch.setattr(settings, "ALLOW_OUT_OF_RANGE", True)
