"""
Shared pytest fixtures for all tests.

This module provides common fixtures including:
- Sample property coordinate
- Deterministic clock
- Upstream error instance
- FastAPI test client
"""
from datetime import date

import pytest
from fastapi.testclient import TestClient

from due_diligence.main import app
from due_diligence.domain.models import Coordinate
from due_diligence.infrastructure.external_api_client import ExternalAPIError
from due_diligence.middleware.rate_limit import limiter

from helpers import ALBUQUERQUE


# ============================================================
# Sample Data Fixtures
# ============================================================

@pytest.fixture
def point() -> Coordinate:
    """Property location used across tests."""
    return ALBUQUERQUE


@pytest.fixture
def fixed_today():
    """Deterministic clock for assessments."""
    return lambda: date(2025, 1, 15)


@pytest.fixture
def upstream_error() -> ExternalAPIError:
    """Error raised by a failing ArcGIS layer."""
    return ExternalAPIError("API request failed: 500 - Internal Server Error", status_code=500)


# ============================================================
# FastAPI Test Client Fixtures
# ============================================================

@pytest.fixture
def test_client() -> TestClient:
    """Create a synchronous test client for FastAPI."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def clear_dependency_overrides():
    """Make sure no test leaks dependency overrides into the next."""
    yield
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    """Start every test with an empty rate-limit window."""
    limiter.reset()
    yield
