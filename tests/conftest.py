"""Shared pytest fixtures for mcp-server-ga4-admin tests.

Provides mocked Admin API clients so tool functions can be exercised
without credentials or network access.
"""

import json
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from mcp_server_ga4_admin.clients import AdminClients, AdminRestClient

ENV_VARS = (
    "GOOGLE_CLIENT_EMAIL",
    "GOOGLE_PRIVATE_KEY",
    "GA4_ADMIN_API_URL",
    "GA4_REQUEST_TIMEOUT",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Isolate tests from the developer's environment and .env file."""
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("ENV_FILE", str(tmp_path / "missing.env"))


@pytest.fixture
def rest() -> MagicMock:
    """A mock REST client with the AdminRestClient interface."""
    return MagicMock(spec=AdminRestClient)


@pytest.fixture
def admin() -> MagicMock:
    """A mock typed Admin API client."""
    return MagicMock()


@pytest.fixture
def clients(admin: MagicMock, rest: MagicMock) -> AdminClients:
    return AdminClients(admin=admin, rest=rest)


def create_mock_response(
    json_data: Any = None, status_code: int = 200, reason: str = "OK"
) -> MagicMock:
    """Create a mock requests Response object."""
    response = MagicMock()
    response.status_code = status_code
    response.reason = reason
    if json_data is None:
        response.content = b""
        response.text = ""
        response.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        response.content = json.dumps(json_data).encode()
        response.text = json.dumps(json_data)
        response.json.return_value = json_data
    return response


@pytest.fixture
def existing_annotation() -> dict:
    """An annotation with a single date as returned by the Admin API."""
    return {
        "name": "properties/1/reportingDataAnnotations/2",
        "title": "T",
        "description": "Release",
        "color": "BLUE",
        "annotationDate": {"year": 2023, "month": 4, "day": 1},
    }
