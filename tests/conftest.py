"""Shared pytest fixtures for Seedream Studio tests."""

from typing import Any
from unittest.mock import MagicMock

import pytest

from seedreamstudio.config import ApiConfig
from seedreamstudio.storage import InMemoryStore


def _make_response(status_code: int = 200, json_data: Any = None, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = json_data
    response.text = text
    return response


@pytest.fixture
def api_config():
    """Config with instant polling and a small attempt ceiling."""
    return ApiConfig(api_key="test-key", poll_interval_seconds=0, max_poll_attempts=5)


@pytest.fixture
def make_response():
    """Factory for mock httpx responses."""
    return _make_response


@pytest.fixture
def wavespeed_envelope():
    """Factory wrapping prediction data in WavespeedAI's response envelope."""

    def _envelope(request_id: str = "r1", status: str = "created", outputs=None, error: str = "") -> dict:
        return {
            "code": 200,
            "message": "success",
            "data": {
                "id": request_id,
                "model": "bytedance/seedream-v4",
                "outputs": outputs or [],
                "urls": {"get": f"https://api.wavespeed.ai/api/v3/predictions/{request_id}/result"},
                "has_nsfw_contents": [],
                "status": status,
                "created_at": "2025-09-10T12:00:00Z",
                "error": error,
                "timings": {"inference": 1800},
            },
        }

    return _envelope


@pytest.fixture
def memory_store():
    return InMemoryStore()
