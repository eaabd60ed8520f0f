"""
Shared pytest fixtures for all test modules.

The classifier handle is built in the app lifespan via `build_classifier`;
fixtures patch it so no Hugging Face client is ever created and no request
leaves the process.
"""

import base64
import io
import os

# A non-empty stub so a stray real build_classifier() call would not 503.
# Real API calls never happen in tests — the classifier is always mocked.
os.environ.setdefault("HUGGING_FACE_API_KEY", "stub-key-for-tests")

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from app.integrations.huggingface import ImageClassifier
from app.main import app  # noqa: E402
from app.schemas.detection import ClassificationItem


# ---------------------------------------------------------------------------
# Core infrastructure fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_classifier():
    """ImageClassifier stand-in whose classify() returns MOCK_CLASSIFICATIONS."""
    classifier = MagicMock(spec=ImageClassifier)
    classifier.classify = AsyncMock(return_value=list(MOCK_CLASSIFICATIONS))
    classifier.close = AsyncMock()
    return classifier


@pytest.fixture
def client(fake_classifier):
    """FastAPI TestClient whose lifespan installs `fake_classifier`."""
    with patch("app.main.build_classifier", return_value=fake_classifier):
        with TestClient(app, raise_server_exceptions=False) as c:
            yield c


@pytest.fixture
def unconfigured_client():
    """TestClient simulating a process started without HUGGING_FACE_API_KEY."""
    with patch("app.main.build_classifier", return_value=None):
        with TestClient(app, raise_server_exceptions=False) as c:
            yield c


# ---------------------------------------------------------------------------
# Shared test-data helpers
# ---------------------------------------------------------------------------


def make_tiny_png() -> bytes:
    """Create a minimal 4×4 PNG in memory — fast and valid."""
    buf = io.BytesIO()
    Image.new("RGB", (4, 4), color=(128, 128, 128)).save(buf, format="PNG")
    return buf.getvalue()


def make_png_data_url(content: bytes = None) -> str:
    if content is None:
        content = make_tiny_png()
    return f"data:image/png;base64,{base64.b64encode(content).decode()}"


def make_mock_session(status=200, content=b"image_bytes", content_type="image/jpeg", reason="OK"):
    """Build a mock aiohttp session whose .get() returns a context-manager response."""
    mock_resp = MagicMock()
    mock_resp.__aenter__ = AsyncMock(return_value=mock_resp)
    mock_resp.__aexit__ = AsyncMock(return_value=None)
    mock_resp.status = status
    mock_resp.reason = reason
    mock_resp.read = AsyncMock(return_value=content)
    mock_resp.headers = {"Content-Type": content_type} if content_type else {}

    mock_session = MagicMock()
    mock_session.get = MagicMock(return_value=mock_resp)
    return mock_session


def patch_session(mock_session):
    """
    Patch http_client.request_session to yield mock_session directly,
    bypassing aiohttp.ClientSession construction entirely.
    """
    @asynccontextmanager
    async def _fake_request_session():
        yield mock_session

    return patch(
        "app.integrations.http_client.request_session",
        side_effect=_fake_request_session,
    )


MOCK_CLASSIFICATIONS = [
    ClassificationItem(label="synthetic", score=0.9),
    ClassificationItem(label="tabby, tabby cat", score=0.05),
    ClassificationItem(label="Egyptian cat", score=0.03),
    ClassificationItem(label="tiger cat", score=0.02),
]
