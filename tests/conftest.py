"""Shared pytest fixtures for Coloring Page Creator tests."""

import shutil
import tempfile
from io import BytesIO
from pathlib import Path
from typing import Callable, Generator
from unittest.mock import MagicMock

import pytest
from google.genai import types
from PIL import Image

from coloringpage.core.client import ImageTransformClient
from coloringpage.core.config import ColoringPageConfig
from coloringpage.core.session_store import SessionStore
from coloringpage.ui.models import UIState


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config(temp_dir: Path) -> ColoringPageConfig:
    """Create a test configuration with temporary directories.

    Args:
        temp_dir: Temporary directory from fixture

    Returns:
        ColoringPageConfig instance for testing
    """
    return ColoringPageConfig(
        api_key="test-key",
        model_id="test-image-model",
        data_dir=temp_dir / "data",
        outputs_dir=temp_dir / "outputs",
        max_upload_bytes=1024 * 1024,
        _env_file=None,
    )


@pytest.fixture
def sample_png_bytes() -> bytes:
    """A small valid PNG image.

    Returns:
        PNG-encoded bytes of a 16x16 white image
    """
    buffer = BytesIO()
    Image.new("RGB", (16, 16), "white").save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def sample_jpeg_path(temp_dir: Path) -> Path:
    """A small JPEG file on disk, as the upload component would provide.

    Returns:
        Path to the JPEG file
    """
    path = temp_dir / "photo.jpg"
    Image.new("RGB", (32, 24), "blue").save(path, format="JPEG")
    return path


@pytest.fixture
def make_response() -> Callable[..., types.GenerateContentResponse]:
    """Build simulated ``generate_content`` responses.

    Returns:
        Function taking ``parts`` (list of ``types.Part``), ``finish_reason``
        and ``block_reason`` and returning a ``GenerateContentResponse``
    """

    def _make(parts=None, finish_reason=types.FinishReason.STOP, block_reason=None):
        prompt_feedback = None
        if block_reason is not None:
            prompt_feedback = types.GenerateContentResponsePromptFeedback(
                block_reason=block_reason
            )
        candidates = None
        if parts is not None or finish_reason is not None:
            candidates = [
                types.Candidate(
                    content=types.Content(role="model", parts=parts or []),
                    finish_reason=finish_reason,
                )
            ]
        return types.GenerateContentResponse(
            candidates=candidates,
            prompt_feedback=prompt_feedback,
        )

    return _make


@pytest.fixture
def mock_genai_client() -> MagicMock:
    """A mocked ``genai.Client``; set ``models.generate_content`` per test.

    Returns:
        MagicMock standing in for the SDK client
    """
    return MagicMock()


@pytest.fixture
def transform_client(test_config, mock_genai_client) -> ImageTransformClient:
    """ImageTransformClient wired to the mocked SDK client."""
    return ImageTransformClient(test_config, client=mock_genai_client)


@pytest.fixture
def session_store(test_config) -> SessionStore:
    """SessionStore writing to the test data directory."""
    return SessionStore(test_config.session_file)


@pytest.fixture
def ui_state(transform_client, session_store) -> UIState:
    """Initialized UI state using the mocked client.

    Returns:
        UIState instance
    """
    return UIState(client=transform_client, session_store=session_store)


@pytest.fixture
def test_client(monkeypatch, test_config, transform_client, session_store):
    """FastAPI TestClient with the mocked generation client.

    The lifespan handler runs on entering the client; its components are
    then replaced with the test ones.

    Yields:
        ``fastapi.testclient.TestClient``
    """
    from fastapi.testclient import TestClient

    import coloringpage.api.main as api_main

    monkeypatch.setattr(api_main, "config", test_config)

    with TestClient(api_main.app) as client:
        api_main.app.state.client = transform_client
        api_main.app.state.session_store = session_store
        yield client
