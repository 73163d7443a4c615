"""Coloring Page Creator: FastAPI Application.

This module defines the FastAPI ``app`` instance, the REST API routes, and
the ``main()`` CLI function that launches the uvicorn server.

Architecture
------------
- **Generation** is performed by
  :class:`~coloringpage.core.client.ImageTransformClient`, created once in
  the lifespan handler and kept on ``app.state``.
- **Session persistence** uses a single ``last_session.json`` file managed
  by :class:`~coloringpage.core.session_store.SessionStore`.
- **Upload validation** reuses the UI's validation helpers, so both front
  ends report the same messages.

Endpoints
---------
========  ============================  ====================================
Method    Path                          Purpose
========  ============================  ====================================
GET       ``/api/config``               Version, model, style options
POST      ``/api/prompt/compile``       Preview the generation instruction
POST      ``/api/generate``             Turn a photo into a coloring page
GET       ``/api/session``              Cached last upload and result
DELETE    ``/api/session``              Forget the cached session
GET       ``/api/session/download``     Last result as a PNG attachment
========  ============================  ====================================

Error responses carry ``detail={"kind": ..., "message": ...}`` where ``kind``
is ``validation_error`` or a :class:`~coloringpage.core.models.FailureKind`
value.

Usage
-----
CLI (installed entry point)::

    coloringpage-api

Direct invocation::

    python -m coloringpage.api.main
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from coloringpage import __version__
from coloringpage.api.models import GenerateRequest, PromptCompileRequest
from coloringpage.core.client import ImageTransformClient
from coloringpage.core.config import config
from coloringpage.core.models import (
    DetailLevel,
    FailureKind,
    LineThickness,
    StyleOptions,
)
from coloringpage.core.prompt_builder import (
    DETAIL_PHRASES,
    THICKNESS_PHRASES,
    build_instruction,
)
from coloringpage.core.session_store import SessionStore, encode_png
from coloringpage.ui.validation import ValidationError, validate_image_payload

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# HTTP status for each failure kind.
# ---------------------------------------------------------------------------
FAILURE_STATUS_CODES: dict[FailureKind, int] = {
    FailureKind.SAFETY_BLOCKED: 422,
    FailureKind.TEXT_ONLY_RESPONSE: 502,
    FailureKind.NO_IMAGE_RETURNED: 502,
    FailureKind.API_ERROR: 502,
    FailureKind.UNKNOWN_ERROR: 500,
}

RESULT_MIME_TYPE = "image/png"
DOWNLOAD_FILENAME = "coloring-page.png"


# ---------------------------------------------------------------------------
# Application lifecycle.
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the generation client and session store on startup.

    No network call is made here; the SDK client is created on the first
    ``POST /api/generate``.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control back to the application for the duration of its lifetime.
    """
    app.state.client = ImageTransformClient(config)
    app.state.session_store = SessionStore(config.session_file)
    logger.info(f"ImageTransformClient initialised for model {config.model_id}.")

    if not config.api_key:
        logger.warning("No API key configured; generation requests will fail.")

    yield


# ---------------------------------------------------------------------------
# FastAPI application instance.
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Coloring Page Creator",
    description="Turn photos into printable coloring pages with Gemini.",
    version=__version__,
    lifespan=lifespan,
)

# Allow cross-origin requests so a frontend can be served from a different
# port during development.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Helpers.
# ---------------------------------------------------------------------------


def _error(status_code: int, kind: str, message: str) -> HTTPException:
    return HTTPException(status_code=status_code, detail={"kind": kind, "message": message})


def _image_payload(b64: str, mime_type: str) -> dict:
    return {
        "image_b64": b64,
        "mime_type": mime_type,
        "data_url": f"data:{mime_type};base64,{b64}",
    }


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


@app.get("/api/config")
async def get_config() -> dict:
    """Return the configuration the frontend needs to render its controls.

    Returns:
        Dictionary with keys ``version``, ``model_id``, ``line_thickness``
        and ``detail_level`` (lists of ``{value, label, phrase}``),
        ``defaults`` and ``max_upload_bytes``.
    """
    defaults = StyleOptions()
    return {
        "version": __version__,
        "model_id": config.model_id,
        "line_thickness": [
            {"value": option.value, "label": option.label, "phrase": THICKNESS_PHRASES[option]}
            for option in LineThickness
        ],
        "detail_level": [
            {"value": option.value, "label": option.label, "phrase": DETAIL_PHRASES[option]}
            for option in DetailLevel
        ],
        "defaults": {
            "line_thickness": defaults.line_thickness.value,
            "detail_level": defaults.detail_level.value,
        },
        "max_upload_bytes": config.max_upload_bytes,
    }


@app.post("/api/prompt/compile")
async def compile_prompt(req: PromptCompileRequest) -> dict:
    """Preview the instruction sent to the model for the given options.

    Args:
        req: Validated :class:`PromptCompileRequest` payload.

    Returns:
        Dictionary with a single ``compiled_prompt`` key.
    """
    return {"compiled_prompt": build_instruction(req.to_options())}


@app.post("/api/generate")
def generate_coloring_page(req: GenerateRequest) -> dict:
    """Generate a coloring page from an uploaded photo.

    This endpoint:

    1. Validates the media type, base64 payload and size.
    2. Stores the upload as the current session (dropping any old result).
    3. Calls the generation service once.
    4. Stores the result on success.

    Declared without ``async`` so the blocking SDK call runs in the
    threadpool.

    Args:
        req: Validated :class:`GenerateRequest` payload.

    Returns:
        Dictionary with keys ``success``, ``image_b64``, ``mime_type`` and
        ``data_url``.

    Raises:
        HTTPException: 400 for an invalid upload; 422, 502 or 500 for a
            generation failure (see :data:`FAILURE_STATUS_CODES`).
    """
    try:
        image = validate_image_payload(req.image_b64, req.mime_type, config.max_upload_bytes)
    except ValidationError as e:
        logger.warning(f"Rejected upload: {e}")
        raise _error(400, "validation_error", str(e)) from e

    store: SessionStore = app.state.session_store
    store.save_upload(image)

    client: ImageTransformClient = app.state.client
    result = client.generate(image, req.to_options())

    if not result.ok:
        raise _error(FAILURE_STATUS_CODES[result.kind], result.kind.value, result.message)

    store.save_result(result.b64)

    return {"success": True, **_image_payload(result.b64, result.mime_type)}


@app.get("/api/session")
async def get_session() -> dict:
    """Return the cached upload and result.

    Returns:
        Dictionary with keys ``upload`` and ``result``, each either ``None``
        or ``{image_b64, mime_type, data_url}``.
    """
    snapshot = app.state.session_store.load()

    upload = None
    if snapshot.upload is not None:
        upload = _image_payload(snapshot.upload.b64, snapshot.upload.mime_type)

    result = None
    if snapshot.result is not None:
        result = _image_payload(snapshot.result, RESULT_MIME_TYPE)

    return {"upload": upload, "result": result}


@app.delete("/api/session")
async def clear_session() -> dict:
    """Forget the cached upload and result ("Choose Another").

    Returns:
        Dictionary with ``success: True``.
    """
    app.state.session_store.clear()
    logger.info("Cleared cached session.")
    return {"success": True}


@app.get("/api/session/download")
async def download_result() -> Response:
    """Return the last coloring page as a PNG attachment.

    The stored bytes are re-encoded as PNG, as the UI export does.

    Raises:
        HTTPException: 404 if no coloring page is cached.
    """
    snapshot = app.state.session_store.load()
    if snapshot.result is None:
        raise HTTPException(status_code=404, detail="No coloring page to download")

    return Response(
        content=encode_png(snapshot.result_bytes),
        media_type=RESULT_MIME_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{DOWNLOAD_FILENAME}"'},
    )


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host and port from :data:`~coloringpage.core.config.config`
    (``COLORINGPAGE_SERVER_HOST`` / ``COLORINGPAGE_SERVER_PORT``).  Defaults
    to ``0.0.0.0:8000``.
    """
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    uvicorn.run(
        "coloringpage.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
