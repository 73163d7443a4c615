"""Cached last-session storage for the Coloring Page Creator.

The application remembers exactly one thing between page loads: the most
recent upload and, if one was generated, the coloring page made from it.
Both live in a single JSON file::

    {
      "upload": {"base64": "...", "mime_type": "image/jpeg"},
      "result": "<base64 png>"
    }

Either key may be ``null``.  The store is forgiving on read:

- a missing file means an empty session
- a file that cannot be parsed, has the wrong shape, or holds an upload that
  no longer validates is treated as corrupted, logged, and deleted

Writes are best-effort.  A failure to persist is logged and otherwise
ignored so the UI keeps working with in-memory state.

This module also writes coloring pages to the outputs directory as PNG files
for download (:func:`export_png`).
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
import os
from dataclasses import dataclass
from datetime import datetime
from io import BytesIO
from pathlib import Path

from PIL import Image

from coloringpage.core.models import InputImage, StyleOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionSnapshot:
    """The cached upload and result, either of which may be missing."""

    upload: InputImage | None = None
    result: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.upload is None and self.result is None

    @property
    def result_bytes(self) -> bytes | None:
        if self.result is None:
            return None
        return base64.b64decode(self.result)


class SessionStore:
    """JSON-file store for the last upload and generated coloring page."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> SessionSnapshot:
        """Read the cached session, clearing the file if it is corrupted.

        Returns:
            The stored snapshot, or an empty one if nothing usable is stored.
        """
        if not self.path.exists():
            return SessionSnapshot()

        try:
            with open(self.path, encoding="utf-8") as handle:
                raw = json.load(handle)

            if not isinstance(raw, dict):
                raise ValueError("session file must contain a JSON object")

            upload = None
            stored_upload = raw.get("upload")
            if stored_upload is not None:
                if not isinstance(stored_upload, dict):
                    raise ValueError("upload entry must be an object")
                if stored_upload.get("base64") and stored_upload.get("mime_type"):
                    if not isinstance(stored_upload["base64"], str) or not isinstance(
                        stored_upload["mime_type"], str
                    ):
                        raise ValueError("upload entry fields must be strings")
                    upload = InputImage.from_base64(
                        stored_upload["base64"], stored_upload["mime_type"]
                    )

            result = raw.get("result")
            if result is not None:
                if not isinstance(result, str):
                    raise ValueError("result entry must be a base64 string")
                base64.b64decode(result, validate=True)

            return SessionSnapshot(upload=upload, result=result or None)

        except (OSError, ValueError, binascii.Error) as e:
            logger.error(f"Failed to load cached session from {self.path}: {e}")
            self.clear()
            return SessionSnapshot()

    def save_upload(self, image: InputImage) -> None:
        """Store a new upload.  Any previously stored result is dropped."""
        self._write(
            {
                "upload": {"base64": image.b64, "mime_type": image.mime_type},
                "result": None,
            }
        )

    def save_result(self, result_b64: str) -> None:
        """Store the generated coloring page alongside the current upload."""
        data = self._read_raw()
        data["result"] = result_b64
        data.setdefault("upload", None)
        self._write(data)

    def clear(self) -> None:
        """Forget the cached session."""
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Failed to remove cached session {self.path}: {e}")

    def _read_raw(self) -> dict:
        try:
            with open(self.path, encoding="utf-8") as handle:
                raw = json.load(handle)
            return raw if isinstance(raw, dict) else {}
        except (OSError, ValueError):
            return {}

    def _write(self, data: dict) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(".tmp")
            with open(tmp_path, "w", encoding="utf-8") as handle:
                json.dump(data, handle)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error(f"Failed to save session to {self.path}: {e}")


def encode_png(data: bytes) -> bytes:
    """Re-encode image bytes as PNG.

    Raises:
        OSError: If the bytes cannot be decoded as an image.
    """
    buffer = BytesIO()
    with Image.open(BytesIO(data)) as image:
        if image.mode not in ("1", "L", "LA", "P", "RGB", "RGBA"):
            image = image.convert("RGB")
        image.save(buffer, "PNG")
    return buffer.getvalue()


def export_png(
    data: bytes,
    outputs_dir: Path,
    options: StyleOptions | None = None,
    filename: str | None = None,
) -> Path:
    """Write a coloring page to ``outputs_dir`` as a PNG file.

    The service usually returns PNG already; anything else is re-encoded.

    Args:
        data: Image bytes returned by the service.
        outputs_dir: Destination directory (created if missing).
        options: Style used for the page, added to the filename when given.
        filename: Fixed file name to write (overwritten if present) instead
            of a timestamped one.

    Returns:
        Path of the written file.

    Raises:
        OSError: If the bytes cannot be decoded as an image or the file
            cannot be written.
    """
    if filename is None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        suffix = ""
        if options is not None:
            suffix = f"_{options.line_thickness.value}_{options.detail_level.value}"
        filename = f"coloring_page_{timestamp}{suffix}.png"
    output_path = Path(outputs_dir) / filename
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(encode_png(data))

    logger.info(f"Coloring page saved to {output_path}")
    return output_path
