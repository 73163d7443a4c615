"""Data models for coloring page generation.

These are the values that flow between the UI/API layers and
:class:`~coloringpage.core.client.ImageTransformClient`:

- :class:`InputImage`: the uploaded photo (bytes + media type), immutable.
- :class:`StyleOptions`: line thickness and detail level selections.
- :class:`GenerationSuccess` / :class:`GenerationFailure`: the two shapes a
  generation call can return.  ``GenerationResult`` is their union.

Failures are values, not exceptions: the client classifies every problem into
one of the :class:`FailureKind` members and hands it back for the caller to
present.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from enum import Enum


class LineThickness(str, Enum):
    """Outline weight of the coloring page."""

    THIN = "thin"
    MEDIUM = "medium"
    BOLD = "bold"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class DetailLevel(str, Enum):
    """How much detail the coloring page keeps (shown as "Image Quality" in the UI)."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class StyleOptions:
    """User-selected style for a generation call."""

    line_thickness: LineThickness = LineThickness.MEDIUM
    detail_level: DetailLevel = DetailLevel.MEDIUM


@dataclass(frozen=True)
class InputImage:
    """An uploaded image: raw bytes plus the declared media type.

    Raises:
        ValueError: If the payload is empty or the media type is not ``image/*``.
    """

    data: bytes
    mime_type: str

    def __post_init__(self) -> None:
        if not self.data:
            raise ValueError("Image payload is empty")
        if not self.mime_type or not self.mime_type.startswith("image/"):
            raise ValueError(f"Unsupported media type: {self.mime_type!r}")

    @classmethod
    def from_base64(cls, b64: str, mime_type: str) -> InputImage:
        """Build an image from a base64 string as sent by the browser.

        Raises:
            ValueError: If ``b64`` is not valid base64 (or decodes to nothing).
        """
        try:
            data = base64.b64decode(b64, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"Image data is not valid base64: {e}") from e
        return cls(data=data, mime_type=mime_type)

    @classmethod
    def from_data_url(cls, data_url: str) -> InputImage:
        """Build an image from a ``data:<mime>;base64,<payload>`` URL."""
        header, sep, payload = data_url.partition(",")
        if not sep or not header.startswith("data:") or not header.endswith(";base64"):
            raise ValueError("Expected a base64 data URL")
        mime_type = header[len("data:") : -len(";base64")]
        return cls.from_base64(payload, mime_type)

    @property
    def b64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.b64}"


class FailureKind(str, Enum):
    """Closed set of reasons a generation call can fail."""

    SAFETY_BLOCKED = "safety_blocked"
    TEXT_ONLY_RESPONSE = "text_only_response"
    NO_IMAGE_RETURNED = "no_image_returned"
    API_ERROR = "api_error"
    UNKNOWN_ERROR = "unknown_error"


@dataclass(frozen=True)
class GenerationSuccess:
    """The coloring page returned by the service."""

    data: bytes
    mime_type: str = "image/png"

    ok = True

    @property
    def b64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.b64}"


@dataclass(frozen=True)
class GenerationFailure:
    """A classified generation failure.

    Attributes:
        kind: Which failure occurred.
        message: Human-readable message suitable for showing to the user.
        detail: The text the model returned instead of an image
            (``TEXT_ONLY_RESPONSE``) or the underlying exception message
            (``API_ERROR``); ``None`` otherwise.
    """

    kind: FailureKind
    message: str
    detail: str | None = None

    ok = False

    def __str__(self) -> str:
        return self.message


GenerationResult = GenerationSuccess | GenerationFailure
