"""Pydantic request models for the Coloring Page Creator API.

FastAPI uses these for request validation and OpenAPI documentation.  Style
fields are typed with the core enums, so an unknown thickness or detail value
is rejected with a 422 before any handler code runs.

Models
------
PromptCompileRequest
    Payload for ``POST /api/prompt/compile``.
GenerateRequest
    Payload for ``POST /api/generate``: the photo plus the style options.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from coloringpage.core.models import DetailLevel, LineThickness, StyleOptions


class PromptCompileRequest(BaseModel):
    """Request body for the ``POST /api/prompt/compile`` endpoint.

    Attributes:
        line_thickness: Outline weight (``thin``, ``medium`` or ``bold``).
        detail_level: Amount of detail (``low``, ``medium`` or ``high``).
    """

    line_thickness: LineThickness = Field(
        default=LineThickness.MEDIUM,
        description="Outline weight: 'thin', 'medium' or 'bold'.",
    )
    detail_level: DetailLevel = Field(
        default=DetailLevel.MEDIUM,
        description="Amount of detail: 'low', 'medium' or 'high'.",
    )

    def to_options(self) -> StyleOptions:
        return StyleOptions(
            line_thickness=self.line_thickness,
            detail_level=self.detail_level,
        )


class GenerateRequest(PromptCompileRequest):
    """Request body for the ``POST /api/generate`` endpoint.

    Attributes:
        image_b64: Base64-encoded image bytes (no ``data:`` prefix).
        mime_type: Media type of the image, e.g. ``image/jpeg``.
        line_thickness: Outline weight.
        detail_level: Amount of detail.
    """

    image_b64: str = Field(
        ...,
        min_length=1,
        description="Base64-encoded image bytes.",
    )
    mime_type: str = Field(
        ...,
        description="Media type of the uploaded image (must be image/*).",
    )
