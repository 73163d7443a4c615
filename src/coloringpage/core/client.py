"""Gemini request/response handling for coloring page generation.

This module provides :class:`ImageTransformClient`, the single point of
contact with the external image generation service.  One call to
:meth:`ImageTransformClient.generate` makes exactly one outbound request and
returns either a :class:`~coloringpage.core.models.GenerationSuccess` or a
classified :class:`~coloringpage.core.models.GenerationFailure`.

Key Responsibilities
--------------------
- **Instruction compilation**: the style options are turned into the fixed
  line-art directive by :func:`~coloringpage.core.prompt_builder.build_instruction`.
- **Request construction**: the photo travels as an inline-data part followed
  by the instruction text.  The response modalities are always
  ``[IMAGE, TEXT]``: the image preview models reject image-only requests.
- **Response disambiguation**: the first inline image part wins.  Without
  one, a safety/policy stop reason takes precedence over returned text, and
  returned text over an empty response.
- **Error classification**: exceptions raised by the SDK or the transport
  never escape; they become ``API_ERROR`` (or ``UNKNOWN_ERROR`` when the
  exception carries no message).

There is no retry, timeout or cancellation logic here.  The SDK's own network
defaults apply and callers decide whether to try again.

Usage
-----
::

    from coloringpage.core.client import ImageTransformClient
    from coloringpage.core.config import config
    from coloringpage.core.models import InputImage, StyleOptions

    client = ImageTransformClient(config)
    result = client.generate(
        InputImage.from_base64(b64, "image/jpeg"),
        StyleOptions(),
    )
    if result.ok:
        png_b64 = result.b64
    else:
        print(result.message)
"""

from __future__ import annotations

import logging

from google import genai
from google.genai import errors, types

from coloringpage.core.config import ColoringPageConfig
from coloringpage.core.models import (
    DetailLevel,
    FailureKind,
    GenerationFailure,
    GenerationResult,
    GenerationSuccess,
    InputImage,
    LineThickness,
    StyleOptions,
)
from coloringpage.core.prompt_builder import build_instruction

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Stop reasons that mean the service refused to produce content.
# Compared by value so both SDK enum members and raw strings match.
# ---------------------------------------------------------------------------
SAFETY_FINISH_REASONS = frozenset(
    {
        "SAFETY",
        "RECITATION",
        "BLOCKLIST",
        "PROHIBITED_CONTENT",
        "SPII",
        "IMAGE_SAFETY",
    }
)

SAFETY_BLOCKED_MESSAGE = "Image generation was blocked due to safety or policy reasons."
NO_IMAGE_MESSAGE = "Failed to generate an image. The model did not return image data."
UNKNOWN_ERROR_MESSAGE = "An unknown error occurred while communicating with the API."

DEFAULT_RESULT_MIME_TYPE = "image/png"


def _enum_value(value: object) -> str | None:
    """Return the string value of an SDK enum (or plain string), else None."""
    if value is None:
        return None
    return str(getattr(value, "value", value))


class ImageTransformClient:
    """Turns a photo into a coloring page with one Gemini request.

    Attributes:
        config (ColoringPageConfig):
            Supplies the API key and model identifier.
        model_id (str):
            Model the request is sent to.
    """

    def __init__(self, config: ColoringPageConfig, client: genai.Client | None = None) -> None:
        """Initialise the client.

        Args:
            config: Application configuration.  Only ``api_key`` and
                ``model_id`` are read.
            client: Pre-built ``genai.Client``.  When omitted, one is created
                from ``config.api_key`` on the first call.
        """
        self.config = config
        self.model_id = config.model_id
        self._client = client

    def _get_client(self) -> genai.Client:
        if self._client is None:
            logger.info(f"Creating Gemini client for model {self.model_id}")
            self._client = genai.Client(api_key=self.config.api_key)
        return self._client

    def generate(self, image: InputImage, options: StyleOptions) -> GenerationResult:
        """Convert ``image`` into a coloring page in the requested style.

        Args:
            image: The uploaded photo.
            options: Line thickness and detail level.

        Returns:
            ``GenerationSuccess`` holding the returned image bytes unchanged,
            or ``GenerationFailure`` describing why no image came back.

        Raises:
            ValueError: If an option is not a valid thickness or detail value.
        """
        options = StyleOptions(
            line_thickness=LineThickness(options.line_thickness),
            detail_level=DetailLevel(options.detail_level),
        )
        instruction = build_instruction(options)

        logger.info(
            f"Requesting coloring page: model={self.model_id}, "
            f"thickness={options.line_thickness.value}, detail={options.detail_level.value}, "
            f"input={image.mime_type} ({len(image.data)} bytes)"
        )

        try:
            response = self._get_client().models.generate_content(
                model=self.model_id,
                contents=[
                    types.Part.from_bytes(data=image.data, mime_type=image.mime_type),
                    types.Part.from_text(text=instruction),
                ],
                config=types.GenerateContentConfig(
                    response_modalities=[types.Modality.IMAGE, types.Modality.TEXT],
                ),
            )
            result = self._interpret_response(response)
        except errors.APIError as e:
            message = e.message or str(e)
            logger.error(f"Gemini API error ({e.code}): {message}")
            return GenerationFailure(
                kind=FailureKind.API_ERROR,
                message=f"An API error occurred: {message}",
                detail=message,
            )
        except Exception as e:
            message = str(e)
            if not message:
                logger.error(f"Unknown error calling Gemini: {type(e).__name__}", exc_info=True)
                return GenerationFailure(kind=FailureKind.UNKNOWN_ERROR, message=UNKNOWN_ERROR_MESSAGE)
            logger.error(f"Error generating coloring page: {message}", exc_info=True)
            return GenerationFailure(
                kind=FailureKind.API_ERROR,
                message=f"An API error occurred: {message}",
                detail=message,
            )

        if result.ok:
            logger.info(f"Received coloring page: {result.mime_type} ({len(result.data)} bytes)")
        else:
            logger.warning(f"Generation failed ({result.kind.value}): {result.message}")
        return result

    def _interpret_response(self, response: types.GenerateContentResponse) -> GenerationResult:
        """Classify a raw ``generate_content`` response."""
        candidates = response.candidates or []
        candidate = candidates[0] if candidates else None
        parts = []
        if candidate is not None and candidate.content is not None:
            parts = candidate.content.parts or []

        # --- Inline image ------------------------------------------------------
        for part in parts:
            if part.inline_data is not None and part.inline_data.data:
                return GenerationSuccess(
                    data=part.inline_data.data,
                    mime_type=part.inline_data.mime_type or DEFAULT_RESULT_MIME_TYPE,
                )

        # --- Safety / policy rejection -----------------------------------------
        finish_reason = _enum_value(candidate.finish_reason) if candidate is not None else None
        block_reason = None
        if response.prompt_feedback is not None:
            block_reason = _enum_value(response.prompt_feedback.block_reason)
            if block_reason == "BLOCKED_REASON_UNSPECIFIED":
                block_reason = None

        if finish_reason in SAFETY_FINISH_REASONS or block_reason:
            logger.warning(
                f"Generation blocked: finish_reason={finish_reason}, block_reason={block_reason}"
            )
            return GenerationFailure(kind=FailureKind.SAFETY_BLOCKED, message=SAFETY_BLOCKED_MESSAGE)

        # --- Text instead of an image ------------------------------------------
        text = "".join(part.text for part in parts if part.text and not part.thought).strip()
        if text:
            return GenerationFailure(
                kind=FailureKind.TEXT_ONLY_RESPONSE,
                message=f'The model returned a text response instead of an image: "{text}"',
                detail=text,
            )

        return GenerationFailure(kind=FailureKind.NO_IMAGE_RETURNED, message=NO_IMAGE_MESSAGE)
