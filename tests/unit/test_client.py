"""Tests for coloringpage.core.client: request construction and response classification.

All tests run against a mocked ``genai.Client`` returning real
``google.genai.types`` response objects; no network access occurs.
"""

from __future__ import annotations

from google.genai import errors, types

from coloringpage.core.client import (
    NO_IMAGE_MESSAGE,
    SAFETY_BLOCKED_MESSAGE,
    UNKNOWN_ERROR_MESSAGE,
    ImageTransformClient,
)
from coloringpage.core.models import (
    DetailLevel,
    FailureKind,
    InputImage,
    LineThickness,
    StyleOptions,
)


def _image(sample_png_bytes) -> InputImage:
    return InputImage(data=sample_png_bytes, mime_type="image/png")


def _image_part(data: bytes = b"coloring-page", mime_type: str = "image/png") -> types.Part:
    return types.Part(inline_data=types.Blob(data=data, mime_type=mime_type))


# ---------------------------------------------------------------------------
# Request construction.
# ---------------------------------------------------------------------------


class TestRequest:
    """The outbound request carries the image, the instruction and the modalities."""

    def test_request_shape(
        self, transform_client, mock_genai_client, make_response, sample_png_bytes
    ):
        mock_genai_client.models.generate_content.return_value = make_response([_image_part()])

        transform_client.generate(
            _image(sample_png_bytes), StyleOptions(LineThickness.THIN, DetailLevel.HIGH)
        )

        mock_genai_client.models.generate_content.assert_called_once()
        kwargs = mock_genai_client.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "test-image-model"

        image_part, text_part = kwargs["contents"]
        assert image_part.inline_data.data == sample_png_bytes
        assert image_part.inline_data.mime_type == "image/png"
        assert "thin and delicate outlines" in text_part.text
        assert "with intricate and fine details, suitable for adults" in text_part.text

        assert kwargs["config"].response_modalities == [
            types.Modality.IMAGE,
            types.Modality.TEXT,
        ]

    def test_sdk_client_created_lazily_with_api_key(self, test_config, monkeypatch):
        """No SDK client exists until the first call."""
        created = []

        class FakeClient:
            def __init__(self, api_key=None):
                created.append(api_key)

        monkeypatch.setattr("coloringpage.core.client.genai.Client", FakeClient)

        client = ImageTransformClient(test_config)
        assert created == []

        client._get_client()
        client._get_client()
        assert created == ["test-key"]


# ---------------------------------------------------------------------------
# Response classification.
# ---------------------------------------------------------------------------


class TestResponseClassification:
    """Each response shape maps to exactly one outcome."""

    def test_inline_image_returned_unchanged(
        self, transform_client, mock_genai_client, make_response, sample_png_bytes
    ):
        mock_genai_client.models.generate_content.return_value = make_response(
            [types.Part(text="Here you go"), _image_part(b"\x89PNG-result", "image/png")]
        )

        result = transform_client.generate(_image(sample_png_bytes), StyleOptions())

        assert result.ok is True
        assert result.data == b"\x89PNG-result"
        assert result.mime_type == "image/png"

    def test_first_image_part_wins(
        self, transform_client, mock_genai_client, make_response, sample_png_bytes
    ):
        mock_genai_client.models.generate_content.return_value = make_response(
            [_image_part(b"first", "image/jpeg"), _image_part(b"second")]
        )

        result = transform_client.generate(_image(sample_png_bytes), StyleOptions())

        assert result.data == b"first"
        assert result.mime_type == "image/jpeg"

    def test_image_wins_over_safety_reason(
        self, transform_client, mock_genai_client, make_response, sample_png_bytes
    ):
        mock_genai_client.models.generate_content.return_value = make_response(
            [_image_part()], finish_reason=types.FinishReason.SAFETY
        )

        result = transform_client.generate(_image(sample_png_bytes), StyleOptions())

        assert result.ok is True

    def test_safety_finish_reason(
        self, transform_client, mock_genai_client, make_response, sample_png_bytes
    ):
        mock_genai_client.models.generate_content.return_value = make_response(
            [], finish_reason=types.FinishReason.SAFETY
        )

        result = transform_client.generate(_image(sample_png_bytes), StyleOptions())

        assert result.ok is False
        assert result.kind is FailureKind.SAFETY_BLOCKED
        assert result.message == SAFETY_BLOCKED_MESSAGE

    def test_recitation_finish_reason(
        self, transform_client, mock_genai_client, make_response, sample_png_bytes
    ):
        mock_genai_client.models.generate_content.return_value = make_response(
            None, finish_reason=types.FinishReason.RECITATION
        )

        result = transform_client.generate(_image(sample_png_bytes), StyleOptions())

        assert result.kind is FailureKind.SAFETY_BLOCKED

    def test_safety_wins_over_text(
        self, transform_client, mock_genai_client, make_response, sample_png_bytes
    ):
        mock_genai_client.models.generate_content.return_value = make_response(
            [types.Part(text="I can't help with that.")],
            finish_reason=types.FinishReason.SAFETY,
        )

        result = transform_client.generate(_image(sample_png_bytes), StyleOptions())

        assert result.kind is FailureKind.SAFETY_BLOCKED

    def test_prompt_blocked_without_candidates(
        self, transform_client, mock_genai_client, make_response, sample_png_bytes
    ):
        mock_genai_client.models.generate_content.return_value = make_response(
            None, finish_reason=None, block_reason=types.BlockedReason.SAFETY
        )

        result = transform_client.generate(_image(sample_png_bytes), StyleOptions())

        assert result.kind is FailureKind.SAFETY_BLOCKED

    def test_text_only_response(
        self, transform_client, mock_genai_client, make_response, sample_png_bytes
    ):
        mock_genai_client.models.generate_content.return_value = make_response(
            [types.Part(text="  I cannot edit images of people.  ")]
        )

        result = transform_client.generate(_image(sample_png_bytes), StyleOptions())

        assert result.kind is FailureKind.TEXT_ONLY_RESPONSE
        assert result.detail == "I cannot edit images of people."
        assert result.message == (
            "The model returned a text response instead of an image: "
            '"I cannot edit images of people."'
        )

    def test_no_image_no_text(
        self, transform_client, mock_genai_client, make_response, sample_png_bytes
    ):
        mock_genai_client.models.generate_content.return_value = make_response([])

        result = transform_client.generate(_image(sample_png_bytes), StyleOptions())

        assert result.kind is FailureKind.NO_IMAGE_RETURNED
        assert result.message == NO_IMAGE_MESSAGE

    def test_no_candidates(
        self, transform_client, mock_genai_client, make_response, sample_png_bytes
    ):
        mock_genai_client.models.generate_content.return_value = make_response(
            None, finish_reason=None
        )

        result = transform_client.generate(_image(sample_png_bytes), StyleOptions())

        assert result.kind is FailureKind.NO_IMAGE_RETURNED

    def test_whitespace_text_is_no_image(
        self, transform_client, mock_genai_client, make_response, sample_png_bytes
    ):
        mock_genai_client.models.generate_content.return_value = make_response(
            [types.Part(text="   ")]
        )

        result = transform_client.generate(_image(sample_png_bytes), StyleOptions())

        assert result.kind is FailureKind.NO_IMAGE_RETURNED


# ---------------------------------------------------------------------------
# Exception classification.
# ---------------------------------------------------------------------------


class TestExceptions:
    """Exceptions from the SDK never escape ``generate``."""

    def test_generic_exception_is_api_error(
        self, transform_client, mock_genai_client, sample_png_bytes
    ):
        mock_genai_client.models.generate_content.side_effect = ConnectionError(
            "network unreachable"
        )

        result = transform_client.generate(_image(sample_png_bytes), StyleOptions())

        assert result.kind is FailureKind.API_ERROR
        assert result.message == "An API error occurred: network unreachable"
        assert result.detail == "network unreachable"

    def test_sdk_api_error(self, transform_client, mock_genai_client, sample_png_bytes):
        mock_genai_client.models.generate_content.side_effect = errors.ClientError(
            400,
            {"error": {"code": 400, "message": "API key not valid.", "status": "INVALID_ARGUMENT"}},
        )

        result = transform_client.generate(_image(sample_png_bytes), StyleOptions())

        assert result.kind is FailureKind.API_ERROR
        assert "API key not valid." in result.message
        assert result.message.startswith("An API error occurred: ")

    def test_exception_without_message_is_unknown(
        self, transform_client, mock_genai_client, sample_png_bytes
    ):
        mock_genai_client.models.generate_content.side_effect = RuntimeError()

        result = transform_client.generate(_image(sample_png_bytes), StyleOptions())

        assert result.kind is FailureKind.UNKNOWN_ERROR
        assert result.message == UNKNOWN_ERROR_MESSAGE

    def test_string_option_values(
        self, transform_client, mock_genai_client, make_response, sample_png_bytes
    ):
        mock_genai_client.models.generate_content.return_value = make_response([_image_part()])

        result = transform_client.generate(
            _image(sample_png_bytes), StyleOptions("bold", "low")  # type: ignore[arg-type]
        )

        assert result.ok is True
        text = mock_genai_client.models.generate_content.call_args.kwargs["contents"][1].text
        assert "extra bold and thick outlines" in text

    def test_single_request_no_retry(
        self, transform_client, mock_genai_client, make_response, sample_png_bytes
    ):
        mock_genai_client.models.generate_content.return_value = make_response([])

        transform_client.generate(_image(sample_png_bytes), StyleOptions())

        assert mock_genai_client.models.generate_content.call_count == 1
