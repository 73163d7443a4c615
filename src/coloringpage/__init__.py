"""Coloring Page Creator - turn photos into printable coloring pages with Gemini."""

__version__ = "0.1.0"

from coloringpage.core.client import ImageTransformClient
from coloringpage.core.config import ColoringPageConfig, config
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

__all__ = [
    "ImageTransformClient",
    "ColoringPageConfig",
    "config",
    "DetailLevel",
    "FailureKind",
    "GenerationFailure",
    "GenerationResult",
    "GenerationSuccess",
    "InputImage",
    "LineThickness",
    "StyleOptions",
]
