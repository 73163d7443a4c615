"""Core functionality for coloring page generation.

This module provides the core components for the Coloring Page Creator:

- **ImageTransformClient**: Sends a photo and a line-art instruction to Gemini
  and classifies the reply
- **Data model**: InputImage, StyleOptions and the GenerationSuccess /
  GenerationFailure result values
- **build_instruction**: Fixed phrase tables for thickness and detail level
- **SessionStore**: JSON cache of the last upload and coloring page
- **ColoringPageConfig**: Configuration management using Pydantic Settings
- **config**: Global configuration instance (loads from environment variables)

Architecture Overview
---------------------
1. **Configuration Layer** (config.py):
   - Environment-based configuration using Pydantic Settings
   - All settings prefixed with COLORINGPAGE_ in .env files
   - Automatic directory creation

2. **Generation Layer** (client.py, prompt_builder.py, models.py):
   - One request per call, no retries
   - Failures returned as values with a closed set of kinds

3. **Persistence Layer** (session_store.py):
   - Last upload/result cache and PNG export for downloads

Usage Example
-------------
    from coloringpage.core import ImageTransformClient, config
    from coloringpage.core.models import DetailLevel, InputImage, LineThickness, StyleOptions

    client = ImageTransformClient(config)
    result = client.generate(
        InputImage(data=photo_bytes, mime_type="image/jpeg"),
        StyleOptions(LineThickness.THIN, DetailLevel.HIGH),
    )
"""

from coloringpage.core.client import ImageTransformClient
from coloringpage.core.config import ColoringPageConfig, config
from coloringpage.core.prompt_builder import build_instruction
from coloringpage.core.session_store import SessionSnapshot, SessionStore, export_png

__all__ = [
    "ImageTransformClient",
    "ColoringPageConfig",
    "config",
    "build_instruction",
    "SessionSnapshot",
    "SessionStore",
    "export_png",
]
