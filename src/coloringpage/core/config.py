"""Configuration management for the Coloring Page Creator.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the COLORINGPAGE_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (COLORINGPAGE_* prefix)
2. .env file in the project root
3. Default values defined in ColoringPageConfig

The API credential is the one exception to the prefix rule: it is also read
from ``GEMINI_API_KEY``, ``GOOGLE_API_KEY`` or plain ``API_KEY`` so an existing
Gemini key works without renaming.

Example .env file:
    COLORINGPAGE_API_KEY=your-gemini-key
    COLORINGPAGE_MODEL_ID=gemini-2.5-flash-image-preview
    COLORINGPAGE_DATA_DIR=data
    COLORINGPAGE_OUTPUTS_DIR=outputs

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time and
is what the UI and API entry points hand to ``ImageTransformClient``.  The
client itself never reads the environment; it only sees the config object it
was constructed with.

Usage Example
-------------
    from coloringpage.core.config import config
    from coloringpage.core.client import ImageTransformClient

    client = ImageTransformClient(config)

Directory Management
--------------------
The configuration automatically creates required directories on initialization:
- data_dir: For the cached last session (``last_session.json``)
- outputs_dir: For exported coloring pages
"""

from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MODEL_ID = "gemini-2.5-flash-image-preview"


class ColoringPageConfig(BaseSettings):
    """Main configuration for the Coloring Page Creator.

    Attributes
    ----------
    Generation Service:
        api_key : str | None
            Gemini API credential (None means the SDK call will fail and the
            failure is reported as an API error)
        model_id : str
            Image-capable Gemini model identifier

    Uploads:
        max_upload_bytes : int
            Largest accepted upload in bytes (10 MB by default)

    Paths:
        data_dir : Path
            Directory holding the cached last session
        outputs_dir : Path
            Directory where downloadable coloring pages are written

    API Settings:
        server_host : str
            uvicorn bind address
        server_port : int
            uvicorn port

    UI Settings:
        gradio_server_name : str
            Server bind address (0.0.0.0 for local network)
        gradio_server_port : int
            Server port (1024-65535)
        gradio_share : bool
            Create public gradio.live link (keep False for local-only)

    Examples
    --------
        >>> custom_config = ColoringPageConfig(
        ...     api_key="test-key",
        ...     data_dir="/tmp/coloringpage/data",
        ... )
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="COLORINGPAGE_",
        case_sensitive=False,
        extra="ignore",
    )

    # Generation service
    api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "COLORINGPAGE_API_KEY", "GEMINI_API_KEY", "GOOGLE_API_KEY", "API_KEY", "api_key"
        ),
        description="Gemini API key",
    )
    model_id: str = Field(
        default=DEFAULT_MODEL_ID,
        description="Gemini model used for image-to-image generation",
    )

    # Uploads
    max_upload_bytes: int = Field(
        default=10 * 1024 * 1024,
        description="Maximum accepted upload size in bytes",
        ge=1024,
        le=50 * 1024 * 1024,
    )

    # Paths
    data_dir: Path = Field(
        default=Path("data"),
        description="Directory for the cached last session",
    )
    outputs_dir: Path = Field(
        default=Path("outputs"),
        description="Directory to save exported coloring pages",
    )

    # API settings
    server_host: str = Field(
        default="0.0.0.0",
        description="REST API bind address",
    )
    server_port: int = Field(
        default=8000,
        description="REST API port",
        ge=1024,
        le=65535,
    )

    # UI settings
    gradio_server_name: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for local network)",
    )
    gradio_server_port: int = Field(
        default=7860,
        description="Server port",
        ge=1024,
        le=65535,
    )
    gradio_share: bool = Field(
        default=False,
        description="Create public gradio.live link (keep False for local-only)",
    )

    def __init__(self, **kwargs):
        """Initialize configuration and create required directories.

        Args:
            **kwargs: Configuration overrides (typically from environment variables)
        """
        super().__init__(**kwargs)

        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.outputs_dir.mkdir(parents=True, exist_ok=True)

    @property
    def session_file(self) -> Path:
        """Path of the JSON file caching the last upload and result."""
        return self.data_dir / "last_session.json"


# Global configuration instance
config = ColoringPageConfig()
