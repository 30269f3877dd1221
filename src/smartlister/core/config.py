"""Configuration management for Smart Lister.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the SMARTLISTER_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (SMARTLISTER_* prefix)
2. .env file in the project root
3. Default values defined in SmartListerConfig

The Gemini API key is the one exception to the prefix rule: it is also read
from the conventional ``GEMINI_API_KEY`` and ``GOOGLE_API_KEY`` variables.

Example .env file:
    GEMINI_API_KEY=...
    SMARTLISTER_GEMINI_MODEL=gemini-2.5-flash
    SMARTLISTER_SERVER_PORT=7860
    SMARTLISTER_DATA_DIR=data

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.

Usage Example
-------------
    from smartlister.core.config import config

    print(config.gemini_model)
    print(config.license_db_path)

Upload Limits
-------------
- max_images: images held per session and accepted per request (10)
- max_image_dimension: longest side after client-side downscaling (1024px)
- max_image_bytes: encoded size target per image (0.5 MB)
"""

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).resolve().parent.parent


class SmartListerConfig(BaseSettings):
    """Main configuration for Smart Lister.

    Attributes
    ----------
    Generation Backend:
        gemini_api_key : str
            API key for Google Gemini (empty means generation is unavailable)
        gemini_model : str
            Gemini model name used for listing generation

    Generation Client:
        generate_endpoint : str
            URL the UI posts generation requests to (empty means
            this server on 127.0.0.1:<server_port>)
        request_timeout : float | None
            Client timeout in seconds (None waits indefinitely)

    Upload Limits:
        max_images : int
            Maximum number of images per request
        max_image_dimension : int
            Maximum width/height of a compressed image
        max_image_bytes : int
            Target maximum size of a compressed image

    Notifications:
        toast_duration_ms : int
            Default toast lifetime (0 keeps toasts until dismissed)
        toast_refresh_interval : float
            Seconds between toast area re-renders in the UI

    Access Gate:
        data_dir : Path
            Directory holding the license database
        session_cookie_name : str
            Cookie that marks a browser as licensed
        session_max_age_days : int
            Lifetime of the licensed cookie

    Server:
        server_host : str
            Bind address
        server_port : int
            Server port (1024-65535)
        log_level : str
            Root logging level
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SMARTLISTER_",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # Generation backend
    gemini_api_key: str = Field(
        default="",
        validation_alias=AliasChoices(
            "gemini_api_key",
            "SMARTLISTER_GEMINI_API_KEY",
            "GEMINI_API_KEY",
            "GOOGLE_API_KEY",
        ),
        description="API key for Google Gemini",
    )
    gemini_model: str = Field(
        default="gemini-2.5-flash",
        description="Gemini model used to write listings",
    )

    # Generation client
    generate_endpoint: str = Field(
        default="",
        description="Generation endpoint the UI talks to (empty = local server_port)",
    )
    request_timeout: float | None = Field(
        default=None,
        description="Client timeout in seconds (None = wait indefinitely)",
    )

    # Upload limits
    max_images: int = Field(default=10, ge=1, le=50)
    max_image_dimension: int = Field(default=1024, ge=64, le=4096)
    max_image_bytes: int = Field(default=524288, ge=1024)

    # Notifications
    toast_duration_ms: int = Field(
        default=2000,
        ge=0,
        description="Default toast duration in milliseconds (0 = persist)",
    )
    toast_refresh_interval: float = Field(default=0.5, gt=0)

    # Access gate
    data_dir: Path = Field(
        default=Path("data"),
        description="Directory for the license database",
    )
    templates_dir: Path = Field(
        default=PACKAGE_DIR / "templates",
        description="Directory holding HTML pages",
    )
    session_cookie_name: str = Field(default="session_token")
    session_max_age_days: int = Field(default=7, ge=1)

    # Server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for local network)",
    )
    server_port: int = Field(
        default=7860,
        description="Server port",
        ge=1024,
        le=65535,
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")

    def __init__(self, **kwargs):
        """Initialize configuration, create the data directory and resolve the endpoint.

        Args:
            **kwargs: Configuration overrides (typically from environment variables)
        """
        super().__init__(**kwargs)

        self.data_dir.mkdir(parents=True, exist_ok=True)

        if not self.generate_endpoint:
            self.generate_endpoint = f"http://127.0.0.1:{self.server_port}/api/generate"

    @property
    def license_db_path(self) -> Path:
        """Path to the SQLite license database."""
        return self.data_dir / "licenses.db"

    @property
    def session_max_age_seconds(self) -> int:
        """Lifetime of the licensed cookie in seconds."""
        return self.session_max_age_days * 24 * 60 * 60


# Global configuration instance
config = SmartListerConfig()
