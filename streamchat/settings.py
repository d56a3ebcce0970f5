"""Server settings shared by the entry point, the API and the UI.

Both run modes read the same values, so the UI always points its chat
requests at the API server these settings start.
"""

import os
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()

LOOPBACK_HOST = "127.0.0.1"
WILDCARD_HOSTS = frozenset({"0.0.0.0", "::"})


class ServerSettings(BaseModel):
    """Where and how the API and UI servers run.

    Attributes:
        host: Interface both servers bind to.
        port: API port. In integrated mode the UI is served here too.
        ui_port: UI port in separate mode.
        run_mode: ``integrated`` (one server) or ``separate`` (two processes).
        log_level: Root logging level.
        reload: Restart the API server on code changes (separate mode only).
        cors_origins: Origins allowed to call the API from a browser.
    """

    host: str = Field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = Field(
        default_factory=lambda: os.getenv("PORT", "8000"),
        ge=1,
        le=65535,
        validate_default=True,
    )
    ui_port: int = Field(
        default_factory=lambda: os.getenv("UI_PORT", "8080"),
        ge=1,
        le=65535,
        validate_default=True,
    )
    run_mode: Literal["integrated", "separate"] = Field(
        default_factory=lambda: os.getenv("RUN_MODE", "integrated"),
        validate_default=True,
    )
    log_level: str = Field(
        default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"),
        validate_default=True,
    )
    reload: bool = Field(
        default_factory=lambda: os.getenv("RELOAD", "false"),
        validate_default=True,
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: os.getenv("CORS_ORIGINS", "*"),
        validate_default=True,
    )

    @field_validator("run_mode", mode="before")
    @classmethod
    def normalize_run_mode(cls, v: object) -> object:
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.strip().upper() or "INFO"

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, v: object) -> object:
        """Accept a comma-separated CORS_ORIGINS value."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @property
    def api_base_url(self) -> str:
        """URL a local client uses to reach the API server."""
        host = LOOPBACK_HOST if self.host in WILDCARD_HOSTS else self.host
        return f"http://{host}:{self.port}"


def get_server_settings() -> ServerSettings:
    """Create server settings from environment.

    Returns:
        Configured ServerSettings instance.
    """
    return ServerSettings()
