"""Chat client configuration with environment variable loading.

Pydantic-based configuration for the streaming chat client: where the
completion endpoint lives, how long to wait for it, and what the user
sees when a request fails.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()

DEFAULT_ERROR_MESSAGE = (
    "Sorry, there was an error processing your request. "
    "Please make sure your OpenAI API key is set in the .env file."
)


class ClientConfig(BaseModel):
    """Configuration for the streaming chat client.

    Attributes:
        api_base_url: Base URL of the server exposing the chat endpoint.
        chat_path: Path of the frame-streaming chat endpoint.
        timeout: Request timeout in seconds.
        error_message: Diagnostic committed as the assistant reply on failure.
        keep_partial_on_error: Keep text streamed before a failure in front of
            the diagnostic instead of discarding it.
        title_length: Characters of the first user message kept as session title.
    """

    api_base_url: str = Field(
        default_factory=lambda: os.getenv("API_BASE_URL", "http://localhost:8000"),
        description="Base URL of the chat API",
    )
    chat_path: str = Field(default="/api/chat", description="Chat endpoint path")
    timeout: float = Field(
        default_factory=lambda: float(os.getenv("CHAT_TIMEOUT", "120")),
        gt=0.0,
        description="Request timeout in seconds",
    )
    error_message: str = Field(
        default=DEFAULT_ERROR_MESSAGE,
        min_length=1,
        description="User-facing diagnostic for failed requests",
    )
    keep_partial_on_error: bool = Field(
        default_factory=lambda: os.getenv("KEEP_PARTIAL_ON_ERROR", "false"),
        validate_default=True,
        description="Keep partially streamed text when a request fails",
    )
    title_length: int = Field(default=30, ge=1, le=200)

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URL so it joins cleanly with chat_path."""
        v = v.strip()
        if not v:
            raise ValueError("API base URL required. Set API_BASE_URL in .env")
        return v.rstrip("/")

    @field_validator("keep_partial_on_error", mode="before")
    @classmethod
    def blank_flag_is_off(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip() or False
        return v

    @field_validator("chat_path")
    @classmethod
    def leading_slash(cls, v: str) -> str:
        return v if v.startswith("/") else f"/{v}"

    @property
    def chat_url(self) -> str:
        return f"{self.api_base_url}{self.chat_path}"


def get_client_config() -> ClientConfig:
    """Create client configuration from environment.

    Returns:
        Configured ClientConfig instance.
    """
    return ClientConfig()
