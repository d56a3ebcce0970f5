"""Pydantic models shared by the streaming client, sessions and API.

Models:
    - Message / Session: committed conversation state
    - ChatMessage / ChatCompletionRequest: outbound request payload
    - StreamStatus / StreamState / StreamResult: per-request stream lifecycle
    - ConversationView: read-only snapshot for rendering
"""

from streamchat.models.schemas import (
    ChatCompletionRequest,
    ChatMessage,
    ConversationView,
    Message,
    MessageRole,
    Session,
    StreamResult,
    StreamState,
    StreamStatus,
    derive_title,
)

__all__ = [
    "ChatCompletionRequest",
    "ChatMessage",
    "ConversationView",
    "Message",
    "MessageRole",
    "Session",
    "StreamResult",
    "StreamState",
    "StreamStatus",
    "derive_title",
]
