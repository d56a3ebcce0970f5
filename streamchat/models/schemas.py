import uuid
from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

TITLE_LENGTH = 30
TITLE_ELLIPSIS = "..."


class MessageRole(str, Enum):
    """Speaker of a committed message."""

    USER = "user"
    ASSISTANT = "assistant"


class StreamStatus(str, Enum):
    """Lifecycle of one request/response exchange."""

    IDLE = "idle"
    SENDING = "sending"
    STREAMING = "streaming"
    COMPLETED = "completed"
    ERRORED = "errored"
    ABORTED = "aborted"

    @property
    def is_terminal(self) -> bool:
        return self in (StreamStatus.COMPLETED, StreamStatus.ERRORED, StreamStatus.ABORTED)


def derive_title(text: str, length: int = TITLE_LENGTH) -> str:
    """Build a session title from the first user message.

    Args:
        text: The first user message of the session.
        length: Number of characters kept before ellipsizing.

    Returns:
        The text itself when short enough, otherwise its prefix followed by "...".
    """
    if len(text) > length:
        return text[:length] + TITLE_ELLIPSIS
    return text


class Message(BaseModel):
    """A committed chat message.

    Attributes:
        id: Unique message identifier.
        role: Who produced the message (user or assistant).
        content: The message text.
        created_at: When the message was committed.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: f"msg-{uuid.uuid4().hex}")
    role: MessageRole
    content: str
    created_at: datetime = Field(default_factory=datetime.now)

    @classmethod
    def create(cls, role: MessageRole, content: str) -> "Message":
        return cls(role=role, content=content)


class Session(BaseModel):
    """One conversation thread.

    Attributes:
        id: Unique session identifier.
        title: Prefix of the first user message, fixed at creation.
        messages: Insertion-ordered message history.
        created_at: Session creation timestamp.
    """

    id: str = Field(default_factory=lambda: f"session-{uuid.uuid4().hex}")
    title: str
    messages: list[Message] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.now)


class ChatMessage(BaseModel):
    """A single role-tagged history entry sent to the completion endpoint.

    Attributes:
        role: The speaker identifier (user or assistant).
        content: The message text.
    """

    role: Literal["user", "assistant"] = Field(
        ..., description="Message role: 'user' or 'assistant'"
    )
    content: str = Field(..., description="The message content")

    @classmethod
    def from_message(cls, message: Message) -> "ChatMessage":
        return cls(role=message.role.value, content=message.content)


class ChatCompletionRequest(BaseModel):
    """Request payload for the chat completion endpoint.

    Attributes:
        messages: Full visible history of the session, oldest first.
    """

    messages: list[ChatMessage] = Field(..., min_length=1, description="Conversation history")


class StreamState(BaseModel):
    """Per-exchange streaming state. Never persisted."""

    session_id: str
    accumulated_text: str = ""
    status: StreamStatus = StreamStatus.IDLE


class StreamResult(BaseModel):
    """Terminal outcome of one exchange.

    Attributes:
        status: COMPLETED, ERRORED or ABORTED.
        text: Full text when completed, the partial text otherwise.
        error: Failure reason when errored.
    """

    status: StreamStatus
    text: str = ""
    error: str | None = None

    @classmethod
    def completed(cls, text: str) -> "StreamResult":
        return cls(status=StreamStatus.COMPLETED, text=text)

    @classmethod
    def errored(cls, reason: str, partial_text: str = "") -> "StreamResult":
        return cls(status=StreamStatus.ERRORED, text=partial_text, error=reason)

    @classmethod
    def aborted(cls, partial_text: str) -> "StreamResult":
        return cls(status=StreamStatus.ABORTED, text=partial_text)


class ConversationView(BaseModel):
    """Read-only snapshot of conversation state for rendering.

    Attributes:
        sessions: Sessions, most recently created first.
        active_session_id: Selected session, None before the first submission.
        in_progress_text: Streaming, not yet committed assistant text.
        is_busy: Whether the active session has a request in flight.
    """

    sessions: list[Session]
    active_session_id: str | None = None
    in_progress_text: str = ""
    is_busy: bool = False
