"""In-memory store of conversation sessions.

Single source of truth for message state. Every transition is a plain
synchronous method, so on the event loop no reader can observe a
half-applied change. State lives for the lifetime of the process.
"""

import logging

from streamchat.models.schemas import (
    TITLE_LENGTH,
    Message,
    MessageRole,
    Session,
    derive_title,
)

logger = logging.getLogger(__name__)


class SessionNotFoundError(KeyError):
    """Raised when a transition targets a session that does not exist."""

    def __init__(self, session_id: str) -> None:
        super().__init__(session_id)
        self.session_id = session_id

    def __str__(self) -> str:
        return f"Session not found: {self.session_id}"


class SessionStore:
    """Ordered collection of sessions plus the active-session pointer.

    Sessions are kept most recently created first. Streaming assistant text
    is tracked per session as "in-progress" text, separate from the
    committed message history.
    """

    def __init__(self, title_length: int = TITLE_LENGTH) -> None:
        self._sessions: list[Session] = []
        self._active_session_id: str | None = None
        self._in_progress: dict[str, str] = {}
        self._issued_ids: set[str] = set()
        self._title_length = title_length

    @property
    def sessions(self) -> list[Session]:
        return list(self._sessions)

    @property
    def active_session_id(self) -> str | None:
        return self._active_session_id

    @property
    def active_session(self) -> Session | None:
        if self._active_session_id is None:
            return None
        return self.get_session(self._active_session_id)

    def get_session(self, session_id: str) -> Session | None:
        for session in self._sessions:
            if session.id == session_id:
                return session
        return None

    def _require(self, session_id: str) -> Session:
        session = self.get_session(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def create_session(self, first_user_text: str) -> str:
        """Create a session, put it first and make it active.

        Args:
            first_user_text: The submission that opens the session. Used for
                the title only; the caller appends the message itself.

        Returns:
            The new session id.
        """
        session = Session(title=derive_title(first_user_text, self._title_length))
        while session.id in self._issued_ids:
            session = Session(title=session.title)
        self._issued_ids.add(session.id)
        self._sessions.insert(0, session)
        self._active_session_id = session.id
        logger.info(f"Created session {session.id} ({session.title!r})")
        return session.id

    def append_message(self, session_id: str, message: Message) -> None:
        """Append a committed message to a session.

        Raises:
            SessionNotFoundError: If the session was deleted or never existed.
        """
        self._require(session_id).messages.append(message)

    def append_user_message(self, session_id: str, text: str) -> Message:
        message = Message.create(MessageRole.USER, text)
        self.append_message(session_id, message)
        return message

    def append_assistant_message(self, session_id: str, text: str) -> Message:
        message = Message.create(MessageRole.ASSISTANT, text)
        self.append_message(session_id, message)
        return message

    def replace_last_assistant_message(self, session_id: str, text: str) -> None:
        """Set the visible in-progress assistant text of a session.

        No message record is created; the caller commits one when the
        stream completes and then calls :meth:`clear_in_progress`.

        Raises:
            SessionNotFoundError: If the session no longer exists.
        """
        self._require(session_id)
        self._in_progress[session_id] = text

    def in_progress_text(self, session_id: str | None) -> str:
        if session_id is None:
            return ""
        return self._in_progress.get(session_id, "")

    def has_in_progress(self, session_id: str) -> bool:
        return session_id in self._in_progress

    def clear_in_progress(self, session_id: str) -> None:
        self._in_progress.pop(session_id, None)

    def delete_session(self, session_id: str) -> bool:
        """Remove a session. Clears the active pointer if it pointed there.

        Returns:
            True if a session was removed, False for an unknown id.
        """
        session = self.get_session(session_id)
        if session is None:
            return False

        self._sessions.remove(session)
        self._in_progress.pop(session_id, None)
        if self._active_session_id == session_id:
            self._active_session_id = None
        logger.info(f"Deleted session {session_id}")
        return True

    def set_active(self, session_id: str | None) -> None:
        """Select a session, or None for "no session yet".

        Raises:
            SessionNotFoundError: If the session does not exist.
        """
        if session_id is not None:
            self._require(session_id)
        self._active_session_id = session_id
