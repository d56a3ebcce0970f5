"""Conversation orchestration: one submission end-to-end.

Ties the SessionStore to a StreamingRequestController per send:

1. Reject whitespace-only input without touching anything.
2. Create a session when none is active, otherwise reuse the active one.
3. Append the user message before the network call starts.
4. Send exactly the history the session shows at that moment.
5. Mirror deltas into the session's in-progress text, then reconcile the
   terminal outcome (commit reply, commit diagnostic, or commit nothing).
6. Clear in-progress state on every terminal outcome.

At most one controller runs per session. Different sessions may stream
at the same time.
"""

import logging
from collections.abc import Callable
from enum import Enum

import httpx

from streamchat.models.schemas import (
    ChatMessage,
    ConversationView,
    StreamResult,
    StreamStatus,
)
from streamchat.sessions.store import SessionNotFoundError, SessionStore
from streamchat.streaming.config import ClientConfig, get_client_config
from streamchat.streaming.controller import StreamingRequestController

logger = logging.getLogger(__name__)


class OrchestratorEvent(str, Enum):
    """Notifications delivered to view listeners."""

    SESSIONS_CHANGED = "sessions_changed"
    STREAM_UPDATED = "stream_updated"
    STREAM_FINISHED = "stream_finished"


Listener = Callable[[OrchestratorEvent], None]


class ConversationOrchestrator:
    """Top-level coordinator between user actions, sessions and streams.

    Args:
        store: Session store. A fresh in-memory store if not provided.
        config: Client configuration. Loads from environment if not provided.
        client: Optional shared HTTP client handed to every controller.
    """

    def __init__(
        self,
        store: SessionStore | None = None,
        config: ClientConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config or get_client_config()
        self._store = store or SessionStore(title_length=self._config.title_length)
        self._client = client
        self._controllers: dict[str, StreamingRequestController] = {}
        self._listeners: list[Listener] = []

    @property
    def store(self) -> SessionStore:
        return self._store

    @property
    def view(self) -> ConversationView:
        """Snapshot of everything the UI renders."""
        active_id = self._store.active_session_id
        return ConversationView(
            sessions=[session.model_copy(deep=True) for session in self._store.sessions],
            active_session_id=active_id,
            in_progress_text=self._store.in_progress_text(active_id),
            is_busy=self.is_busy(active_id),
        )

    def is_busy(self, session_id: str | None = None) -> bool:
        """Whether a session has a request in flight.

        Args:
            session_id: Session to check. None checks whether any stream runs.
        """
        if session_id is None:
            return bool(self._controllers)
        return session_id in self._controllers

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, event: OrchestratorEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(f"Listener failed on {event.value}")

    async def send_message(self, text: str) -> StreamResult | None:
        """Submit user text to the active session and stream the reply.

        Args:
            text: Raw user input.

        Returns:
            The terminal StreamResult, or None when the submission was
            rejected (blank input, or the session is already streaming).
        """
        text = text.strip()
        if not text:
            logger.debug("Ignoring blank submission")
            return None

        session_id = self._store.active_session_id
        if session_id is not None and self.is_busy(session_id):
            logger.warning(f"Session {session_id} is already streaming; submission rejected")
            return None

        if session_id is None:
            session_id = self._store.create_session(text)
        self._store.append_user_message(session_id, text)

        history = self._history(session_id)
        controller = StreamingRequestController(
            session_id,
            config=self._config,
            client=self._client,
            on_delta=lambda _delta, accumulated: self._on_delta(session_id, accumulated),
        )
        self._controllers[session_id] = controller
        self._store.replace_last_assistant_message(session_id, "")
        self._notify(OrchestratorEvent.SESSIONS_CHANGED)

        try:
            result = await controller.start(history).wait()
            self._commit(session_id, result)
            return result
        finally:
            self._controllers.pop(session_id, None)
            self._store.clear_in_progress(session_id)
            self._notify(OrchestratorEvent.STREAM_FINISHED)

    def _history(self, session_id: str) -> list[ChatMessage]:
        session = self._store.get_session(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return [ChatMessage.from_message(message) for message in session.messages]

    def _on_delta(self, session_id: str, accumulated: str) -> None:
        if self._store.get_session(session_id) is None:
            return
        self._store.replace_last_assistant_message(session_id, accumulated)
        self._notify(OrchestratorEvent.STREAM_UPDATED)

    def _commit(self, session_id: str, result: StreamResult) -> None:
        if result.status is StreamStatus.ABORTED:
            logger.info(f"Stream for session {session_id} aborted; nothing committed")
            return

        if result.status is StreamStatus.COMPLETED:
            content = result.text
        else:
            content = self._config.error_message
            if self._config.keep_partial_on_error and result.text:
                content = f"{result.text}\n\n{content}"

        try:
            self._store.append_assistant_message(session_id, content)
        except SessionNotFoundError:
            logger.info(f"Session {session_id} deleted before its reply arrived; dropping it")

    def cancel_current(self) -> bool:
        """Cancel the stream of the active session, if any."""
        session_id = self._store.active_session_id
        if session_id is None:
            return False
        return self._cancel(session_id)

    def cancel_all(self) -> None:
        """Cancel every in-flight stream, e.g. when the view goes away."""
        for session_id in list(self._controllers):
            self._cancel(session_id)

    def _cancel(self, session_id: str) -> bool:
        controller = self._controllers.get(session_id)
        if controller is None:
            return False
        controller.cancel()
        return True

    def new_session(self) -> None:
        """Start a fresh conversation on the next submission."""
        self.select_session(None)

    def select_session(self, session_id: str | None) -> None:
        """Switch the active session, cancelling the stream being left.

        Raises:
            SessionNotFoundError: If the session does not exist.
        """
        previous = self._store.active_session_id
        self._store.set_active(session_id)
        if previous is not None and previous != session_id:
            self._cancel(previous)
        self._notify(OrchestratorEvent.SESSIONS_CHANGED)

    def delete_session(self, session_id: str) -> bool:
        """Delete a session, cancelling its stream first."""
        self._cancel(session_id)
        deleted = self._store.delete_session(session_id)
        if deleted:
            self._notify(OrchestratorEvent.SESSIONS_CHANGED)
        return deleted
