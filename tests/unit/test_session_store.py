"""Unit tests for SessionStore transitions."""

import pytest
import pytest_check as check
from pydantic import ValidationError

from streamchat.models.schemas import Message, MessageRole, derive_title
from streamchat.sessions.store import SessionNotFoundError, SessionStore


class TestDeriveTitle:
    """Tests for session title derivation."""

    def test_short_text_kept(self) -> None:
        assert derive_title("Hello there") == "Hello there"

    def test_exactly_thirty_characters_kept(self) -> None:
        text = "x" * 30
        assert derive_title(text) == text

    def test_long_text_ellipsized(self) -> None:
        """Longer text keeps its first 30 characters followed by '...'."""
        title = derive_title("Explain quantum computing in simple terms")
        assert title == "Explain quantum computing in s..."


class TestCreateSession:
    """Tests for session creation."""

    def test_create_sets_active_and_title(self) -> None:
        store = SessionStore()

        session_id = store.create_session("What can you help me with today, exactly?")

        session = store.get_session(session_id)
        check.is_not_none(session)
        check.equal(store.active_session_id, session_id)
        check.equal(session.title, "What can you help me with toda...")
        check.equal(session.messages, [])

    def test_newest_session_first(self) -> None:
        store = SessionStore()

        first = store.create_session("first")
        second = store.create_session("second")

        check.equal([s.id for s in store.sessions], [second, first])
        check.equal(store.active_session_id, second)

    def test_ids_are_unique(self) -> None:
        store = SessionStore()

        ids = {store.create_session(f"chat {i}") for i in range(50)}

        assert len(ids) == 50

    def test_title_is_fixed_at_creation(self) -> None:
        """Later messages never change the title."""
        store = SessionStore()
        session_id = store.create_session("Original question")

        store.append_user_message(session_id, "A completely different follow-up")

        assert store.get_session(session_id).title == "Original question"

    def test_custom_title_length(self) -> None:
        store = SessionStore(title_length=5)

        session_id = store.create_session("abcdefgh")

        assert store.get_session(session_id).title == "abcde..."


class TestMessages:
    """Tests for message append and in-progress text."""

    def test_messages_kept_in_insertion_order(self) -> None:
        store = SessionStore()
        session_id = store.create_session("q1")

        store.append_user_message(session_id, "q1")
        store.append_assistant_message(session_id, "a1")
        store.append_user_message(session_id, "q2")

        messages = store.get_session(session_id).messages
        check.equal([m.content for m in messages], ["q1", "a1", "q2"])
        check.equal(
            [m.role for m in messages],
            [MessageRole.USER, MessageRole.ASSISTANT, MessageRole.USER],
        )

    def test_append_to_missing_session_raises(self) -> None:
        store = SessionStore()

        with pytest.raises(SessionNotFoundError) as exc_info:
            store.append_message("session-missing", Message.create(MessageRole.USER, "hi"))

        assert exc_info.value.session_id == "session-missing"

    def test_messages_are_immutable(self) -> None:
        message = Message.create(MessageRole.ASSISTANT, "final")

        with pytest.raises(ValidationError):
            message.content = "changed"

    def test_in_progress_text_is_not_a_message(self) -> None:
        """Streaming text is visible per session without creating a message."""
        store = SessionStore()
        session_id = store.create_session("q")
        store.append_user_message(session_id, "q")

        store.replace_last_assistant_message(session_id, "Hel")
        store.replace_last_assistant_message(session_id, "Hello")

        check.equal(store.in_progress_text(session_id), "Hello")
        check.is_true(store.has_in_progress(session_id))
        check.equal(len(store.get_session(session_id).messages), 1)

        store.clear_in_progress(session_id)

        check.equal(store.in_progress_text(session_id), "")
        check.is_false(store.has_in_progress(session_id))

    def test_in_progress_for_missing_session_raises(self) -> None:
        store = SessionStore()

        with pytest.raises(SessionNotFoundError):
            store.replace_last_assistant_message("session-missing", "text")

    def test_in_progress_text_for_no_session(self) -> None:
        assert SessionStore().in_progress_text(None) == ""


class TestDeleteAndSelect:
    """Tests for deletion and the active-session pointer."""

    def test_delete_active_clears_pointer(self) -> None:
        store = SessionStore()
        session_id = store.create_session("q")
        store.replace_last_assistant_message(session_id, "partial")

        check.is_true(store.delete_session(session_id))

        check.is_none(store.active_session_id)
        check.is_none(store.get_session(session_id))
        check.equal(store.in_progress_text(session_id), "")

    def test_delete_inactive_keeps_pointer(self) -> None:
        store = SessionStore()
        first = store.create_session("first")
        second = store.create_session("second")

        store.delete_session(first)

        check.equal(store.active_session_id, second)
        check.equal([s.id for s in store.sessions], [second])

    def test_delete_unknown_returns_false(self) -> None:
        assert SessionStore().delete_session("session-missing") is False

    def test_set_active(self) -> None:
        store = SessionStore()
        first = store.create_session("first")
        store.create_session("second")

        store.set_active(first)
        check.equal(store.active_session.id, first)

        store.set_active(None)
        check.is_none(store.active_session)

    def test_set_active_unknown_raises(self) -> None:
        store = SessionStore()

        with pytest.raises(SessionNotFoundError):
            store.set_active("session-missing")

    def test_sessions_returns_copy(self) -> None:
        store = SessionStore()
        store.create_session("q")

        store.sessions.clear()

        assert len(store.sessions) == 1
