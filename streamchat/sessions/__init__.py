"""Conversation sessions and their orchestration.

Responsibilities:
    - Ordered collection of independent conversation threads
    - Active-session pointer and per-session in-progress text
    - Driving one streamed exchange per submission and committing its outcome

Session state is process-lifetime only.
"""

from streamchat.sessions.orchestrator import ConversationOrchestrator, OrchestratorEvent
from streamchat.sessions.store import SessionNotFoundError, SessionStore

__all__ = [
    "ConversationOrchestrator",
    "OrchestratorEvent",
    "SessionNotFoundError",
    "SessionStore",
]
