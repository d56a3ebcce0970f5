"""FastAPI endpoints for the chat backend.

Endpoints:
    - GET /health: Service health status
    - POST /api/chat: Stream a reply to a conversation history as text frames
"""

from streamchat.api.app import app, create_app

__all__ = ["app", "create_app"]
