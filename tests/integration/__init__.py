"""Integration tests for components working together as a system.

Coverage:
    - POST /api/chat over ASGITransport with a scripted agent backend
    - ConversationOrchestrator talking to the real endpoint

No live LLM calls are made.
"""
