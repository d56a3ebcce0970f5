"""Unit tests for individual components in isolation.

Coverage:
    - streaming/: Frame decoding and the request controller state machine
    - sessions/: Store transitions and orchestration outcomes
    - agent/: Agent configuration and reply streaming

HTTP is replaced by httpx MockTransport; the agno agent by mocks.
Leverages pytest-check for multiple assertions per test.
"""
