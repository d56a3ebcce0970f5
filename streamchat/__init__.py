"""streamchat - streaming conversational client for completion endpoints.

Sends the role-tagged history of a conversation thread to a completion
endpoint and renders the reply as it arrives.

Components:
    - streaming: line-framed delta protocol and per-request stream controller
    - sessions: conversation threads, message history and orchestration
    - agent: LLM backend that produces the streamed reply
    - api: HTTP endpoint emitting the framed stream
    - ui: Web interface for chat interactions
    - models: Shared data models
"""

__version__ = "0.1.0"
