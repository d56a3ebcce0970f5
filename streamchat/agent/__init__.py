"""Agno agent backing the chat endpoint.

Responsibilities:
    - Agent initialization with OpenAI models
    - Turning a role-tagged history into a stream of reply text

The client sends the full history with every request, so the agent keeps
no conversation storage of its own.
"""

from streamchat.agent.chat_agent import AgentService, get_agent_service
from streamchat.agent.config import AgentConfig, build_system_prompt, get_agent_config

__all__ = [
    "AgentConfig",
    "AgentService",
    "build_system_prompt",
    "get_agent_config",
    "get_agent_service",
]
