"""Agno agent service producing streamed chat replies.

The chat client owns the conversation: every request carries the full
visible history of one session. The agent is therefore stateless. It
receives that history as Agno messages and streams back content strings
for the API layer to frame.
"""

import logging
from collections.abc import AsyncGenerator, Sequence
from datetime import date

from agno.agent import Agent
from agno.models.message import Message as AgnoMessage
from agno.models.openai import OpenAIChat

from streamchat.agent.config import AgentConfig, build_system_prompt, get_agent_config
from streamchat.models.schemas import ChatMessage

logger = logging.getLogger(__name__)


class AgentService:
    """Service for managing the Agno chat agent.

    Wraps Agno's Agent with:
    - OpenAI (or compatible) model configuration
    - History passed in per request rather than stored
    - Singleton lifecycle management
    - Clean streaming interface for the frame endpoint
    """

    def __init__(self, config: AgentConfig | None = None) -> None:
        """Initialize the agent service.

        Args:
            config: Optional agent configuration.
                    Loads from environment if not provided.
        """
        self._config = config or get_agent_config()
        self._agent = self._create_agent()

    def _create_agent(self) -> Agent:
        """Create the Agno agent instance.

        Returns:
            Configured Agent with an OpenAI chat model.
        """
        model = OpenAIChat(
            id=self._config.model_name,
            api_key=self._config.api_key,
            base_url=self._config.base_url,
            temperature=self._config.temperature,
            max_tokens=self._config.max_tokens,
        )

        return Agent(
            model=model,
            system_message=build_system_prompt(),
            # History arrives with each request.
            add_history_to_context=False,
            markdown=True,
        )

    async def stream_reply(
        self,
        messages: Sequence[ChatMessage],
    ) -> AsyncGenerator[str]:
        """Stream reply chunks for a conversation history.

        Args:
            messages: Role-tagged history, oldest first, ending with the
                user's latest message.

        Yields:
            Response text chunks as they arrive.

        Raises:
            Exception: Whatever the model backend raises; the caller decides
                how to report it.
        """
        self._agent.system_message = build_system_prompt(date.today())
        history = [AgnoMessage(role=m.role, content=m.content) for m in messages]

        logger.debug(f"Streaming reply for {len(history)} messages")
        response_stream = self._agent.arun(history, stream=True)

        async for chunk in response_stream:
            content = getattr(chunk, "content", None)
            if isinstance(content, str) and content:
                yield content


# Module-level singleton instance
_agent_service: AgentService | None = None


def get_agent_service() -> AgentService:
    """Get or create the global agent service.

    Uses singleton pattern for resource efficiency.

    Returns:
        The AgentService instance.

    Raises:
        ValidationError: If the agent cannot be configured (no API key).
    """
    global _agent_service
    if _agent_service is None:
        _agent_service = AgentService()
    return _agent_service
