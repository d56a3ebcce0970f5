"""Frame-streaming chat endpoint.

Accepts the full role-tagged history of a session and streams the reply
as newline-delimited frames: one ``0:`` text frame per delta, then a
``d:`` finish frame.

Failures never arrive as a successful reply. A backend that fails before
its first delta is answered with 502 instead of a stream. A failure after
that aborts the response body, so the client sees a broken stream rather
than a finish frame.
"""

import logging
from collections.abc import AsyncGenerator, AsyncIterator

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse

from streamchat.agent.chat_agent import AgentService, get_agent_service
from streamchat.models.schemas import ChatCompletionRequest
from streamchat.streaming.frames import finish_frame, text_frame

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])

STREAM_MEDIA_TYPE = "text/plain; charset=utf-8"


def get_chat_service() -> AgentService:
    """Resolve the agent service for a request.

    Raises:
        HTTPException: 500 if the backend cannot be configured (e.g. no API key).
    """
    try:
        return get_agent_service()
    except ValueError as e:
        logger.error(f"Chat backend is not configured: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal Server Error",
        ) from e


async def _frame_stream(
    first_delta: str | None,
    replies: AsyncIterator[str],
) -> AsyncGenerator[str]:
    if first_delta is None:
        logger.info("Reply stream finished with no text")
        yield finish_frame("stop")
        return

    deltas = 1
    yield text_frame(first_delta)
    try:
        async for delta in replies:
            deltas += 1
            yield text_frame(delta)
    except Exception as e:
        logger.error(f"Reply stream failed after {deltas} deltas: {e}")
        raise

    logger.info(f"Reply stream finished ({deltas} deltas)")
    yield finish_frame("stop")


@router.post("/chat")
async def chat(
    request: ChatCompletionRequest,
    agent_service: AgentService = Depends(get_chat_service),
) -> StreamingResponse:
    """Stream a reply to the given conversation history.

    Args:
        request: Conversation history, oldest first.
        agent_service: Backend producing the reply.

    Returns:
        Streaming response of newline-delimited frames.

    Raises:
        422: Missing, empty or malformed history.
        500: Backend not configured.
        502: Backend failed before producing any text.
    """
    logger.info(f"Chat request with {len(request.messages)} messages")
    replies = agent_service.stream_reply(request.messages)
    try:
        first_delta = await anext(replies, None)
    except Exception as e:
        logger.error(f"Reply stream failed before the first delta: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Model backend error",
        ) from e

    return StreamingResponse(
        _frame_stream(first_delta, replies),
        media_type=STREAM_MEDIA_TYPE,
    )
