"""Single request lifecycle against the frame-streaming chat endpoint.

A controller issues one POST with the role-tagged history, feeds each
arriving body chunk through a FrameDecoder, accumulates the decoded text
and reports exactly one terminal outcome:

    idle -> sending -> streaming -> completed | errored | aborted

Committing anything to a session is left to the caller.
"""

import asyncio
import logging
from collections.abc import Callable, Sequence

import httpx

from streamchat.models.schemas import (
    ChatCompletionRequest,
    ChatMessage,
    StreamResult,
    StreamState,
    StreamStatus,
)
from streamchat.streaming.config import ClientConfig, get_client_config
from streamchat.streaming.frames import FrameDecoder

logger = logging.getLogger(__name__)

DeltaCallback = Callable[[str, str], None]
TerminalCallback = Callable[[StreamResult], None]


class StreamingRequestController:
    """Owns one request from submission to terminal state.

    Args:
        session_id: Session the exchange belongs to.
        config: Client configuration. Loads from environment if not provided.
        client: Shared HTTP client. A client is opened per request otherwise.
        on_delta: Called with (delta, accumulated_text) for every decoded delta.
        on_terminal: Called once with the terminal StreamResult.
    """

    def __init__(
        self,
        session_id: str,
        config: ClientConfig | None = None,
        client: httpx.AsyncClient | None = None,
        on_delta: DeltaCallback | None = None,
        on_terminal: TerminalCallback | None = None,
    ) -> None:
        self._config = config or get_client_config()
        self._client = client
        self._on_delta = on_delta
        self._on_terminal = on_terminal
        self._state = StreamState(session_id=session_id)
        self._decoder = FrameDecoder()
        self._cancel_requested = False
        self._task: asyncio.Task[StreamResult] | None = None
        self._result: StreamResult | None = None

    @property
    def session_id(self) -> str:
        return self._state.session_id

    @property
    def status(self) -> StreamStatus:
        return self._state.status

    @property
    def accumulated_text(self) -> str:
        return self._state.accumulated_text

    @property
    def state(self) -> StreamState:
        return self._state.model_copy()

    @property
    def result(self) -> StreamResult | None:
        return self._result

    @property
    def is_active(self) -> bool:
        return self._task is not None and not self._state.status.is_terminal

    def start(self, messages: Sequence[ChatMessage]) -> "StreamingRequestController":
        """Schedule the exchange on the running event loop.

        Args:
            messages: Role-tagged history, oldest first.

        Returns:
            This controller, usable as the cancellable handle.

        Raises:
            RuntimeError: If the controller was already started.
        """
        if self._task is not None or self._state.status is not StreamStatus.IDLE:
            raise RuntimeError("Controller already started")
        self._task = asyncio.create_task(
            self.run(messages), name=f"chat-stream-{self.session_id}"
        )
        return self

    async def wait(self) -> StreamResult:
        """Wait for the terminal outcome of a started exchange."""
        if self._task is None:
            raise RuntimeError("Controller not started")
        try:
            return await self._task
        except asyncio.CancelledError:
            # Cancelled before the task got to run its first step.
            if self._cancel_requested and self._task.cancelled():
                return self._finish(StreamResult.aborted(self._state.accumulated_text))
            raise

    def cancel(self) -> None:
        """Request cancellation.

        The read loop stops before waiting for the next chunk. Accumulated
        text is kept on the Aborted result but never committed here.
        """
        if self._state.status.is_terminal or self._cancel_requested:
            return
        logger.info(f"Cancelling stream for session {self.session_id}")
        self._cancel_requested = True
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def run(self, messages: Sequence[ChatMessage]) -> StreamResult:
        """Perform the exchange and return its terminal outcome."""
        if self._state.status is not StreamStatus.IDLE:
            raise RuntimeError("Controller already started")

        payload = ChatCompletionRequest(messages=list(messages))
        self._state.status = StreamStatus.SENDING
        logger.info(
            f"Sending {len(payload.messages)} messages for session {self.session_id}"
        )

        try:
            if self._client is not None:
                result = await self._exchange(self._client, payload)
            else:
                async with httpx.AsyncClient(timeout=self._config.timeout) as client:
                    result = await self._exchange(client, payload)
        except asyncio.CancelledError:
            self._finish(StreamResult.aborted(self._state.accumulated_text))
            if not self._cancel_requested:
                raise
            return self._result
        except httpx.HTTPStatusError as e:
            result = StreamResult.errored(
                f"HTTP {e.response.status_code}", self._state.accumulated_text
            )
        except httpx.RequestError as e:
            result = StreamResult.errored(
                f"Connection failed: {e}", self._state.accumulated_text
            )
        except Exception as e:
            logger.exception(f"Unexpected failure while streaming session {self.session_id}")
            result = StreamResult.errored(str(e) or type(e).__name__, self._state.accumulated_text)

        return self._finish(result)

    async def _exchange(
        self, client: httpx.AsyncClient, payload: ChatCompletionRequest
    ) -> StreamResult:
        async with client.stream(
            "POST",
            self._config.chat_url,
            json=payload.model_dump(mode="json"),
            headers={"Accept": "text/plain"},
        ) as response:
            response.raise_for_status()
            async for chunk in response.aiter_text():
                if self._state.status is StreamStatus.SENDING:
                    self._state.status = StreamStatus.STREAMING
                for delta in self._decoder.decode(chunk):
                    self._append(delta)
                if self._cancel_requested:
                    break

        self._decoder.finish()
        if self._cancel_requested:
            return StreamResult.aborted(self._state.accumulated_text)
        # Empty body: the channel opened but carried no chunks.
        self._state.status = StreamStatus.STREAMING
        return StreamResult.completed(self._state.accumulated_text)

    def _append(self, delta: str) -> None:
        self._state.accumulated_text += delta
        if self._on_delta is not None:
            self._on_delta(delta, self._state.accumulated_text)

    def _finish(self, result: StreamResult) -> StreamResult:
        if self._result is not None:
            return self._result

        self._result = result
        self._state.status = result.status
        if result.status is StreamStatus.ERRORED:
            logger.warning(f"Stream for session {self.session_id} failed: {result.error}")
        else:
            logger.info(
                f"Stream for session {self.session_id} {result.status.value} "
                f"({len(result.text)} chars)"
            )
        if self._on_terminal is not None:
            self._on_terminal(result)
        return result
