"""Test doubles for the chat transport and the agent backend."""

import asyncio
import json
from collections.abc import AsyncGenerator, Awaitable, Callable, Iterable, Sequence

import httpx

from streamchat.models.schemas import ChatMessage


class ScriptedStream:
    """Response body whose chunks are pushed by the test one at a time."""

    def __init__(self) -> None:
        self._queue: asyncio.Queue[bytes | Exception | None] = asyncio.Queue()

    def push(self, chunk: str) -> None:
        self._queue.put_nowait(chunk.encode("utf-8"))

    def fail(self, error: Exception) -> None:
        self._queue.put_nowait(error)

    def close(self) -> None:
        self._queue.put_nowait(None)

    async def body(self) -> AsyncGenerator[bytes]:
        while True:
            item = await self._queue.get()
            if item is None:
                return
            if isinstance(item, Exception):
                raise item
            yield item


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(
        self,
        handler: Callable[[httpx.Request], httpx.Response | Awaitable[httpx.Response]],
    ) -> None:
        self.requests: list[httpx.Request] = []

        def recording_handler(
            request: httpx.Request,
        ) -> httpx.Response | Awaitable[httpx.Response]:
            self.requests.append(request)
            return handler(request)

        super().__init__(recording_handler)

    def sent_messages(self, index: int = -1) -> list[dict[str, str]]:
        return json.loads(self.requests[index].content)["messages"]


def chunked_body(chunks: Iterable[str]) -> Callable[[], AsyncGenerator[bytes]]:
    async def body() -> AsyncGenerator[bytes]:
        for chunk in chunks:
            yield chunk.encode("utf-8")

    return body


def frames_transport(chunks: Sequence[str], status_code: int = 200) -> RecordingTransport:
    """Transport answering every request with the given body chunks."""
    body = chunked_body(chunks)
    return RecordingTransport(lambda request: httpx.Response(status_code, content=body()))


class ScriptedServer:
    """Serves each request from a fresh ScriptedStream the test drives."""

    def __init__(self) -> None:
        self.streams: list[ScriptedStream] = []
        self.transport = RecordingTransport(self._respond)

    def _respond(self, request: httpx.Request) -> httpx.Response:
        stream = ScriptedStream()
        self.streams.append(stream)
        return httpx.Response(200, content=stream.body())

    @property
    def latest(self) -> ScriptedStream:
        return self.streams[-1]


class StalledServer:
    """Accepts every request but holds the response until released."""

    def __init__(self) -> None:
        self.released = asyncio.Event()
        self.transport = RecordingTransport(self._respond)

    async def _respond(self, request: httpx.Request) -> httpx.Response:
        await self.released.wait()
        return httpx.Response(200, content=b'0:"too late"\n')


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    async with asyncio.timeout(timeout):
        while not predicate():
            await asyncio.sleep(0.01)


class FakeAgentService:
    """Stand-in for AgentService yielding scripted deltas."""

    def __init__(self, deltas: Sequence[str], fail_after: int | None = None) -> None:
        self.deltas = list(deltas)
        self.fail_after = fail_after
        self.calls: list[list[ChatMessage]] = []

    async def stream_reply(self, messages: Sequence[ChatMessage]) -> AsyncGenerator[str]:
        self.calls.append(list(messages))
        for index, delta in enumerate(self.deltas):
            if self.fail_after is not None and index >= self.fail_after:
                raise RuntimeError("model backend unavailable")
            yield delta
