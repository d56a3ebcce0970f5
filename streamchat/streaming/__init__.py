"""Streaming transport for chat replies.

Responsibilities:
    - Decoding the line-framed delta protocol out of arbitrarily split chunks
    - Encoding the same protocol on the server side
    - Driving one cancellable request/response exchange per send

Contains no session state. Callers decide what to commit.
"""

from streamchat.streaming.config import ClientConfig, get_client_config
from streamchat.streaming.controller import StreamingRequestController
from streamchat.streaming.frames import FrameDecoder, adecode_frames, decode_frames

__all__ = [
    "ClientConfig",
    "FrameDecoder",
    "StreamingRequestController",
    "adecode_frames",
    "decode_frames",
    "get_client_config",
]
