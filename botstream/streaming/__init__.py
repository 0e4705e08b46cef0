"""Streaming response pipeline.

Transport reader -> line framer -> event decoder -> delta accumulator.
StreamSession drives the pipeline for one request and applies each
fragment to a Conversation.
"""

from botstream.streaming.accumulator import DeltaAccumulator, extract_delta
from botstream.streaming.decoder import DATA_PREFIX, DONE_SENTINEL, decode_line
from botstream.streaming.framer import LineFramer
from botstream.streaming.stream_session import StreamSession
from botstream.streaming.transport import ReadResult, TransportReader

__all__ = [
    "DATA_PREFIX",
    "DONE_SENTINEL",
    "DeltaAccumulator",
    "LineFramer",
    "ReadResult",
    "StreamSession",
    "TransportReader",
    "decode_line",
    "extract_delta",
]
