"""Tests for botstream.streaming.stream_session - driving one response."""

from __future__ import annotations

import json

import httpx
import pytest

from botstream.conversation import Conversation, ConversationState
from botstream.streaming.stream_session import StreamSession
from botstream.streaming.transport import TransportReader


def _delta(text: str) -> bytes:
    return ("data: " + json.dumps({"choices": [{"delta": {"content": text}}]}) + "\n").encode()


def _make_reader(chunks: list[bytes]) -> TransportReader:
    async def body():
        for chunk in chunks:
            yield chunk

    return TransportReader(httpx.Response(200, content=body()))


async def _sending_conversation() -> Conversation:
    conv = Conversation()
    await conv.submit("Hi")
    return conv


class TestStreamSession:
    @pytest.mark.asyncio
    async def test_final_chunk(self):
        conv = await _sending_conversation()
        stream = StreamSession(_make_reader([_delta("Hel"), _delta("lo"), b"data: [DONE]\n"]))
        final = await stream.run(conv)

        assert final.is_complete is True
        assert final.accumulated == "Hello"
        assert final.fragment_count == 2
        assert stream.done is True
        assert stream.assistant_text == "Hello"
        assert conv.messages[conv.open_message_index].content == "Hello"

    @pytest.mark.asyncio
    async def test_placeholder_opened_on_first_read(self):
        conv = await _sending_conversation()
        await StreamSession(_make_reader([b": ping\n"])).run(conv)
        assert conv.state is ConversationState.STREAMING
        assert conv.open_message_index == 1
        assert conv.messages[1].content == ""

    @pytest.mark.asyncio
    async def test_assistant_text_only_grows(self):
        conv = await _sending_conversation()
        lengths: list[int] = []
        conv.emitter.add_listener(
            lambda e: lengths.append(len(e.content)) if e.type == "message_updated" else None
        )
        chunks = [_delta("a"), b"data: {oops\n", _delta("bc"), b"\n", _delta("def")]
        await StreamSession(_make_reader(chunks)).run(conv)
        assert lengths == sorted(lengths)
        assert lengths[-1] == 6

    @pytest.mark.asyncio
    async def test_terminator_stops_reading(self):
        reads = 0

        async def body():
            nonlocal reads
            for chunk in (_delta("x") + b"data: [DONE]\n", _delta("never")):
                reads += 1
                yield chunk

        conv = await _sending_conversation()
        stream = StreamSession(TransportReader(httpx.Response(200, content=body())))
        final = await stream.run(conv)
        assert final.accumulated == "x"
        assert reads == 1

    @pytest.mark.asyncio
    async def test_trailing_partial_line_discarded(self):
        conv = await _sending_conversation()
        stream = StreamSession(_make_reader([_delta("kept"), _delta("lost")[:-1]]))
        final = await stream.run(conv)
        assert final.accumulated == "kept"
        assert stream.framer.pending == ""
