"""Tests for botstream.streaming.accumulator: delta extraction."""

from __future__ import annotations

import pytest

from botstream.schemas.streaming import IGNORABLE, TERMINATOR, DecodedEvent, EventKind
from botstream.streaming.accumulator import DeltaAccumulator, extract_delta


def _data(payload) -> DecodedEvent:
    return DecodedEvent(kind=EventKind.DATA, payload=payload)


class TestExtractDelta:
    def test_content(self):
        assert extract_delta({"choices": [{"delta": {"content": "Hel"}}]}) == "Hel"

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"choices": []},
            {"choices": [{}]},
            {"choices": [{"delta": {}}]},
            {"choices": [{"delta": {"role": "assistant"}}]},
            {"choices": [{"delta": {"content": ""}}]},
            {"choices": [{"delta": {"content": None}}]},
            {"choices": [{"delta": {"content": 5}}]},
            {"choices": "abc"},
            {"choices": None},
            [1, 2],
            "text",
            42,
            None,
        ],
    )
    def test_no_fragment(self, payload):
        assert extract_delta(payload) is None


class TestDeltaAccumulator:
    def test_appends_in_order(self):
        acc = DeltaAccumulator()
        for piece in ("Hel", "lo", ", ", "world"):
            acc.feed(_data({"choices": [{"delta": {"content": piece}}]}))
        assert acc.text == "Hello, world"
        assert acc.fragment_count == 4

    def test_chunk_fields(self):
        acc = DeltaAccumulator()
        acc.feed(_data({"choices": [{"delta": {"content": "a"}}]}))
        chunk = acc.feed(_data({"choices": [{"delta": {"content": "b"}}]}))
        assert chunk.delta == "b"
        assert chunk.accumulated == "ab"
        assert chunk.fragment_count == 2
        assert chunk.is_complete is False

    def test_non_data_events_ignored(self):
        acc = DeltaAccumulator()
        assert acc.feed(IGNORABLE) is None
        assert acc.feed(TERMINATOR) is None
        assert acc.text == ""

    def test_payload_without_fragment_ignored(self):
        acc = DeltaAccumulator()
        assert acc.feed(_data({"choices": [{"finish_reason": "stop"}]})) is None
        assert acc.fragment_count == 0

    def test_finish(self):
        acc = DeltaAccumulator()
        acc.feed(_data({"choices": [{"delta": {"content": "done"}}]}))
        final = acc.finish()
        assert final.is_complete is True
        assert final.delta == ""
        assert final.accumulated == "done"
