"""Tests for botstream.schemas."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from botstream.schemas.chatbot import ChatbotConfig, ThemeConfig
from botstream.schemas.messages import ChatMessage, ChatRequest, Role
from botstream.schemas.streaming import IGNORABLE, DecodedEvent, EventKind, StreamChunk


class TestChatMessage:
    def test_roles(self):
        assert ChatMessage(role="user", content="x").role is Role.USER
        with pytest.raises(ValidationError):
            ChatMessage(role="system", content="x")

    def test_default_content(self):
        assert ChatMessage(role=Role.ASSISTANT).content == ""


class TestChatRequest:
    def test_populate_by_field_name(self):
        request = ChatRequest(messages=[], system_prompt="s", ai_provider="p")
        assert request.to_body() == {"messages": [], "systemPrompt": "s", "aiProvider": "p"}

    def test_populate_by_alias(self):
        request = ChatRequest(messages=[], systemPrompt="s", aiProvider="p", chatbotId="c")
        assert request.chatbot_id == "c"


class TestStreamChunk:
    def test_basic(self):
        chunk = StreamChunk(delta="hello", accumulated="hello", fragment_count=1)
        assert chunk.is_complete is False

    def test_fragment_count_non_negative(self):
        with pytest.raises(ValidationError):
            StreamChunk(delta="x", accumulated="x", fragment_count=-1)


class TestDecodedEvent:
    def test_frozen(self):
        with pytest.raises(ValidationError):
            IGNORABLE.kind = EventKind.DATA

    def test_payload_default(self):
        assert DecodedEvent(kind=EventKind.TERMINATOR).payload is None


class TestThemeConfig:
    def test_camel_case_round_trip(self):
        theme = ThemeConfig.model_validate({"primaryColor": "#fff"})
        assert theme.primary_color == "#fff"
        assert theme.model_dump(by_alias=True)["primaryColor"] == "#fff"

    def test_null_entries_use_defaults(self):
        theme = ThemeConfig.from_column({"primaryColor": None, "bubbleStyle": "solid"})
        assert theme.primary_color == "#8B5CF6"
        assert theme.bubble_style == "solid"

    def test_non_string_entries_use_defaults(self):
        theme = ThemeConfig.from_column({"borderRadius": 12, "fontFamily": "font-serif"})
        assert theme.border_radius == "lg"
        assert theme.font_family == "font-serif"

    @pytest.mark.parametrize("column", [None, [], "dark", 7])
    def test_non_object_column_uses_default(self, column):
        assert ThemeConfig.from_column(column) == ThemeConfig()


class TestChatbotConfig:
    def test_from_row_with_unusable_theme(self):
        config = ChatbotConfig.from_row({"name": "b", "theme_config": {"primaryColor": None}})
        assert config.name == "b"
        assert config.theme_config == ThemeConfig()

    def test_from_row_with_list_theme(self):
        config = ChatbotConfig.from_row({"name": "b", "theme_config": ["#000"]})
        assert config.theme_config.secondary_color == "#A855F7"
