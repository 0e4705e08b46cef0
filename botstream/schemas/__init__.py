"""botstream schema definitions.

All Pydantic v2 models used by the streaming core and its front-ends.
"""

from botstream.schemas.chatbot import ChatbotConfig, ThemeConfig
from botstream.schemas.messages import ChatMessage, ChatRequest, Role
from botstream.schemas.streaming import (
    IGNORABLE,
    TERMINATOR,
    DecodedEvent,
    EventKind,
    StreamChunk,
)

__all__ = [
    "IGNORABLE",
    "TERMINATOR",
    "ChatMessage",
    "ChatRequest",
    "ChatbotConfig",
    "DecodedEvent",
    "EventKind",
    "Role",
    "StreamChunk",
    "ThemeConfig",
]
