"""Message schemas for the chat conversation log.

Defines the ChatMessage entries held by a Conversation and the request
body sent to the chat-completion edge function.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class Role(StrEnum):
    """Author of a message in the conversation log."""

    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    """A single entry in the conversation log."""

    role: Role = Field(description="Who wrote this message")
    content: str = Field(default="", description="Message text (grows while streaming)")


class ChatRequest(BaseModel):
    """JSON body for the chat-with-bot edge function.

    Field aliases match the camelCase keys the function expects. The
    ``chatbotId`` key is only sent when the session is bound to a
    stored chatbot.
    """

    model_config = ConfigDict(populate_by_name=True)

    messages: list[ChatMessage] = Field(
        description="Full conversation log, ending with the new user message"
    )
    system_prompt: str = Field(alias="systemPrompt", description="System prompt for the model")
    ai_provider: str = Field(alias="aiProvider", description="Provider/model identifier")
    chatbot_id: str | None = Field(
        default=None, alias="chatbotId", description="Stored chatbot id, if any"
    )

    def to_body(self) -> dict:
        """Serialize to the wire JSON shape."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
