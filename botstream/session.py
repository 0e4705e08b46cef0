"""Reusable chat session shared by every front-end.

A ChatSession binds a Conversation to a ChatClient and to one chatbot's
settings (system prompt, provider, optional stored chatbot id, theme).
The standalone preview and the embeddable widget differ only in how they
construct it.
"""

from __future__ import annotations

import logging

from botstream.client import ChatClient
from botstream.conversation import Conversation
from botstream.errors import TransportError
from botstream.events import ConversationEventEmitter
from botstream.schemas.chatbot import ChatbotConfig, ThemeConfig
from botstream.schemas.messages import ChatMessage, Role
from botstream.streaming.stream_session import StreamSession

logger = logging.getLogger(__name__)


class ChatSession:
    """One chat widget's conversation and request settings."""

    def __init__(
        self,
        client: ChatClient,
        *,
        system_prompt: str | None = None,
        ai_provider: str | None = None,
        chatbot_id: str | None = None,
        name: str = "AI Assistant",
        theme: ThemeConfig | None = None,
        greeting: str | None = None,
        emitter: ConversationEventEmitter | None = None,
    ) -> None:
        self._client = client
        self.system_prompt = system_prompt
        self.ai_provider = ai_provider
        self.chatbot_id = chatbot_id
        self.name = name
        self.theme = theme or client.defaults.theme
        self._greeting = client.defaults.greeting if greeting is None else greeting
        self.conversation = Conversation(self._initial_messages(), emitter=emitter)

    @classmethod
    def from_chatbot(
        cls,
        client: ChatClient,
        chatbot_id: str,
        config: ChatbotConfig,
        *,
        emitter: ConversationEventEmitter | None = None,
    ) -> ChatSession:
        """Session for a stored chatbot; every request carries its id."""
        return cls(
            client,
            system_prompt=config.system_prompt,
            ai_provider=config.ai_provider,
            chatbot_id=chatbot_id,
            name=config.name or "AI Assistant",
            theme=config.theme_config,
            emitter=emitter,
        )

    def _initial_messages(self) -> list[ChatMessage]:
        if not self._greeting:
            return []
        return [ChatMessage(role=Role.ASSISTANT, content=self._greeting)]

    async def send(self, text: str) -> bool:
        """Submit ``text`` and stream the reply into the conversation.

        Transport failures end the exchange with the apology message.
        Input is re-enabled on every exit path, including cancellation.

        Returns:
            False if the input was ignored (blank, or a reply in flight).
        """
        if not await self.conversation.submit(text):
            return False

        request = self._client.build_request(
            self.conversation.messages,
            system_prompt=self.system_prompt,
            ai_provider=self.ai_provider,
            chatbot_id=self.chatbot_id,
        )

        try:
            async with self._client.open_stream(request) as reader:
                await StreamSession(reader).run(self.conversation)
        except TransportError as e:
            logger.warning("Chat stream failed: %s", e)
            await self.conversation.fail(e)
        else:
            await self.conversation.complete()
        finally:
            self.conversation.release()

        return True

    async def clear(self) -> None:
        """Reset the log back to the greeting."""
        await self.conversation.reset(self._initial_messages())
