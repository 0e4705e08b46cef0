"""HTTP client for the chat-with-bot edge function.

Builds the request body from the conversation log and the session's
settings, and opens the streaming response. No retries: a failed request
surfaces as TransportError and retry policy is left to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx

from botstream.defaults import ChatDefaults
from botstream.errors import TransportError
from botstream.keys import ServiceSettings
from botstream.schemas.messages import ChatMessage, ChatRequest
from botstream.streaming.transport import TransportReader

logger = logging.getLogger(__name__)


def _short_error_reason(error: Exception) -> str:
    """Map an httpx failure to a short, log-friendly reason."""
    if isinstance(error, httpx.TimeoutException):
        return "timeout"
    if isinstance(error, httpx.ConnectError):
        return "connection error"
    if isinstance(error, httpx.RemoteProtocolError):
        return "connection dropped"
    return str(error)[:80] or type(error).__name__


class ChatClient:
    """Opens streaming chat requests against the hosted edge function.

    An ``httpx.AsyncClient`` may be injected (tests pass one backed by
    ``httpx.MockTransport``); otherwise a client is created per request
    and closed with it.
    """

    def __init__(
        self,
        settings: ServiceSettings,
        defaults: ChatDefaults | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings
        self._defaults = defaults or ChatDefaults()
        self._http = http_client

    @property
    def endpoint(self) -> str:
        return f"{self._settings.supabase_url.rstrip('/')}{self._defaults.function_path}"

    @property
    def defaults(self) -> ChatDefaults:
        return self._defaults

    def build_request(
        self,
        messages: list[ChatMessage],
        *,
        system_prompt: str | None = None,
        ai_provider: str | None = None,
        chatbot_id: str | None = None,
    ) -> ChatRequest:
        """Build the request body. Empty prompt/provider fall back to defaults."""
        return ChatRequest(
            messages=messages,
            system_prompt=system_prompt or self._defaults.system_prompt,
            ai_provider=ai_provider or self._defaults.ai_provider,
            chatbot_id=chatbot_id or None,
        )

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._settings.supabase_publishable_key}",
        }

    @asynccontextmanager
    async def open_stream(self, request: ChatRequest) -> AsyncIterator[TransportReader]:
        """POST the request and yield a reader over the streaming response.

        The response is released when the block exits, whether it
        finished, stopped early or raised.

        Raises:
            TransportError: If the request could not be sent or the
                connection failed.
        """
        owns_client = self._http is None
        client = self._http or httpx.AsyncClient(timeout=self._defaults.timeout)

        logger.info(
            "Sending chat request (%d messages, provider=%s)",
            len(request.messages), request.ai_provider,
        )
        try:
            async with client.stream(
                "POST",
                self.endpoint,
                json=request.to_body(),
                headers=self._headers(),
            ) as response:
                reader = TransportReader(response)
                try:
                    yield reader
                finally:
                    await reader.aclose()
        except httpx.HTTPError as e:
            logger.warning("Chat request failed (%s)", _short_error_reason(e))
            raise TransportError(f"Chat request failed: {e}") from e
        finally:
            if owns_client:
                await client.aclose()
