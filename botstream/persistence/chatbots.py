"""Chatbot configuration lookup.

Reads a stored chatbot from the Supabase ``chatbots`` table and resolves
it into a ChatbotConfig for the embeddable widget.
"""

from __future__ import annotations

import logging

import httpx
from supabase import Client, PostgrestAPIError, create_client

from botstream.errors import ChatbotLookupError, ChatbotNotFoundError
from botstream.keys import ServiceSettings
from botstream.schemas.chatbot import ChatbotConfig

logger = logging.getLogger(__name__)

_TABLE = "chatbots"


def create_supabase_client(settings: ServiceSettings) -> Client:
    """Supabase client authenticated with the publishable key."""
    return create_client(settings.supabase_url, settings.supabase_publishable_key)


def fetch_chatbot_config(sb: Client, chatbot_id: str) -> ChatbotConfig:
    """Look up a chatbot by id.

    Raises:
        ChatbotNotFoundError: If no row has this id.
        ChatbotLookupError: If the query was rejected (e.g. an id that is
            not a UUID) or the service could not be reached.
    """
    try:
        result = (
            sb.table(_TABLE)
            .select("*")
            .eq("id", chatbot_id)
            .limit(1)
            .execute()
        )
    except PostgrestAPIError as e:
        logger.warning("Chatbot query rejected (%s): %s", e.code, e.message)
        raise ChatbotLookupError(chatbot_id, e.message or "query rejected") from e
    except httpx.HTTPError as e:
        logger.warning("Chatbot query failed: %s", e)
        raise ChatbotLookupError(chatbot_id, str(e) or type(e).__name__) from e

    if not result.data:
        raise ChatbotNotFoundError(chatbot_id)

    config = ChatbotConfig.from_row(result.data[0])
    logger.info("Loaded chatbot %s (%s)", chatbot_id, config.name)
    return config
