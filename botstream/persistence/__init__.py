"""Hosted backend lookups for botstream."""

from botstream.persistence.chatbots import create_supabase_client, fetch_chatbot_config

__all__ = ["create_supabase_client", "fetch_chatbot_config"]
