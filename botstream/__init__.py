"""botstream: streaming chat client for hosted chatbot widgets."""

__version__ = "0.2.0"

from .conversation import Conversation, ConversationState
from .session import ChatSession

__all__ = ["ChatSession", "Conversation", "ConversationState"]
