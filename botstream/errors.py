class BotstreamError(Exception):
    """Base exception for all application-specific errors."""
    pass

class TransportError(BotstreamError):
    """Raised when the chat endpoint response is unusable, e.g. a non-2xx status or a dropped connection."""
    pass

class ConfigError(BotstreamError):
    """Raised when required service settings are missing."""
    pass

class ChatbotNotFoundError(BotstreamError):
    """Raised when no stored chatbot matches the requested id."""

    def __init__(self, chatbot_id: str) -> None:
        super().__init__(f"Chatbot not found: {chatbot_id}")
        self.chatbot_id = chatbot_id

class ChatbotLookupError(BotstreamError):
    """Raised when the chatbots table could not be queried for an id."""

    def __init__(self, chatbot_id: str, reason: str) -> None:
        super().__init__(f"Could not load chatbot {chatbot_id}: {reason}")
        self.chatbot_id = chatbot_id
        self.reason = reason
