"""Chat defaults loader.

Loads the default system prompt, provider, greeting, edge-function path
and widget theme from defaults.toml.
"""

from __future__ import annotations

import tomllib
from pathlib import Path

from pydantic import BaseModel, Field

from botstream.schemas.chatbot import ThemeConfig

# Default config directory relative to the botstream package
_CONFIG_DIR = Path(__file__).parent / "config"


class ChatDefaults(BaseModel):
    """Fallback values for a chat session."""

    system_prompt: str = Field(default="You are a helpful AI assistant.")
    ai_provider: str = Field(default="google/gemini-2.5-flash")
    greeting: str = Field(default="Hello! How can I help you today?")
    function_path: str = Field(default="/functions/v1/chat-with-bot")
    timeout: float = Field(default=60.0, gt=0, description="HTTP timeout in seconds")
    theme: ThemeConfig = Field(default_factory=ThemeConfig)


def load_chat_defaults(config_path: Path | None = None) -> ChatDefaults:
    """Load chat defaults from a TOML file.

    Args:
        config_path: Path to defaults.toml. Defaults to botstream/config/defaults.toml.

    Returns:
        ChatDefaults with values from the TOML file.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ValueError: If a section is not a table.
    """
    path = config_path or _CONFIG_DIR / "defaults.toml"
    if not path.exists():
        raise FileNotFoundError(f"Chat defaults not found: {path}")

    with open(path, "rb") as f:
        raw = tomllib.load(f)

    chat_section = raw.get("chat", {})
    theme_section = raw.get("theme", {})
    if not isinstance(chat_section, dict) or not isinstance(theme_section, dict):
        raise ValueError(f"[chat] and [theme] must be tables in {path}")

    return ChatDefaults(**chat_section, theme=ThemeConfig.model_validate(theme_section))
