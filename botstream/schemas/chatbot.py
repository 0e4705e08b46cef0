"""Chatbot configuration schemas.

A ChatbotConfig is the resolved record for a stored chatbot: its name,
provider, system prompt and widget theme. The streaming core only ever
receives an already-resolved config.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class ThemeConfig(BaseModel):
    """Widget theme parameters, stored as camelCase JSON."""

    model_config = ConfigDict(populate_by_name=True)

    primary_color: str = Field(default="#8B5CF6", alias="primaryColor")
    secondary_color: str = Field(default="#A855F7", alias="secondaryColor")
    font_family: str = Field(default="font-sans", alias="fontFamily")
    border_radius: str = Field(default="lg", alias="borderRadius")
    bubble_style: str = Field(default="gradient", alias="bubbleStyle")

    @classmethod
    def from_column(cls, value: Any) -> ThemeConfig:
        """Parse a stored ``theme_config`` value.

        Only string entries are kept; anything else (nulls, numbers, a
        non-object column) falls back to the default for that field.
        """
        if value is None:
            return cls()
        if not isinstance(value, dict):
            logger.warning("Ignoring stored theme of type %s", type(value).__name__)
            return cls()

        kept = {key: item for key, item in value.items() if isinstance(item, str)}
        dropped = sorted(key for key, item in value.items() if item is not None and key not in kept)
        if dropped:
            logger.warning("Ignoring non-string theme entries: %s", ", ".join(dropped))
        return cls.model_validate(kept)


class ChatbotConfig(BaseModel):
    """A stored chatbot as read from the ``chatbots`` table."""

    name: str = Field(description="Display name of the chatbot")
    ai_provider: str = Field(default="", description="Provider/model identifier")
    system_prompt: str = Field(default="", description="System prompt for the model")
    theme_config: ThemeConfig = Field(default_factory=ThemeConfig)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> ChatbotConfig:
        """Build a config from a raw table row.

        A null or missing ``theme_config`` column falls back to the
        default theme.
        """
        return cls(
            name=row.get("name") or "",
            ai_provider=row.get("ai_provider") or "",
            system_prompt=row.get("system_prompt") or "",
            theme_config=ThemeConfig.from_column(row.get("theme_config")),
        )
