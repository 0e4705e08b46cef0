"""Rich rendering for the terminal chat widgets.

Renders the widget header, finished messages, and the assistant reply
while it streams (a Rich Live region fed by conversation events).
"""

from __future__ import annotations

from rich import box
from rich.console import Console, RenderableType
from rich.live import Live
from rich.markdown import Markdown
from rich.panel import Panel
from rich.text import Text

from botstream.conversation import ConversationState
from botstream.events import ConversationEvent, EventType
from botstream.schemas.chatbot import ThemeConfig
from botstream.schemas.messages import ChatMessage, Role

_TYPING = "…"


def _box_for(theme: ThemeConfig) -> box.Box:
    """Square corners for the small radii, rounded otherwise."""
    return box.SQUARE if theme.border_radius in ("none", "sm") else box.ROUNDED


def render_header(name: str, subtitle: str, theme: ThemeConfig) -> Panel:
    """Widget header in the theme's primary color."""
    title = Text(name, style=f"bold {theme.primary_color}")
    if subtitle:
        title.append(f"\n{subtitle}", style="dim")
    border = theme.secondary_color if theme.bubble_style == "gradient" else theme.primary_color
    return Panel(title, border_style=border, box=_box_for(theme), padding=(0, 1))


def render_reply(content: str, name: str, theme: ThemeConfig) -> Panel:
    """Assistant bubble. Empty content shows a typing marker."""
    body: RenderableType = Markdown(content) if content else Text(_TYPING, style="dim")
    return Panel(
        body,
        title=f"[{theme.primary_color}]{name}[/{theme.primary_color}]",
        title_align="left",
        border_style=theme.primary_color,
        box=_box_for(theme),
        padding=(0, 1),
    )


def render_message(message: ChatMessage, name: str, theme: ThemeConfig) -> RenderableType:
    """A finished message from the log."""
    if message.role is Role.ASSISTANT:
        return render_reply(message.content, name, theme)
    text = Text("You: ", style=f"bold {theme.secondary_color}")
    text.append(message.content)
    return text


class ReplyView:
    """Live region showing the assistant reply while it streams.

    Register ``on_event`` as a conversation listener. The region opens
    when an assistant message is appended, redraws on each update, and
    closes (leaving the final bubble on screen) when the conversation
    returns to IDLE.
    """

    def __init__(self, console: Console, name: str, theme: ThemeConfig) -> None:
        self._console = console
        self._name = name
        self._theme = theme
        self._live: Live | None = None

    def on_event(self, event: ConversationEvent) -> None:
        if event.type is EventType.MESSAGE_APPENDED:
            if event.role is Role.ASSISTANT:
                self._show(event.content or "")
        elif event.type is EventType.MESSAGE_UPDATED:
            self._show(event.content or "")
        elif event.type is EventType.STATE_CHANGED:
            if event.state == ConversationState.IDLE:
                self.stop()

    def _show(self, content: str) -> None:
        renderable = render_reply(content, self._name, self._theme)
        if self._live is None:
            self._live = Live(
                renderable,
                console=self._console,
                refresh_per_second=12,
                vertical_overflow="visible",
            )
            self._live.start()
        else:
            self._live.update(renderable)

    def stop(self) -> None:
        """Stop the Live region, leaving the last render in place."""
        if self._live:
            self._live.stop()
            self._live = None
