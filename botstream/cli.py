"""botstream CLI: Typer + Rich terminal chat widgets.

Commands: preview, embed, setup.
Both chat commands drive the same ChatSession; `embed` first resolves the
stored chatbot's configuration from Supabase.
"""

from __future__ import annotations

import asyncio
import logging
import os

import typer
from rich.console import Console
from rich.logging import RichHandler

from botstream import __version__
from botstream.cli_display import ReplyView, render_header, render_message
from botstream.client import ChatClient
from botstream.defaults import ChatDefaults, load_chat_defaults
from botstream.errors import ChatbotLookupError, ChatbotNotFoundError, ConfigError
from botstream.keys import KEYS_FILE, SETTINGS, ServiceSettings, clear_keys, get_settings, save_keys
from botstream.persistence.chatbots import create_supabase_client, fetch_chatbot_config
from botstream.session import ChatSession

console = Console()

_EXIT_COMMANDS = {"/exit", "/quit"}
_CLEAR_COMMAND = "/clear"

app = typer.Typer(
    name="botstream",
    help="Chat with a hosted chatbot, streaming replies token by token.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ───────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"botstream {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v",
        help="Log stream diagnostics to stderr.",
    ),
) -> None:
    """botstream: streaming chat widgets in the terminal."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


# ── Helpers ──────────────────────────────────────────────────────


def _load_settings() -> ServiceSettings:
    """Load service settings, exit on error."""
    try:
        return get_settings()
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None


def _load_defaults() -> ChatDefaults:
    """Load chat defaults, exit on error."""
    try:
        return load_chat_defaults()
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error loading defaults:[/red] {e}")
        raise typer.Exit(1) from None


def _build_client(settings: ServiceSettings | None = None) -> ChatClient:
    return ChatClient(settings or _load_settings(), _load_defaults())


def _chat_loop(session: ChatSession, view: ReplyView) -> None:
    """Read user input and stream replies until /exit or EOF.

    Input is read outside the event loop; each send runs to completion
    on the runner's loop before the next prompt is shown.
    """
    prompt = f"[bold {session.theme.secondary_color}]You ›[/] "
    with asyncio.Runner() as runner:
        while True:
            try:
                text = console.input(prompt)
            except EOFError:
                console.print()
                return

            command = text.strip().lower()
            if command in _EXIT_COMMANDS:
                return
            if command == _CLEAR_COMMAND:
                runner.run(session.clear())
                console.print("[dim]Conversation cleared.[/dim]")
                continue

            try:
                runner.run(session.send(text))
            finally:
                view.stop()


def _run_chat(session: ChatSession, subtitle: str) -> None:
    console.print(render_header(session.name, subtitle, session.theme))
    for message in session.conversation.messages:
        console.print(render_message(message, session.name, session.theme))

    view = ReplyView(console, session.name, session.theme)
    unsubscribe = session.conversation.emitter.add_listener(view.on_event)
    try:
        _chat_loop(session, view)
    except KeyboardInterrupt:
        console.print("\n[dim]Bye.[/dim]")
    finally:
        unsubscribe()
        view.stop()


# ── Commands ─────────────────────────────────────────────────────


@app.command()
def preview(
    system_prompt: str = typer.Option(
        "", "--system-prompt", "-s",
        help="System prompt (defaults to a generic assistant prompt).",
    ),
    provider: str = typer.Option(
        "", "--provider", "-p",
        help="Provider/model identifier, e.g. google/gemini-2.5-flash.",
    ),
) -> None:
    """Try out a system prompt and provider before saving a chatbot."""
    session = ChatSession(
        _build_client(),
        system_prompt=system_prompt or None,
        ai_provider=provider or None,
    )
    _run_chat(session, "Test your chatbot here")


@app.command()
def embed(
    chatbot_id: str = typer.Argument(..., help="Id of a stored chatbot."),
) -> None:
    """Chat with a stored chatbot, exactly as the embedded widget does."""
    settings = _load_settings()
    try:
        config = fetch_chatbot_config(create_supabase_client(settings), chatbot_id)
    except (ChatbotNotFoundError, ChatbotLookupError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None

    session = ChatSession.from_chatbot(_build_client(settings), chatbot_id, config)
    _run_chat(session, "Online")


@app.command()
def setup(
    reset: bool = typer.Option(
        False, "--reset",
        help="Clear saved settings before prompting.",
    ),
) -> None:
    """Save the Supabase URL and publishable key to ~/.botstream/keys.env."""
    from rich.prompt import Prompt

    if reset:
        if clear_keys():
            console.print(f"[dim]Cleared {KEYS_FILE}[/dim]\n")
        else:
            console.print("[dim]No saved settings to clear.[/dim]\n")
        for env_var, _, _ in SETTINGS:
            os.environ.pop(env_var, None)

    collected: dict[str, str] = {}
    for env_var, display_name, description in SETTINGS:
        existing = os.environ.get(env_var, "")
        value = Prompt.ask(
            f"  {display_name} [dim]({description})[/dim]",
            default=existing or None,
            console=console,
        )
        collected[env_var] = (value or "").strip()

    if not all(collected.values()):
        console.print("[red]Both the URL and the publishable key are required.[/red]")
        raise typer.Exit(1)

    path = save_keys(collected)
    console.print(f"[green]✓[/green] Saved to {path}")
