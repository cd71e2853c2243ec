"""Main CLI application using Typer."""
import asyncio

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.live import Live
from rich.table import Table

from ..conversation import ChatSession, Message, StreamOutcome, StreamStatus
from ..prompts import get_example_prompts
from ..render import MarkdownRenderer, render_blocks
from .providers import console_debug_callback, require_llm

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="pagechat",
    help="Streaming chat that renders markdown answers and previews generated pages",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()

_LOG_LEVEL_HELP = "Print diagnostics with level: debug (all), info, warning, or error"


def _print_outcome(outcome: StreamOutcome) -> None:
    usage = outcome.usage or {}
    tokens = f", {usage.get('total_tokens', 0):,} tokens" if usage else ""
    console.print(
        f"[dim]{outcome.status.value}: {outcome.fragments} fragments, "
        f"{outcome.characters:,} chars in {outcome.elapsed:.2f}s{tokens}[/dim]"
    )


async def _stream_turn(session: ChatSession, renderer: MarkdownRenderer, prompt: str) -> StreamOutcome | None:
    """Submit a prompt and re-render the growing answer in place."""
    with Live(console=console, refresh_per_second=12, vertical_overflow="visible") as live:
        def on_update(slot: int, message: Message) -> None:
            if message.role == "assistant":
                live.update(render_blocks(renderer.parse(message.content)))

        session.set_update_callback(on_update)
        try:
            return await session.submit(prompt)
        finally:
            session.set_update_callback(None)


@app.command()
def ask(
    prompt: str = typer.Argument(..., help="Prompt to send"),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help=_LOG_LEVEL_HELP
    ),
):
    """Stream one answer and render it live as markdown."""
    async def _ask():
        llm = require_llm(console)
        session = ChatSession(llm)
        session.set_debug_callback(console_debug_callback(log_level))
        try:
            outcome = await _stream_turn(session, MarkdownRenderer(), prompt)
        finally:
            await llm.close()

        if outcome is None:
            console.print("[yellow]Nothing to send.[/yellow]")
            raise typer.Exit(code=1)
        _print_outcome(outcome)
        if outcome.status is StreamStatus.FAILED:
            raise typer.Exit(code=1)

    asyncio.run(_ask())


@app.command()
def chat(
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help=_LOG_LEVEL_HELP
    ),
):
    """Interactive console chat with live markdown rendering."""
    async def _chat():
        llm = require_llm(console)
        session = ChatSession(llm)
        session.set_debug_callback(console_debug_callback(log_level))
        renderer = MarkdownRenderer()

        console.print(f"[bold cyan]PageChat[/bold cyan] [dim]({llm.model})[/dim]")
        console.print("[dim]Type 'exit', 'quit', or 'q' to leave, '/clear' to start over[/dim]\n")

        try:
            while True:
                try:
                    user_input = console.input("[bold yellow]You:[/bold yellow] ")
                except (KeyboardInterrupt, EOFError):
                    console.print("\n[dim]Goodbye![/dim]")
                    break

                if not user_input.strip():
                    continue
                if user_input.strip().lower() in ('exit', 'quit', 'q'):
                    console.print("[dim]Goodbye![/dim]")
                    break
                if user_input.strip() == "/clear":
                    session.clear()
                    console.print("[dim]Conversation cleared.[/dim]\n")
                    continue

                outcome = await _stream_turn(session, renderer, user_input)
                if outcome is not None:
                    _print_outcome(outcome)
                console.print()
        finally:
            await llm.close()

    asyncio.run(_chat())


@app.command(name="tui")
def tui_command(
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show log panel with level: debug (all), info, warning, or error"
    ),
):
    """Launch interactive TUI chat interface."""
    async def _tui():
        from ..ui import run_textual_tui

        llm = require_llm(console)
        await run_textual_tui(llm=llm, log_level=log_level)

    asyncio.run(_tui())


@app.command()
def prompts():
    """List the example prompts offered on the landing view."""
    table = Table(title="Example prompts", show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Prompt")
    for index, prompt in enumerate(get_example_prompts(), start=1):
        table.add_row(str(index), prompt)
    console.print(table)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
