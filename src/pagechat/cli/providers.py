"""Provider factory functions for CLI.

Centralizes creation of the LLM backend from environment variables and
of the console debug sink. Hides configuration details from command
implementations.
"""

import os
from collections.abc import Callable

from rich.console import Console
from rich.text import Text

from ..llm import LLMProvider, create_llm_provider
from ..ui.config import LogLevel

# Default console for output
_console = Console()

_LEVEL_STYLES = {
    LogLevel.DEBUG: "dim",
    LogLevel.INFO: "cyan",
    LogLevel.WARNING: "yellow",
    LogLevel.ERROR: "red",
}


def get_llm(console: Console | None = None) -> LLMProvider | None:
    """Create LLM provider from environment variables.

    Args:
        console: Optional Rich console for output

    Returns:
        LLM provider instance, or None if not configured

    Environment variables:
        LLM_PROVIDER: Provider type (openai, deepseek, anthropic, gemini; default: deepseek)
        OPENAI_API_KEY: OpenAI API key (for openai provider)
        OPENAI_CHAT_MODEL: OpenAI model (default: gpt-4o-mini)
        DEEPSEEK_API_KEY: DeepSeek API key (for deepseek provider)
        ANTHROPIC_API_KEY: Anthropic API key (for anthropic provider)
        ANTHROPIC_MODEL: Anthropic model (default: claude-sonnet-4-20250514)
        GEMINI_API_KEY: Gemini API key (for gemini provider)
        GEMINI_MODEL: Gemini model (default: gemini-2.5-flash)
    """
    con = console or _console
    llm_provider = os.getenv("LLM_PROVIDER", "deepseek").lower()

    if llm_provider == "openai":
        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            con.print("[yellow]Warning: OPENAI_API_KEY not set[/yellow]")
            return None
        model = os.getenv("OPENAI_CHAT_MODEL", "gpt-4o-mini")
        return create_llm_provider("openai", api_key=api_key, model=model)

    elif llm_provider == "deepseek":
        api_key = os.getenv("DEEPSEEK_API_KEY")
        if not api_key:
            con.print("[yellow]Warning: DEEPSEEK_API_KEY not set[/yellow]")
            return None
        return create_llm_provider("deepseek", api_key=api_key)

    elif llm_provider in ("anthropic", "claude"):
        api_key = os.getenv("ANTHROPIC_API_KEY")
        if not api_key:
            con.print("[yellow]Warning: ANTHROPIC_API_KEY not set[/yellow]")
            return None
        model = os.getenv("ANTHROPIC_MODEL", "claude-sonnet-4-20250514")
        return create_llm_provider("anthropic", api_key=api_key, model=model)

    elif llm_provider == "gemini":
        api_key = os.getenv("GEMINI_API_KEY")
        if not api_key:
            con.print("[yellow]Warning: GEMINI_API_KEY not set[/yellow]")
            return None
        model = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
        return create_llm_provider("gemini", api_key=api_key, model=model)

    else:
        con.print(f"[red]Error: Unknown LLM provider: {llm_provider}[/red]")
        return None


def require_llm(console: Console | None = None) -> LLMProvider:
    """Get LLM provider, raising error if not configured.

    Args:
        console: Optional Rich console for output

    Returns:
        LLM provider instance

    Raises:
        typer.Exit: If LLM provider is not configured
    """
    import typer

    con = console or _console
    llm = get_llm(con)
    if not llm:
        con.print("[red]Error: LLM provider not configured[/red]")
        raise typer.Exit(code=1)
    return llm


def console_debug_callback(
    log_level: str | None, console: Console | None = None
) -> Callable[[str, str, str], None] | None:
    """Build a debug callback that prints to a console.

    Args:
        log_level: Minimum level to print (debug/info/warning/error), None to disable
        console: Console to print to (stderr by default)

    Returns:
        Callable(level, component, message), or None when disabled
    """
    if log_level is None:
        return None
    threshold = LogLevel.from_string(log_level)
    con = console or Console(stderr=True)

    def _callback(level: str, component: str, message: str) -> None:
        numeric = LogLevel.from_string(level)
        if numeric < threshold:
            return
        line = Text()
        line.append(f"{LogLevel.name(numeric):<5} ", style=_LEVEL_STYLES[numeric])
        line.append(f"[{component}] ", style="bold")
        line.append(message)
        con.print(line)

    return _callback
