"""Main Textual TUI application.

Orchestrates the UI components and handles user interaction with the
chat session.
"""

import asyncio
import contextlib

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Footer, Header

from ..actions import (
    ActionsRegistry,
    Clipboard,
    FallbackClipboard,
    HtmlSandbox,
    IframeSandbox,
    SystemClipboard,
    TerminalClipboard,
)
from ..conversation import ChatSession, StreamStatus
from ..errors import ClipboardError
from ..llm.base import LLMProvider
from .callbacks import TUICallback
from .config import COPY_REVERT_SECONDS, LogLevel
from .styles import APP_CSS
from .themes import PAGECHAT_MOCHA
from .widgets import (
    ChatHistoryWidget,
    ChatInputBar,
    DebugPanel,
    PromptSuggestions,
    StatusPanel,
)


class PageChatApp(App):
    """Textual TUI for streaming page-building chat."""

    CSS = APP_CSS
    TITLE = "PageChat"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("escape", "cancel_stream", "Cancel"),
        Binding("ctrl+k", "clear_chat", "Clear Chat"),
        Binding("ctrl+r", "copy_last_response", "Copy Response"),
        Binding("ctrl+d", "toggle_debug", "Debug"),
    ]

    def __init__(
        self,
        llm: LLMProvider,
        log_level: str | None = None,
        clipboard: Clipboard | None = None,
        sandbox: HtmlSandbox | None = None,
        prompts: list[str] | None = None,
        revert_delay: float = COPY_REVERT_SECONDS,
    ) -> None:
        super().__init__()
        self._llm = llm
        self._log_level = log_level
        self._session = ChatSession(llm)
        self._clipboard = clipboard or FallbackClipboard(SystemClipboard(), TerminalClipboard(self))
        self._owned_sandbox = IframeSandbox() if sandbox is None else None
        self._sandbox = sandbox or self._owned_sandbox
        self._prompts = prompts
        self._revert_delay = revert_delay
        self._callback: TUICallback | None = None

    @property
    def session(self) -> ChatSession:
        return self._session

    def _new_actions(self) -> ActionsRegistry:
        return ActionsRegistry(
            self._clipboard,
            sandbox=self._sandbox,
            revert_delay=self._revert_delay,
            debug_callback=self._callback.debug if self._callback else None,
        )

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield ChatHistoryWidget(
            id="chat-history",
            actions_factory=self._new_actions,
            prompts=self._prompts,
        )
        yield DebugPanel(id="debug-panel")
        with Vertical(id="bottom-bar"):
            yield StatusPanel(id="status")
            yield ChatInputBar(id="chat-input-bar")
        yield Footer()

    def on_mount(self) -> None:
        """Called when app is mounted."""
        self.register_theme(PAGECHAT_MOCHA)
        self.theme = "pagechat-mocha"

        log_panel = self.query_one("#debug-panel", DebugPanel)
        if self._log_level is not None:
            log_panel.log_level = LogLevel.from_string(self._log_level)
            log_panel.show()
            log_panel.info("TUI", f"Log panel enabled with level: {self._log_level.upper()}")

        self._callback = TUICallback(
            chat=self.query_one("#chat-history", ChatHistoryWidget),
            status=self.query_one("#status", StatusPanel),
            log_panel=log_panel,
        )
        self._session.set_update_callback(self._callback.on_update)
        self._session.set_finish_callback(self._callback.on_finish)
        self._session.set_debug_callback(self._callback.debug)

        self.sub_title = self._llm.model
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    def on_unmount(self) -> None:
        """Stop streaming and discard preview files."""
        self._session.cancel()
        if self._owned_sandbox is not None:
            self._owned_sandbox.cleanup()

    def on_prompt_suggestions_selected(self, event: PromptSuggestions.Selected) -> None:
        """Pre-fill the input with an example prompt."""
        input_bar = self.query_one("#chat-input-bar", ChatInputBar)
        input_bar.set_text(event.prompt)
        input_bar.focus_input()

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        """Handle user input submission."""
        if self._session.busy:
            self.notify("A response is still streaming", severity="warning", timeout=2)
            return
        self._stream_reply(event.value)

    @work(exclusive=True)
    async def _stream_reply(self, text: str) -> None:
        """Stream one reply as a background async worker."""
        input_bar = self.query_one("#chat-input-bar", ChatInputBar)
        log_panel = self.query_one("#debug-panel", DebugPanel)

        log_panel.info("TUI", f"Submitting: '{text[:50]}'")
        input_bar.set_busy(True)
        try:
            outcome = await self._session.submit(text)
            if outcome is None:
                return
            if outcome.status is StreamStatus.FAILED:
                log_panel.error("TUI", f"Stream failed: {outcome.error}")
                self.notify("The response failed", severity="error", timeout=3)
            elif outcome.status is StreamStatus.CANCELLED:
                self.notify("Cancelled", severity="warning", timeout=2)
        except asyncio.CancelledError:
            log_panel.warning("TUI", "Worker cancelled")
            raise
        except Exception as e:
            log_panel.error("TUI", f"Exception: {e}")
            self.notify(f"Error: {str(e)[:50]}", severity="error", timeout=5)
        finally:
            input_bar.set_busy(False)
            input_bar.focus_input()

    def action_cancel_stream(self) -> None:
        """Stop the streaming reply, keeping what has arrived."""
        if not self._session.cancel():
            self.notify("Nothing to cancel", timeout=2)

    def action_clear_chat(self) -> None:
        """Clear the conversation and return to the example prompts."""
        if not self._session.clear():
            self.notify("Wait for the response to finish", severity="warning", timeout=2)
            return
        self.query_one("#chat-history", ChatHistoryWidget).clear_history()
        if self._callback is not None:
            self._callback.reset()
        self.notify("Chat cleared", timeout=2)

    def action_toggle_debug(self) -> None:
        """Toggle the log panel visibility."""
        log_panel = self.query_one("#debug-panel", DebugPanel)
        is_visible = log_panel.toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=2)

    async def action_copy_last_response(self) -> None:
        """Copy last assistant response to clipboard."""
        chat = self.query_one("#chat-history", ChatHistoryWidget)
        response = chat.get_last_response()
        if not response:
            self.notify("No response to copy", severity="warning")
            return
        try:
            await self._clipboard.write_text(response)
        except ClipboardError as e:
            self.query_one("#debug-panel", DebugPanel).warning("TUI", str(e))
            self.notify("Clipboard unavailable", severity="warning")
            return
        self.notify("Response copied")


async def run_textual_tui(llm: LLMProvider, log_level: str | None = None) -> None:
    """Run the Textual TUI.

    Args:
        llm: LLM provider instance
        log_level: Log level for panel (debug/info/warning/error), None to hide
    """
    app = PageChatApp(llm=llm, log_level=log_level)
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
    finally:
        with contextlib.suppress(Exception):
            await llm.close()
