"""Callback interface for ChatSession integration.

Hides the details of how the TUI receives updates from the session.
The session runs on Textual's own event loop, so widgets are updated
directly.
"""

from typing import TYPE_CHECKING

from ..conversation import Message, StreamOutcome
from .config import LogLevel

if TYPE_CHECKING:
    from .widgets import ChatHistoryWidget, DebugPanel, StatusPanel


class TUICallback:
    """Routes session updates, outcomes and debug messages to widgets."""

    _LEVELS = {
        "debug": LogLevel.DEBUG,
        "info": LogLevel.INFO,
        "warning": LogLevel.WARNING,
        "error": LogLevel.ERROR,
    }

    def __init__(
        self,
        chat: "ChatHistoryWidget",
        status: "StatusPanel",
        log_panel: "DebugPanel",
    ) -> None:
        self.chat = chat
        self.status = status
        self.log_panel = log_panel
        self._streaming_slot: int | None = None
        self._fragments = 0

    def on_update(self, slot: int, message: Message) -> None:
        """Show the current content of a conversation slot."""
        self.chat.show_message(slot, message.role, message.content)
        if message.role != "assistant":
            return
        if slot != self._streaming_slot:
            self._streaming_slot = slot
            self._fragments = 0
            self.status.start_turn()
        elif message.content:
            self._fragments += 1
        self.status.update_progress(self._fragments, len(message.content))

    def on_finish(self, outcome: StreamOutcome) -> None:
        """Settle the streamed message and show the outcome."""
        self.chat.set_streaming(outcome.slot, False)
        self.status.finish_turn(outcome)
        self._streaming_slot = None

    def debug(self, level: str, component: str, message: str) -> None:
        """Route debug messages to the log panel."""
        self.log_panel.log(component, message, self._LEVELS.get(level, LogLevel.DEBUG))

    def reset(self) -> None:
        self._streaming_slot = None
        self._fragments = 0
        self.status.reset()
