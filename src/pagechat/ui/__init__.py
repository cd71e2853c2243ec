"""Terminal UI module for pagechat.

Provides a Textual-based TUI for streaming chat.

Module structure (each module hides a design decision):
- widgets.py: Custom widgets (message views, code block controls, input, status, log)
- styles.py: CSS styling (layout decisions)
- themes.py: Color palette and theme configuration
- screens.py: Modal dialogs (HTML preview)
- callbacks.py: Session integration (how TUI receives updates)
- app.py: Application orchestration (user interaction flow)
"""

from .app import PageChatApp, run_textual_tui
from .callbacks import TUICallback
from .config import LogLevel
from .screens import PreviewScreen
from .widgets import (
    AssistantMessage,
    ChatHistoryWidget,
    ChatInputBar,
    CodeActionBar,
    DebugPanel,
    PromptSuggestions,
    StatusPanel,
    UserMessage,
)

__all__ = [
    "AssistantMessage",
    "ChatHistoryWidget",
    "ChatInputBar",
    "CodeActionBar",
    "DebugPanel",
    "LogLevel",
    "PageChatApp",
    "PreviewScreen",
    "PromptSuggestions",
    "StatusPanel",
    "TUICallback",
    "UserMessage",
    "run_textual_tui",
]
