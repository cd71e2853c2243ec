"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Message rendering and in-place re-rendering while streaming
- Code block copy / preview controls
- Input submission and history
- Status display formatting
- Log rendering and scrolling
"""

from collections.abc import Callable
from datetime import datetime

from rich.text import Text
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.events import Click
from textual.message import Message
from textual.widgets import Button, RichLog, Static, TextArea

from ..actions import ActionsRegistry, CodeActions
from ..conversation import StreamOutcome, StreamStatus
from ..prompts import get_example_prompts
from ..render import CodeBlock, DisplayNode, render_code, render_display
from .config import (
    COPIED_LABEL,
    COPY_LABEL,
    LOG_MAX_MESSAGE_LENGTH,
    LOG_TIMESTAMP_FORMAT,
    MESSAGE_TIMESTAMP_FORMAT,
    PREVIEW_LABEL,
    STREAMING_PLACEHOLDER,
    WELCOME_TEXT,
    WELCOME_TITLE,
    LogLevel,
)
from .screens import PreviewScreen


class CodeActionBar(Horizontal):
    """Language label with "Copy code" and "Preview" buttons.

    Bound to the CodeActions of one code block position. Re-binding on
    every re-render keeps the copied state while the text grows.
    """

    def __init__(self, actions: CodeActions, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._actions = actions
        self._label = Static(classes="code-language")
        self._copy_button = Button(COPY_LABEL, classes="copy-btn")
        self._preview_button = Button(PREVIEW_LABEL, classes="preview-btn")
        self.attach_actions(actions)

    def compose(self):
        yield self._label
        yield self._copy_button
        yield self._preview_button

    @property
    def actions(self) -> CodeActions:
        return self._actions

    def attach_actions(self, actions: CodeActions) -> None:
        """Attach to actions, possibly with a newer text snapshot."""
        self._actions = actions
        actions.set_change_callback(self._on_state_changed)
        self._label.update(actions.language or "text")
        self._preview_button.display = actions.previewable
        self._sync()

    def _on_state_changed(self, actions: CodeActions) -> None:
        if actions is self._actions:
            self._sync()

    def _sync(self) -> None:
        copied = self._actions.state.copied
        self._copy_button.label = COPIED_LABEL if copied else COPY_LABEL
        self._copy_button.set_class(copied, "-copied")

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        if event.button is self._copy_button:
            await self._actions.copy()
        elif event.button is self._preview_button:
            surface = await self._actions.open_preview()
            if surface is not None:
                self.app.push_screen(PreviewScreen(self._actions, surface))


class CodeBlockView(Vertical):
    """Top-level fenced code block: action bar above highlighted code."""

    def __init__(self, node: DisplayNode, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._bar = CodeActionBar(node.actions[0]) if node.actions else None
        self._code = Static(render_code(node.block), classes="code-renderable")

    def compose(self):
        if self._bar is not None:
            yield self._bar
        yield self._code

    def accepts(self, node: DisplayNode) -> bool:
        return isinstance(node.block, CodeBlock) and (self._bar is not None) == bool(node.actions)

    def show(self, node: DisplayNode) -> None:
        if self._bar is not None:
            self._bar.attach_actions(node.actions[0])
        self._code.update(render_code(node.block))


class BlockView(Vertical):
    """Any other top-level block.

    Code nested in lists or quotes is drawn inline by the treatment, so
    its actions get one bar each below the block.
    """

    def __init__(self, node: DisplayNode, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._static = Static(node.renderable, classes="block-renderable")
        self._bars = [CodeActionBar(actions) for actions in node.actions]

    def compose(self):
        yield self._static
        yield from self._bars

    def accepts(self, node: DisplayNode) -> bool:
        return not isinstance(node.block, CodeBlock) and len(node.actions) == len(self._bars)

    def show(self, node: DisplayNode) -> None:
        self._static.update(node.renderable)
        for bar, actions in zip(self._bars, node.actions):
            bar.attach_actions(actions)


def _view_for(node: DisplayNode) -> "CodeBlockView | BlockView":
    if isinstance(node.block, CodeBlock):
        return CodeBlockView(node)
    return BlockView(node)


class MessageView(Vertical):
    """Header plus body for one conversation turn."""

    _PREFIXES = {"user": ("You", ">"), "assistant": ("Assistant", "<")}

    def __init__(self, role: str, *args, **kwargs) -> None:
        super().__init__(*args, classes=f"chat-message {role}-message", **kwargs)
        self.role = role
        self.timestamp = datetime.now()
        self._header = Static(self._header_text(), classes="message-header")

    def _header_text(self, suffix: str = "") -> Text:
        prefix, icon = self._PREFIXES[self.role]
        timestamp = self.timestamp.strftime(MESSAGE_TIMESTAMP_FORMAT)
        return Text(f"{icon} {prefix} [{timestamp}]{suffix}")


class UserMessage(MessageView):
    """User turn, shown literally: no markdown and no markup."""

    def __init__(self, content: str, *args, **kwargs) -> None:
        super().__init__("user", *args, **kwargs)
        self._content = content

    def compose(self):
        yield self._header
        yield Static(Text(self._content), classes="message-body")

    @property
    def content(self) -> str:
        return self._content


class AssistantMessage(MessageView):
    """Assistant turn, re-rendered from its full content on every update.

    Block widgets are reconciled by position: a block whose kind is
    unchanged is updated in place, so widget state (and the copy state of
    its code actions) survives the re-render.
    """

    def __init__(self, content: str, actions: ActionsRegistry, *args, **kwargs) -> None:
        super().__init__("assistant", *args, **kwargs)
        self._content = content
        self._actions = actions
        self._views: list[CodeBlockView | BlockView] = []
        self._streaming = True
        self._ready = False
        self.add_class("-streaming")

    def compose(self):
        yield self._header

    def on_mount(self) -> None:
        self._ready = True
        self._refresh_header()
        self._reconcile()

    @property
    def content(self) -> str:
        return self._content

    @property
    def actions(self) -> ActionsRegistry:
        return self._actions

    def set_content(self, content: str) -> None:
        if content == self._content:
            return
        self._content = content
        if self._ready:
            self._reconcile()

    def set_streaming(self, streaming: bool) -> None:
        self._streaming = streaming
        self.set_class(streaming, "-streaming")
        self._refresh_header()

    def _refresh_header(self) -> None:
        suffix = f" {STREAMING_PLACEHOLDER}" if self._streaming else ""
        self._header.update(self._header_text(suffix))

    def _reconcile(self) -> None:
        nodes = render_display(self._content, enable_code_actions=True, actions_handler=self._actions)
        self._actions.prune(sum(len(node.actions) for node in nodes))

        views = self._views
        for index, node in enumerate(nodes):
            if index < len(views) and views[index].accepts(node):
                views[index].show(node)
                continue
            for stale in views[index:]:
                stale.remove()
            del views[index:]
            view = _view_for(node)
            views.append(view)
            self.mount(view)

        for stale in views[len(nodes):]:
            stale.remove()
        del views[len(nodes):]

    def release_actions(self) -> None:
        self._actions.dispose()


class PromptSuggestions(Vertical):
    """Landing view: welcome text and example prompts.

    Choosing a prompt pre-fills the input; it does not submit.
    """

    class Selected(Message):
        """Posted when an example prompt is chosen."""

        def __init__(self, prompt: str) -> None:
            super().__init__()
            self.prompt = prompt

    def __init__(self, *args, prompts: list[str] | None = None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._prompts = get_example_prompts() if prompts is None else prompts

    def compose(self):
        yield Static(WELCOME_TITLE, id="welcome-title")
        yield Static(WELCOME_TEXT, id="welcome-text")
        for index, prompt in enumerate(self._prompts):
            yield Button(prompt, id=f"suggestion-{index}", classes="suggestion")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id or ""
        if button_id.startswith("suggestion-"):
            event.stop()
            self.post_message(self.Selected(self._prompts[int(button_id[11:])]))


class ChatInputBar(Horizontal):
    """Chat input bar with TextArea and Send button.

    Enter submits; Shift+Enter (where the terminal reports it) and
    Ctrl+J insert a newline.
    """

    BINDINGS = [
        Binding("enter", "submit", "Send", priority=True),
        Binding("shift+enter,ctrl+j", "newline", "Newline", show=False, priority=True),
    ]

    class Submitted(Message):
        """Message sent when user submits input."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._history: list[str] = []
        self._history_index: int = -1
        self._busy = False

    def compose(self):
        text_area = TextArea(id="chat-input", show_line_numbers=False)
        text_area.cursor_blink = False
        yield text_area
        yield Button("Send", id="send-btn", variant="success").with_tooltip(
            "Submit message (Enter)"
        )

    def on_mount(self) -> None:
        text_area = self.query_one("#chat-input", TextArea)
        text_area.focus()
        text_area.highlight_cursor_line = False

    @property
    def busy(self) -> bool:
        return self._busy

    def set_busy(self, busy: bool) -> None:
        """Block submission while a response is streaming.

        Typing stays possible so the next prompt can be prepared.
        """
        self._busy = busy
        self.set_class(busy, "-busy")
        self.query_one("#send-btn", Button).disabled = busy

    def set_text(self, text: str) -> None:
        text_area = self.query_one("#chat-input", TextArea)
        text_area.text = text
        text_area.move_cursor(text_area.document.end)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send-btn":
            event.stop()
            self._submit()

    def action_submit(self) -> None:
        self._submit()

    def action_newline(self) -> None:
        self.query_one("#chat-input", TextArea).insert("\n")

    def on_key(self, event) -> None:
        """Navigate input history at the edges of the text."""
        if event.key == "up" and self._is_cursor_at_start():
            self._navigate_history(-1)
            event.prevent_default()
            event.stop()
        elif event.key == "down" and self._is_cursor_at_end():
            self._navigate_history(1)
            event.prevent_default()
            event.stop()

    def _is_cursor_at_start(self) -> bool:
        text_area = self.query_one("#chat-input", TextArea)
        return text_area.cursor_location == (0, 0)

    def _is_cursor_at_end(self) -> bool:
        text_area = self.query_one("#chat-input", TextArea)
        return text_area.cursor_location == text_area.document.end

    def _navigate_history(self, direction: int) -> None:
        if not self._history:
            return
        text_area = self.query_one("#chat-input", TextArea)
        if direction < 0:  # Up
            if self._history_index == -1:
                self._history_index = len(self._history) - 1
            elif self._history_index > 0:
                self._history_index -= 1
        else:  # Down
            if self._history_index < len(self._history) - 1:
                self._history_index += 1
            else:
                self._history_index = -1
                text_area.text = ""
                return
        text_area.text = self._history[self._history_index]

    def _submit(self) -> None:
        if self._busy:
            self.app.bell()
            return
        text_area = self.query_one("#chat-input", TextArea)
        value = text_area.text.strip()
        if value:
            if not self._history or self._history[-1] != value:
                self._history.append(value)
            self._history_index = -1
            text_area.text = ""
            self.post_message(self.Submitted(value))

    def focus_input(self) -> None:
        """Focus the text input."""
        self.query_one("#chat-input", TextArea).focus()


class StatusPanel(Static):
    """One-line status of the current or last turn."""

    _STATE_STYLES = {
        "idle": "dim",
        "streaming": "bold yellow",
        StreamStatus.COMPLETED.value: "bold green",
        StreamStatus.FAILED.value: "bold red",
        StreamStatus.CANCELLED.value: "bold magenta",
    }

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._state = "idle"
        self._fragments = 0
        self._characters = 0
        self._time = 0.0
        self._input_tokens = 0
        self._output_tokens = 0

    def on_mount(self) -> None:
        self._update_display()

    def reset(self) -> None:
        self._state = "idle"
        self._fragments = 0
        self._characters = 0
        self._time = 0.0
        self._input_tokens = 0
        self._output_tokens = 0
        self._update_display()

    def start_turn(self) -> None:
        self.reset()
        self._state = "streaming"
        self._update_display()

    def update_progress(self, fragments: int, characters: int) -> None:
        self._fragments = fragments
        self._characters = characters
        self._update_display()

    def finish_turn(self, outcome: StreamOutcome) -> None:
        usage = outcome.usage or {}
        self._state = outcome.status.value
        self._fragments = outcome.fragments
        self._characters = outcome.characters
        self._time = outcome.elapsed
        self._input_tokens = usage.get("prompt_tokens", 0)
        self._output_tokens = usage.get("completion_tokens", 0)
        self._update_display()

    def _update_display(self) -> None:
        style = self._STATE_STYLES.get(self._state, "bold")
        total_tokens = self._input_tokens + self._output_tokens
        parts = [
            f"[{style}]{self._state.capitalize()}[/]",
            f"[bold cyan]Fragments:[/] {self._fragments:,}",
            f"[bold green]Chars:[/] {self._characters:,}",
            f"[bold yellow]Time:[/] {self._time:.2f}s",
        ]
        if total_tokens:
            parts.append(
                f"[bold magenta]Tokens:[/] {total_tokens:,} "
                f"[dim]({self._input_tokens:,}/{self._output_tokens:,})[/]"
            )
        self.update("  ".join(parts))

    def get_plain_text(self) -> str:
        """Get status as plain text for clipboard."""
        return (
            f"Status: {self._state}  "
            f"Fragments: {self._fragments}  "
            f"Chars: {self._characters}  "
            f"Time: {self._time:.2f}s  "
            f"Tokens: {self._input_tokens + self._output_tokens} "
            f"({self._input_tokens}/{self._output_tokens})"
        )


class DebugPanel(RichLog):
    """Log panel for real-time tracing with level filtering.

    Shows timestamped log messages from all components.
    Supports standard log levels: DEBUG < INFO < WARNING < ERROR.
    Hidden by default, shown with --log-level flag or toggled with Ctrl+D.
    """

    BORDER_TITLE = "Log"
    BORDER_SUBTITLE = "Trace log"

    _LEVEL_COLORS = {
        LogLevel.DEBUG: "dim white",
        LogLevel.INFO: "cyan",
        LogLevel.WARNING: "yellow",
        LogLevel.ERROR: "red",
    }

    _COMPONENT_COLORS = {
        "TUI": "cyan",
        "Session": "green",
        "Stream": "magenta",
        "Conversation": "bright_blue",
        "Actions": "bright_yellow",
        "LLM": "bright_magenta",
    }

    def __init__(self, *args, log_level: int = LogLevel.DEBUG, **kwargs) -> None:
        super().__init__(
            *args,
            markup=True,
            highlight=False,
            auto_scroll=True,
            wrap=False,
            **kwargs
        )
        self._log_level = log_level

    @property
    def log_level(self) -> int:
        """Current log level threshold."""
        return self._log_level

    @log_level.setter
    def log_level(self, level: int) -> None:
        self._log_level = level
        self._update_subtitle()

    def _update_subtitle(self) -> None:
        if self.display:
            self.border_subtitle = f"Level: {LogLevel.name(self._log_level)}"
        else:
            self.border_subtitle = "Hidden"

    def on_mount(self) -> None:
        """Hide by default."""
        self.display = False

    def log(
        self,
        component: str,
        message: str,
        level: int = LogLevel.DEBUG
    ) -> None:
        """Add a log entry if it meets the current level threshold.

        Args:
            component: Component name (TUI, Session, Stream, Actions, etc.)
            message: Log message
            level: Log level (LogLevel.DEBUG, INFO, WARNING, ERROR)
        """
        if level < self._log_level:
            return

        if len(message) > LOG_MAX_MESSAGE_LENGTH:
            message = message[:LOG_MAX_MESSAGE_LENGTH] + "..."

        timestamp = datetime.now().strftime(LOG_TIMESTAMP_FORMAT)
        level_color = self._LEVEL_COLORS.get(level, "white")
        comp_color = self._COMPONENT_COLORS.get(component, "white")

        line = Text()
        line.append(f"{timestamp} ", style="dim")
        line.append(f"{LogLevel.name(level):<5} ", style=level_color)
        line.append(f"[{component}] ", style=comp_color)
        line.append(message)
        self.write(line)

    def debug(self, component: str, message: str) -> None:
        self.log(component, message, LogLevel.DEBUG)

    def info(self, component: str, message: str) -> None:
        self.log(component, message, LogLevel.INFO)

    def warning(self, component: str, message: str) -> None:
        self.log(component, message, LogLevel.WARNING)

    def error(self, component: str, message: str) -> None:
        self.log(component, message, LogLevel.ERROR)

    def show(self) -> None:
        self.display = True
        self._update_subtitle()

    def hide(self) -> None:
        self.display = False
        self.border_subtitle = "Hidden"

    def toggle(self) -> bool:
        """Toggle visibility. Returns new state."""
        if self.display:
            self.hide()
            return False
        self.show()
        return True

    def get_plain_text(self) -> str:
        """Get plain text content of the log for copying."""
        return "\n".join(line.text for line in self.lines)

    def on_click(self, event: Click) -> None:
        """Copy log content to clipboard when clicked."""
        event.stop()
        text = self.get_plain_text()
        if not text.strip():
            self.app.notify("Debug log is empty", timeout=2)
            return
        self.app.copy_to_clipboard(text)
        self.app.notify("Debug log copied", timeout=2)


class ChatHistoryWidget(VerticalScroll):
    """Scrollable chat history, one view per conversation slot."""

    BORDER_TITLE = "Chat"
    BORDER_SUBTITLE = "New conversation"
    ALLOW_SELECT = True

    def __init__(
        self,
        *args,
        actions_factory: Callable[[], ActionsRegistry],
        prompts: list[str] | None = None,
        **kwargs,
    ) -> None:
        super().__init__(*args, **kwargs)
        self._actions_factory = actions_factory
        self._prompts = prompts
        self._views: list[UserMessage | AssistantMessage] = []

    def compose(self):
        yield PromptSuggestions(id="suggestions", prompts=self._prompts)

    @property
    def message_count(self) -> int:
        return len(self._views)

    def show_message(self, slot: int, role: str, content: str) -> None:
        """Create or update the view for a conversation slot."""
        if slot < len(self._views):
            view = self._views[slot]
            if isinstance(view, AssistantMessage):
                view.set_content(content)
            self.scroll_end(animate=False)
            return

        self.query_one("#suggestions", PromptSuggestions).display = False
        if role == "user":
            view = UserMessage(content)
        else:
            view = AssistantMessage(content, self._actions_factory())
        self._views.append(view)
        self.mount(view)
        self.border_subtitle = f"{len(self._views)} messages"
        self.scroll_end(animate=False)

    def set_streaming(self, slot: int, streaming: bool) -> None:
        if slot < len(self._views):
            view = self._views[slot]
            if isinstance(view, AssistantMessage):
                view.set_streaming(streaming)

    def get_last_response(self) -> str | None:
        """Get the last assistant response."""
        for view in reversed(self._views):
            if isinstance(view, AssistantMessage) and view.content:
                return view.content
        return None

    def clear_history(self) -> None:
        """Remove every message and return to the landing view."""
        for view in self._views:
            if isinstance(view, AssistantMessage):
                view.release_actions()
            view.remove()
        self._views.clear()
        self.query_one("#suggestions", PromptSuggestions).display = True
        self.border_subtitle = "New conversation"
        self.scroll_home(animate=False)
