"""Modal screens for the TUI.

This module hides the design decisions about:
- Preview dialog appearance (CSS, layout)
- Keyboard shortcuts for dialogs
- How a sandboxed preview is handed to the browser

To change how previews are presented, modify only this file.
"""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Static

from ..actions import CodeActions, PreviewSurface
from ..errors import SandboxError


class PreviewScreen(ModalScreen[None]):
    """Modal dialog for one rendered HTML preview.

    The document runs in a sandboxed iframe (scripts only, opaque origin).
    Closing the dialog discards the preview surface.
    """

    CSS = """
    PreviewScreen {
        align: center middle;
        background: $background 70%;
    }

    #preview-dialog {
        width: 70;
        height: auto;
        max-height: 20;
        border: tall $accent;
        background: $surface;
        padding: 1 2;
    }

    #preview-title {
        width: 100%;
        height: auto;
        text-align: center;
        text-style: bold;
        color: $accent;
        padding: 0 0 1 0;
        border-bottom: solid $border;
        margin-bottom: 1;
    }

    #preview-info {
        width: 100%;
        height: auto;
        padding: 1 2;
        background: $panel;
        border: round $border;
        color: $foreground;
        margin-bottom: 1;
    }

    #preview-buttons {
        width: 100%;
        height: 3;
        align: center middle;
    }

    #preview-buttons Button {
        margin: 0 1;
        min-width: 12;
    }
    """

    BINDINGS = [
        Binding("o", "open_browser", "Open", show=False),
        Binding("escape", "close_preview", "Close", show=False),
    ]

    def __init__(self, actions: CodeActions, surface: PreviewSurface) -> None:
        super().__init__()
        self._actions = actions
        self._surface = surface

    def compose(self) -> ComposeResult:
        with Vertical(id="preview-dialog"):
            yield Static("HTML Preview", id="preview-title")
            yield Static(
                f"{self._surface.size:,} characters, sandboxed (scripts only)\n"
                f"{self._surface.uri}",
                id="preview-info",
                markup=False,
            )
            with Horizontal(id="preview-buttons"):
                yield Button("Open in browser", id="btn-open", variant="primary")
                yield Button("Close", id="btn-close", variant="error")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-open":
            self.action_open_browser()
        elif event.button.id == "btn-close":
            self.action_close_preview()

    def action_open_browser(self) -> None:
        try:
            self._surface.open_in_browser()
        except SandboxError as e:
            self.app.notify(str(e), severity="error", timeout=5)
            return
        self.app.notify("Preview opened in browser", timeout=2)

    def action_close_preview(self) -> None:
        self._actions.close_preview()
        self.dismiss(None)
