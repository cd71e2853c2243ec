"""Copy and preview actions for one rendered code block.

Both actions work on the block's text at the moment they are invoked;
a block that is still streaming is copied or previewed as it stands.
Capability failures are logged only and never reach the conversation.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, replace

from ..errors import ClipboardError, SandboxError
from ..render.blocks import CodeBlock
from ..render.code import classify_code
from .clipboard import Clipboard
from .sandbox import HtmlSandbox, PreviewSurface

COPY_REVERT_SECONDS = 2.0

DebugCallback = Callable[[str, str, str], None]


@dataclass
class CodeActionState:
    """Ephemeral UI state of one code block."""

    copied: bool = False
    preview_open: bool = False


class CodeActions:
    """Actions bound to one code block position in a message."""

    def __init__(
        self,
        block: CodeBlock,
        clipboard: Clipboard,
        sandbox: HtmlSandbox | None = None,
        revert_delay: float = COPY_REVERT_SECONDS,
    ) -> None:
        self._block = block
        self._clipboard = clipboard
        self._sandbox = sandbox
        self._revert_delay = revert_delay
        self._revert_handle: asyncio.TimerHandle | None = None
        self._surface: PreviewSurface | None = None
        self._change_callback: Callable[["CodeActions"], None] | None = None
        self._debug_callback: DebugCallback | None = None
        self.state = CodeActionState()

    @property
    def block(self) -> CodeBlock:
        return self._block

    @property
    def text(self) -> str:
        return self._block.text

    @property
    def language(self) -> str | None:
        return self._block.language

    @property
    def previewable(self) -> bool:
        return self._sandbox is not None and self._block.previewable

    @property
    def surface(self) -> PreviewSurface | None:
        return self._surface

    def set_change_callback(self, callback: Callable[["CodeActions"], None] | None) -> None:
        """Set the callback invoked whenever state changes."""
        self._change_callback = callback

    def set_debug_callback(self, callback: DebugCallback | None) -> None:
        """Set the debug callback.

        Args:
            callback: Callable(level: str, component: str, message: str)
        """
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Actions", message)

    def _changed(self) -> None:
        if self._change_callback:
            self._change_callback(self)

    def update(self, block: CodeBlock) -> None:
        """Replace the text snapshot with a newer parse of the same block."""
        self._block = block

    def update_text(self, text: str) -> None:
        """Replace the text snapshot, keeping the declared language."""
        lexer, kind = classify_code(self._block.language, text)
        self._block = replace(self._block, text=text, lexer=lexer, kind=kind)

    async def copy(self) -> bool:
        """Place the block's current text on the clipboard.

        On success the state shows 'copied' until the revert delay
        elapses; copying again restarts the delay.

        Returns:
            True if the clipboard accepted the text
        """
        text = self._block.text
        try:
            await self._clipboard.write_text(text)
        except ClipboardError as e:
            self._debug("warning", str(e))
            self._cancel_revert()
            if self.state.copied:
                self.state.copied = False
                self._changed()
            return False

        self._debug("debug", f"Copied {len(text)} chars")
        self.state.copied = True
        self._cancel_revert()
        self._revert_handle = asyncio.get_running_loop().call_later(self._revert_delay, self._revert)
        self._changed()
        return True

    def _cancel_revert(self) -> None:
        if self._revert_handle is not None:
            self._revert_handle.cancel()
            self._revert_handle = None

    def _revert(self) -> None:
        self._revert_handle = None
        self.state.copied = False
        self._changed()

    async def open_preview(self) -> PreviewSurface | None:
        """Render the block's current text into a fresh sandbox surface.

        Any previously open surface is discarded first.

        Returns:
            The new surface, or None if the block is not previewable or
            the sandbox failed
        """
        if not self.previewable:
            return None
        self._discard_surface()
        try:
            surface = await self._sandbox.render(self._block.text)
        except SandboxError as e:
            self._debug("warning", str(e))
            if self.state.preview_open:
                self.state.preview_open = False
                self._changed()
            return None

        self._debug("debug", f"Preview rendered to {surface.path}")
        self._surface = surface
        self.state.preview_open = True
        self._changed()
        return surface

    def close_preview(self) -> None:
        """Discard the preview surface, if any."""
        was_open = self.state.preview_open
        self._discard_surface()
        self.state.preview_open = False
        if was_open:
            self._changed()

    def _discard_surface(self) -> None:
        if self._surface is not None:
            self._surface.close()
            self._surface = None

    def dispose(self) -> None:
        """Release the revert timer and any open preview."""
        self._cancel_revert()
        self._discard_surface()
        self.state = CodeActionState()


class ActionsRegistry:
    """Provides actions per code block position within one message.

    Re-renders ask for actions by ordinal, so the block at a given
    position keeps its state while its text keeps growing.
    """

    def __init__(
        self,
        clipboard: Clipboard,
        sandbox: HtmlSandbox | None = None,
        revert_delay: float = COPY_REVERT_SECONDS,
        debug_callback: DebugCallback | None = None,
    ) -> None:
        self._clipboard = clipboard
        self._sandbox = sandbox
        self._revert_delay = revert_delay
        self._debug_callback = debug_callback
        self._actions: dict[int, CodeActions] = {}

    def __len__(self) -> int:
        return len(self._actions)

    def actions_for(self, ordinal: int, block: CodeBlock) -> CodeActions:
        actions = self._actions.get(ordinal)
        if actions is None:
            actions = CodeActions(
                block,
                clipboard=self._clipboard,
                sandbox=self._sandbox,
                revert_delay=self._revert_delay,
            )
            actions.set_debug_callback(self._debug_callback)
            self._actions[ordinal] = actions
        else:
            actions.update(block)
        return actions

    def prune(self, count: int) -> None:
        """Dispose actions for positions at or beyond count."""
        for ordinal in [o for o in self._actions if o >= count]:
            self._actions.pop(ordinal).dispose()

    def dispose(self) -> None:
        self.prune(0)
