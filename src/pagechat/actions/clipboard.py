"""Clipboard capabilities.

Hides how text reaches the system clipboard. Every implementation
either succeeds or raises ClipboardError; nothing else escapes.
"""

import asyncio
from typing import TYPE_CHECKING, Protocol

import pyperclip

from ..errors import ClipboardError

if TYPE_CHECKING:
    from textual.app import App


class Clipboard(Protocol):
    """Capability that places text on a clipboard."""

    async def write_text(self, text: str) -> None:
        """Copy text, raising ClipboardError on failure."""
        ...


class SystemClipboard:
    """Native clipboard via pyperclip (pbcopy, xclip/xsel, win32)."""

    async def write_text(self, text: str) -> None:
        try:
            await asyncio.to_thread(pyperclip.copy, text)
        except pyperclip.PyperclipException as e:
            raise ClipboardError(str(e)) from e


class TerminalClipboard:
    """Terminal clipboard through Textual's OSC 52 escape sequence.

    Works over SSH, but the terminal may silently ignore it.
    """

    def __init__(self, app: "App") -> None:
        self._app = app

    async def write_text(self, text: str) -> None:
        if not self._app.is_running:
            raise ClipboardError("terminal application is not running")
        self._app.copy_to_clipboard(text)


class FallbackClipboard:
    """Tries each clipboard in turn until one succeeds."""

    def __init__(self, *clipboards: Clipboard) -> None:
        self._clipboards = clipboards

    async def write_text(self, text: str) -> None:
        errors = []
        for clipboard in self._clipboards:
            try:
                await clipboard.write_text(text)
                return
            except ClipboardError as e:
                errors.append(e.reason)
        raise ClipboardError("; ".join(errors) or "no clipboard configured")
