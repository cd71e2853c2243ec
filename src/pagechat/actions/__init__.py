"""Code block action layer.

Module structure:
- clipboard.py: clipboard capabilities (pyperclip, terminal OSC 52)
- sandbox.py: sandboxed HTML preview surfaces
- code_actions.py: copy / preview state per code block
"""

from ..render.code import is_previewable
from .clipboard import Clipboard, FallbackClipboard, SystemClipboard, TerminalClipboard
from .code_actions import COPY_REVERT_SECONDS, ActionsRegistry, CodeActions, CodeActionState
from .sandbox import HtmlSandbox, IframeSandbox, PreviewSurface, build_host_page

__all__ = [
    "COPY_REVERT_SECONDS",
    "ActionsRegistry",
    "Clipboard",
    "CodeActionState",
    "CodeActions",
    "FallbackClipboard",
    "HtmlSandbox",
    "IframeSandbox",
    "PreviewSurface",
    "SystemClipboard",
    "TerminalClipboard",
    "build_host_page",
    "is_previewable",
]
