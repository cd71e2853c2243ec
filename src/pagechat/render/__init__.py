"""Markdown structural renderer.

Module structure (each module hides a design decision):
- blocks.py: the structural tree (frozen node types)
- code.py: language tag resolution and code block classification
- parser.py: markdown-it-py token tree to blocks
- treatments.py: block type to Rich renderable
- display.py: rendering contract with code action hooks
"""

from .blocks import Block, CodeBlock, CodeKind, iter_code_blocks
from .code import classify_code, is_previewable, resolve_lexer
from .display import ActionsHandler, DisplayNode, render_display
from .parser import MarkdownRenderer
from .treatments import render_block, render_blocks, render_code

__all__ = [
    "ActionsHandler",
    "Block",
    "CodeBlock",
    "CodeKind",
    "DisplayNode",
    "MarkdownRenderer",
    "classify_code",
    "is_previewable",
    "iter_code_blocks",
    "render_block",
    "render_blocks",
    "render_code",
    "render_display",
    "resolve_lexer",
]
