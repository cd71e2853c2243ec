"""Display tree: blocks paired with renderables and code actions.

This is the rendering contract front ends use. It takes one string and
the capability hooks, has no persisted state, and is safe to call with
growing input on every streamed fragment.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from rich.console import RenderableType

from .blocks import Block, CodeBlock, iter_code_blocks
from .parser import MarkdownRenderer
from .treatments import render_block

if TYPE_CHECKING:
    from ..actions import CodeActions


class ActionsHandler(Protocol):
    """Capability that provides copy/preview actions for a code block."""

    def actions_for(self, ordinal: int, block: CodeBlock) -> "CodeActions":
        """Return actions for the ordinal-th code block of the message."""
        ...


@dataclass
class DisplayNode:
    """One top-level block ready for display.

    Attributes:
        block: Structural node
        renderable: Rich renderable of the block
        actions: Actions for every code block inside this node, in order
    """

    block: Block
    renderable: RenderableType
    actions: tuple["CodeActions", ...] = field(default_factory=tuple)


_default_renderer = MarkdownRenderer()


def render_display(
    content: str,
    *,
    enable_code_actions: bool = False,
    actions_handler: ActionsHandler | None = None,
    renderer: MarkdownRenderer | None = None,
) -> list[DisplayNode]:
    """Parse content and build the display tree.

    Args:
        content: Full current text of an assistant message
        enable_code_actions: Attach copy/preview actions to code blocks
        actions_handler: Provider of actions; required for actions to attach
        renderer: Parser to use (a shared default if omitted)

    Returns:
        Display nodes in document order
    """
    blocks = (renderer or _default_renderer).parse(content)
    attach = enable_code_actions and actions_handler is not None

    nodes = []
    ordinal = 0
    for block in blocks:
        actions: list[CodeActions] = []
        if attach:
            for code in iter_code_blocks((block,)):
                actions.append(actions_handler.actions_for(ordinal, code))
                ordinal += 1
        nodes.append(DisplayNode(block=block, renderable=render_block(block), actions=tuple(actions)))
    return nodes
