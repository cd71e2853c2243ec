"""
PageChat: streaming chat that renders markdown answers as they arrive
and previews generated HTML pages in a sandbox.

Each subpackage hides one design decision: the conversation model,
markdown rendering, code block actions, the generation backends and
the front ends.
"""

__version__ = "0.1.0"

from .conversation import (
    ChatSession,
    Conversation,
    Message,
    StreamConsumer,
    StreamOutcome,
    StreamStatus,
)
from .render import MarkdownRenderer, render_display

__all__ = [
    "ChatSession",
    "Conversation",
    "MarkdownRenderer",
    "Message",
    "StreamConsumer",
    "StreamOutcome",
    "StreamStatus",
    "render_display",
]
