"""Conversation module for pagechat.

Holds the in-memory turn list of one session and the machinery that
streams backend replies into it.
"""

from .conversation import FALLBACK_MESSAGE, Conversation
from .models import Message, Role, StreamOutcome, StreamStatus
from .session import ChatSession
from .stream import StreamConsumer, StreamSession

__all__ = [
    "FALLBACK_MESSAGE",
    "ChatSession",
    "Conversation",
    "Message",
    "Role",
    "StreamConsumer",
    "StreamOutcome",
    "StreamSession",
    "StreamStatus",
]
