"""Stream consumer: folds a backend token stream into the conversation.

Hides how an asynchronous, possibly failing fragment source is drained.
Fragments are applied strictly in arrival order: the next fragment is
not awaited until the previous apply_delta call has returned.
"""

import asyncio
import time
from collections.abc import Callable

from ..llm.base import LLMProvider
from ..llm.models import ChatMessage
from .conversation import FALLBACK_MESSAGE, Conversation, DebugCallback
from .models import Message, StreamOutcome, StreamStatus

UpdateCallback = Callable[[int, Message], None]


class StreamSession:
    """Transient state of one outstanding backend call.

    Attributes:
        slot: Conversation index this session writes into
        request: Outbound messages sent to the backend
        buffer: Text accumulated so far
        fragments: Number of non-empty fragments received
    """

    def __init__(self, slot: int, request: list[ChatMessage]) -> None:
        self.slot = slot
        self.request = request
        self.buffer = ""
        self.fragments = 0
        self.usage: dict | None = None
        self._started = time.monotonic()

    def feed(self, fragment: str) -> None:
        self.buffer += fragment
        self.fragments += 1

    def outcome(self, status: StreamStatus, error: str | None = None) -> StreamOutcome:
        """Summarize the session as it stands now."""
        return StreamOutcome(
            slot=self.slot,
            status=status,
            fragments=self.fragments,
            characters=len(self.buffer),
            elapsed=time.monotonic() - self._started,
            usage=self.usage,
            error=error,
        )


class StreamConsumer:
    """Drains a backend stream into one assistant slot.

    No retries: a failed turn is replaced by the fallback text and the
    user has to resubmit.
    """

    def __init__(
        self,
        llm: LLMProvider,
        fallback_text: str = FALLBACK_MESSAGE,
    ) -> None:
        self._llm = llm
        self._fallback_text = fallback_text
        self._update_callback: UpdateCallback | None = None
        self._debug_callback: DebugCallback | None = None

    def set_update_callback(self, callback: UpdateCallback | None) -> None:
        """Set the callback invoked after every mutation of the slot.

        Args:
            callback: Callable(slot: int, message: Message)
        """
        self._update_callback = callback

    def set_debug_callback(self, callback: DebugCallback | None) -> None:
        """Set the debug callback.

        Args:
            callback: Callable(level: str, component: str, message: str)
        """
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Stream", message)

    def _notify(self, conversation: Conversation, slot: int) -> None:
        if self._update_callback:
            self._update_callback(slot, conversation[slot])

    async def consume(self, conversation: Conversation, session: StreamSession) -> StreamOutcome:
        """Run one session to completion or failure.

        Transport errors are never re-raised; the slot gets the fallback
        text instead of partially streamed content. Cancellation closes
        the turn with its partial content and propagates.

        Args:
            conversation: Conversation owning the slot
            session: Session created for the new assistant turn

        Returns:
            Outcome with status COMPLETED or FAILED
        """
        slot = session.slot
        self._debug("info", f"Requesting completion ({len(session.request)} messages)")

        try:
            stream = await self._llm.chat_completion_stream(session.request)
            async for fragment in stream:
                if not fragment:
                    continue
                session.feed(fragment)
                if conversation.apply_delta(slot, fragment):
                    self._notify(conversation, slot)
            session.usage = stream.usage
        except asyncio.CancelledError:
            self._debug("warning", f"Stream cancelled after {session.fragments} fragments")
            conversation.finish_turn(slot)
            self._notify(conversation, slot)
            raise
        except Exception as e:
            self._debug("error", f"Stream failed after {session.fragments} fragments: {e!r}")
            conversation.finalize_or_fail(slot, self._fallback_text)
            self._notify(conversation, slot)
            return session.outcome(StreamStatus.FAILED, error=str(e) or type(e).__name__)

        conversation.finish_turn(slot)
        self._notify(conversation, slot)
        self._debug(
            "info",
            f"Stream complete: {session.fragments} fragments, {len(session.buffer)} chars",
        )
        return session.outcome(StreamStatus.COMPLETED)
