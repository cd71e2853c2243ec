"""Session coordinator.

Owns the Conversation and the single active StreamSession. Front ends
talk to this object only: they submit text, observe updates and may
cancel; they never mutate the conversation themselves.
"""

import asyncio
from collections.abc import Callable

from ..llm.base import LLMProvider
from ..prompts import get_system_preamble
from .conversation import FALLBACK_MESSAGE, Conversation, DebugCallback
from .models import StreamOutcome, StreamStatus
from .stream import StreamConsumer, StreamSession, UpdateCallback

FinishCallback = Callable[[StreamOutcome], None]


class ChatSession:
    """Single-user chat session over one backend.

    Example:
        session = ChatSession(llm)
        session.set_update_callback(lambda slot, msg: print(msg.content))
        outcome = await session.submit("A card component with an image")
    """

    def __init__(
        self,
        llm: LLMProvider,
        preamble: str | None = None,
        fallback_text: str = FALLBACK_MESSAGE,
    ) -> None:
        self._conversation = Conversation(
            preamble=get_system_preamble() if preamble is None else preamble
        )
        self._consumer = StreamConsumer(llm, fallback_text=fallback_text)
        self._update_callback: UpdateCallback | None = None
        self._finish_callback: FinishCallback | None = None
        self._debug_callback: DebugCallback | None = None
        self._task: asyncio.Task | None = None
        self._active: StreamSession | None = None
        self._cancel_requested = False
        self._last_outcome: StreamOutcome | None = None

    @property
    def conversation(self) -> Conversation:
        return self._conversation

    @property
    def busy(self) -> bool:
        """True while a StreamSession is active; submissions are ignored."""
        return self._active is not None

    @property
    def last_outcome(self) -> StreamOutcome | None:
        return self._last_outcome

    def set_update_callback(self, callback: UpdateCallback | None) -> None:
        """Set the callback invoked after every conversation mutation.

        Args:
            callback: Callable(slot: int, message: Message)
        """
        self._update_callback = callback
        self._consumer.set_update_callback(callback)

    def set_finish_callback(self, callback: FinishCallback | None) -> None:
        """Set the callback invoked once per finished turn.

        Args:
            callback: Callable(outcome: StreamOutcome)
        """
        self._finish_callback = callback

    def set_debug_callback(self, callback: DebugCallback | None) -> None:
        """Set the debug callback and propagate it to owned components.

        Args:
            callback: Callable(level: str, component: str, message: str)
        """
        self._debug_callback = callback
        self._conversation.set_debug_callback(callback)
        self._consumer.set_debug_callback(callback)

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Session", message)

    def _notify(self, slot: int) -> None:
        if self._update_callback:
            self._update_callback(slot, self._conversation[slot])

    async def submit(self, text: str) -> StreamOutcome | None:
        """Submit a prompt and stream the reply into the conversation.

        Blank input, and any input while a turn is streaming, is ignored.

        Returns:
            Outcome of the turn, or None if the submission was ignored
        """
        text = text.strip()
        if not text:
            return None
        if self.busy:
            self._debug("warning", "Submission ignored: a response is still streaming")
            return None

        user_slot = len(self._conversation)
        self._conversation.append_user(text)
        self._notify(user_slot)

        request = self._conversation.outbound_messages()
        slot = self._conversation.begin_assistant_turn()
        self._notify(slot)

        session = StreamSession(slot, request)
        self._active = session
        self._cancel_requested = False
        self._task = asyncio.ensure_future(self._consumer.consume(self._conversation, session))
        try:
            outcome = await self._task
        except asyncio.CancelledError:
            if not self._cancel_requested:
                raise
            outcome = session.outcome(StreamStatus.CANCELLED)
        finally:
            # A task cancelled before its first step never closed the turn
            if self._conversation.in_flight == slot:
                self._conversation.finish_turn(slot)
                self._notify(slot)
            self._task = None
            self._active = None

        self._last_outcome = outcome
        self._debug("info", f"Turn {slot} {outcome.status.value} in {outcome.elapsed:.2f}s")
        if self._finish_callback:
            self._finish_callback(outcome)
        return outcome

    def cancel(self) -> bool:
        """Stop the streaming turn, keeping what has arrived so far.

        Returns:
            True if a running turn was cancelled
        """
        if self._task is None or self._task.done():
            return False
        self._cancel_requested = True
        self._task.cancel()
        return True

    def clear(self) -> bool:
        """Clear the conversation unless a turn is streaming.

        Returns:
            True if the conversation was cleared
        """
        if self.busy:
            self._debug("warning", "Clear ignored: a response is still streaming")
            return False
        self._conversation.clear()
        return True
