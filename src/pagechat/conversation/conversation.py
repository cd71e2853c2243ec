"""The in-memory conversation of a single chat session.

Hides how turns are stored and how the hidden preamble is merged into
the outbound request. Only four operations mutate it: append_user,
begin_assistant_turn, apply_delta and finalize_or_fail.
"""

from collections.abc import Callable

from ..errors import TurnInProgressError
from ..llm.models import ChatMessage
from .models import Message

FALLBACK_MESSAGE = "Sorry, there was an error. Please try again"

DebugCallback = Callable[[str, str, str], None]


class Conversation:
    """Ordered, append-only list of turns with one optional in-flight slot.

    Invariants:
    - at most one message is in flight; it is the last element and its
      role is 'assistant'
    - turns are never reordered or merged
    """

    def __init__(self, preamble: str = "") -> None:
        self._preamble = preamble
        self._messages: list[Message] = []
        self._in_flight: int | None = None
        self._debug_callback: DebugCallback | None = None

    def set_debug_callback(self, callback: DebugCallback | None) -> None:
        """Set the debug callback.

        Args:
            callback: Callable(level: str, component: str, message: str)
        """
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Conversation", message)

    @property
    def messages(self) -> tuple[Message, ...]:
        """Display copy of the conversation (no preamble)."""
        return tuple(self._messages)

    @property
    def in_flight(self) -> int | None:
        """Slot index of the streaming assistant turn, if any."""
        return self._in_flight

    def __len__(self) -> int:
        return len(self._messages)

    def __getitem__(self, slot: int) -> Message:
        return self._messages[slot]

    def append_user(self, text: str) -> Message:
        """Append a user turn holding the literal submitted text.

        Raises:
            TurnInProgressError: If an assistant turn is still streaming
        """
        if self._in_flight is not None:
            raise TurnInProgressError(self._in_flight)
        message = Message(role="user", content=text)
        self._messages.append(message)
        return message

    def begin_assistant_turn(self) -> int:
        """Append an empty assistant turn and mark it in flight.

        Returns:
            Slot index the stream consumer writes into

        Raises:
            TurnInProgressError: If another assistant turn is still streaming
        """
        if self._in_flight is not None:
            raise TurnInProgressError(self._in_flight)
        self._messages.append(Message(role="assistant", content=""))
        self._in_flight = len(self._messages) - 1
        self._debug("debug", f"Assistant turn opened in slot {self._in_flight}")
        return self._in_flight

    def _is_writable(self, slot: int) -> bool:
        return (
            slot == self._in_flight
            and slot == len(self._messages) - 1
            and self._messages[slot].role == "assistant"
        )

    def apply_delta(self, slot: int, delta: str) -> bool:
        """Replace the in-flight turn with one whose content ends in delta.

        A slot that is not the in-flight assistant turn is a sequencing
        fault: it is logged and the conversation is left unchanged.

        Returns:
            True if the delta was applied
        """
        if not self._is_writable(slot):
            self._debug(
                "error",
                f"Dropped delta for slot {slot}: in-flight slot is {self._in_flight}, "
                f"conversation has {len(self._messages)} turns",
            )
            return False
        self._messages[slot] = self._messages[slot].extended(delta)
        return True

    def finalize_or_fail(self, slot: int, fallback_text: str = FALLBACK_MESSAGE) -> bool:
        """Overwrite the in-flight turn with the failure text and close it.

        Partially streamed content is discarded.

        Returns:
            True if the slot was overwritten
        """
        if not self._is_writable(slot):
            self._debug("error", f"Cannot fail slot {slot}: not the in-flight assistant turn")
            return False
        self._messages[slot] = Message(role="assistant", content=fallback_text)
        self._in_flight = None
        return True

    def finish_turn(self, slot: int) -> bool:
        """Close the in-flight turn, keeping its accumulated content."""
        if slot != self._in_flight:
            self._debug("error", f"Cannot finish slot {slot}: in-flight slot is {self._in_flight}")
            return False
        self._in_flight = None
        self._debug("debug", f"Assistant turn in slot {slot} closed")
        return True

    def clear(self) -> None:
        """Remove all turns.

        Raises:
            TurnInProgressError: If an assistant turn is still streaming
        """
        if self._in_flight is not None:
            raise TurnInProgressError(self._in_flight)
        self._messages.clear()

    def outbound_messages(self) -> list[ChatMessage]:
        """Build the request for the backend.

        Contains every settled turn; the newest user turn carries the
        preamble in front of its text. The in-flight placeholder is not
        sent.
        """
        settled = self._messages[:self._in_flight] if self._in_flight is not None else self._messages
        outbound = [ChatMessage(role=msg.role, content=msg.content) for msg in settled]

        for index in range(len(outbound) - 1, -1, -1):
            if outbound[index].role == "user":
                outbound[index] = ChatMessage(
                    role="user", content=self._preamble + outbound[index].content
                )
                break

        return outbound
