"""Unit tests for the conversation model."""
import pytest
from hypothesis import given
from hypothesis import strategies as st
from pydantic import ValidationError

from pagechat.conversation import FALLBACK_MESSAGE, Conversation, Message, StreamOutcome, StreamStatus
from pagechat.errors import TurnInProgressError
from pagechat.llm.models import ChatMessage


class TestMessage:
    """Tests for the Message model."""

    def test_message_is_immutable(self):
        """Test that a message cannot be edited in place."""
        message = Message(role="user", content="hi")
        with pytest.raises(ValidationError):
            message.content = "changed"  # type: ignore[misc]

    def test_extended_returns_new_message(self):
        message = Message(role="assistant", content="Hel")
        extended = message.extended("lo")

        assert extended.content == "Hello"
        assert extended.role == "assistant"
        assert message.content == "Hel"

    def test_role_is_restricted(self):
        """Test that only user and assistant turns are visible."""
        with pytest.raises(ValidationError):
            Message(role="system", content="x")  # type: ignore[arg-type]

    def test_outcome_defaults(self):
        outcome = StreamOutcome(slot=1, status=StreamStatus.COMPLETED)
        assert outcome.fragments == 0
        assert outcome.usage is None
        assert outcome.error is None


class TestConversation:
    """Tests for Conversation mutations and invariants."""

    def test_new_conversation_is_empty(self):
        conversation = Conversation()
        assert len(conversation) == 0
        assert conversation.in_flight is None
        assert conversation.messages == ()

    def test_begin_assistant_turn_appends_empty_placeholder(self):
        conversation = Conversation()
        conversation.append_user("hello")
        slot = conversation.begin_assistant_turn()

        assert slot == 1
        assert conversation.in_flight == 1
        assert conversation[1] == Message(role="assistant", content="")

    def test_apply_delta_accumulates(self):
        conversation = Conversation()
        conversation.append_user("hello")
        slot = conversation.begin_assistant_turn()

        assert conversation.apply_delta(slot, "Hel")
        assert conversation.apply_delta(slot, "lo")
        assert conversation[slot].content == "Hello"

    def test_apply_delta_replaces_message_object(self):
        """Test that each delta produces a new Message."""
        conversation = Conversation()
        conversation.append_user("hello")
        slot = conversation.begin_assistant_turn()
        before = conversation[slot]

        conversation.apply_delta(slot, "x")

        assert conversation[slot] is not before
        assert before.content == ""

    def test_apply_delta_wrong_slot_is_dropped(self, debug_recorder):
        """Test that a sequencing fault is logged and changes nothing."""
        conversation = Conversation()
        conversation.set_debug_callback(debug_recorder)
        conversation.append_user("hello")
        slot = conversation.begin_assistant_turn()

        assert not conversation.apply_delta(0, "oops")
        assert not conversation.apply_delta(slot + 1, "oops")
        assert conversation.messages == (
            Message(role="user", content="hello"),
            Message(role="assistant", content=""),
        )
        assert "error" in debug_recorder.levels("Conversation")

    def test_apply_delta_after_finish_is_dropped(self):
        conversation = Conversation()
        conversation.append_user("hello")
        slot = conversation.begin_assistant_turn()
        conversation.apply_delta(slot, "done")
        conversation.finish_turn(slot)

        assert not conversation.apply_delta(slot, " more")
        assert conversation[slot].content == "done"

    def test_append_user_while_streaming_fails(self):
        """Test the single in-flight invariant."""
        conversation = Conversation()
        conversation.append_user("one")
        conversation.begin_assistant_turn()

        with pytest.raises(TurnInProgressError):
            conversation.append_user("two")
        with pytest.raises(TurnInProgressError):
            conversation.begin_assistant_turn()
        assert len(conversation) == 2

    def test_finalize_or_fail_discards_partial_content(self):
        conversation = Conversation()
        conversation.append_user("hello")
        slot = conversation.begin_assistant_turn()
        conversation.apply_delta(slot, "Hel")

        assert conversation.finalize_or_fail(slot, FALLBACK_MESSAGE)
        assert conversation[slot].content == FALLBACK_MESSAGE
        assert conversation.in_flight is None

    def test_finalize_or_fail_wrong_slot(self):
        conversation = Conversation()
        conversation.append_user("hello")
        slot = conversation.begin_assistant_turn()

        assert not conversation.finalize_or_fail(0)
        assert conversation.in_flight == slot

    def test_finish_turn_keeps_content(self):
        conversation = Conversation()
        conversation.append_user("hello")
        slot = conversation.begin_assistant_turn()
        conversation.apply_delta(slot, "partial")

        assert conversation.finish_turn(slot)
        assert conversation.in_flight is None
        assert conversation[slot].content == "partial"
        assert not conversation.finish_turn(slot)

    def test_clear(self):
        conversation = Conversation()
        conversation.append_user("hello")
        slot = conversation.begin_assistant_turn()

        with pytest.raises(TurnInProgressError):
            conversation.clear()

        conversation.finish_turn(slot)
        conversation.clear()
        assert len(conversation) == 0

    @given(st.lists(st.text(), max_size=30))
    def test_content_is_concatenation_of_deltas(self, deltas: list[str]):
        """Property test: content equals the in-order concatenation of deltas."""
        conversation = Conversation()
        conversation.append_user("q")
        slot = conversation.begin_assistant_turn()
        for delta in deltas:
            conversation.apply_delta(slot, delta)

        assert conversation[slot].content == "".join(deltas)
        assert conversation[slot].role == "assistant"
        assert conversation.in_flight == len(conversation) - 1


class TestOutboundMessages:
    """Tests for the request built for the backend."""

    def test_preamble_is_prefixed_to_newest_user_turn(self):
        conversation = Conversation(preamble="Build a page: ")
        conversation.append_user("a navbar")
        conversation.begin_assistant_turn()

        outbound = conversation.outbound_messages()

        assert outbound == [ChatMessage(role="user", content="Build a page: a navbar")]

    def test_in_flight_placeholder_is_not_sent(self):
        conversation = Conversation()
        conversation.append_user("a navbar")
        conversation.begin_assistant_turn()

        assert [m.role for m in conversation.outbound_messages()] == ["user"]

    def test_earlier_turns_are_sent_unmodified(self):
        conversation = Conversation(preamble="P: ")
        conversation.append_user("first")
        slot = conversation.begin_assistant_turn()
        conversation.apply_delta(slot, "answer")
        conversation.finish_turn(slot)
        conversation.append_user("second")

        outbound = conversation.outbound_messages()

        assert outbound == [
            ChatMessage(role="user", content="first"),
            ChatMessage(role="assistant", content="answer"),
            ChatMessage(role="user", content="P: second"),
        ]

    def test_display_copy_has_no_preamble(self):
        conversation = Conversation(preamble="P: ")
        conversation.append_user("first")

        conversation.outbound_messages()

        assert conversation[0].content == "first"
