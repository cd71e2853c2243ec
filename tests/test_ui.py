"""Tests for the Textual front end, driven through the app pilot."""
import asyncio

import pytest
from textual.widgets import Button, TextArea

from pagechat.actions import IframeSandbox
from pagechat.conversation import FALLBACK_MESSAGE, StreamStatus
from pagechat.ui import (
    AssistantMessage,
    ChatHistoryWidget,
    ChatInputBar,
    CodeActionBar,
    PageChatApp,
    PromptSuggestions,
    StatusPanel,
    UserMessage,
)

REPLY = ["Here you go:\n\n```html\n<!DOCTYPE html>\n<html>", "<body>hi</body></html>\n```\n", "Done."]


def _make_app(tmp_path, provider, clipboard, sandbox=None) -> PageChatApp:
    return PageChatApp(
        llm=provider,
        clipboard=clipboard,
        sandbox=sandbox or IframeSandbox(tmp_path),
        prompts=["A card component", "A footer"],
        revert_delay=0.05,
    )


async def _submit(app: PageChatApp, pilot, text: str) -> None:
    app.query_one("#chat-input-bar", ChatInputBar).set_text(text)
    await pilot.press("enter")
    await pilot.pause()
    await app.workers.wait_for_complete()
    await pilot.pause()


class TestChatFlow:
    """Tests for submitting prompts and showing streamed replies."""

    @pytest.mark.asyncio
    async def test_landing_view_lists_prompts(self, tmp_path, scripted_provider, recording_clipboard):
        app = _make_app(tmp_path, scripted_provider(["ok"]), recording_clipboard)
        async with app.run_test(size=(100, 40)):
            suggestions = app.query_one("#suggestions", PromptSuggestions)
            assert suggestions.display
            assert len(suggestions.query(".suggestion")) == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("index", "prompt"), [(0, "A card component"), (1, "A footer")])
    async def test_choosing_prompt_prefills_input(self, tmp_path, scripted_provider, recording_clipboard, index, prompt):
        """Test that a suggestion on the empty landing view fills the input without submitting."""
        provider = scripted_provider(["ok"])
        app = _make_app(tmp_path, provider, recording_clipboard)
        async with app.run_test(size=(100, 40)) as pilot:
            assert app.query_one("#chat-history", ChatHistoryWidget).message_count == 0

            await pilot.click(f"#suggestion-{index}")
            await pilot.pause()

            assert app.query_one("#chat-input", TextArea).text == prompt
            assert provider.requests == []

    @pytest.mark.asyncio
    async def test_submit_shows_streamed_reply(self, tmp_path, scripted_provider, recording_clipboard):
        provider = scripted_provider(REPLY)
        app = _make_app(tmp_path, provider, recording_clipboard)
        async with app.run_test(size=(100, 40)) as pilot:
            await _submit(app, pilot, "a card")

            messages = app.session.conversation.messages
            assert [m.role for m in messages] == ["user", "assistant"]
            assert messages[1].content == "".join(REPLY)

            chat = app.query_one("#chat-history", ChatHistoryWidget)
            assert chat.message_count == 2
            assert not app.query_one("#suggestions", PromptSuggestions).display
            assert app.query_one(UserMessage).content == "a card"
            assistant = app.query_one(AssistantMessage)
            assert assistant.content == "".join(REPLY)
            assert not assistant.has_class("-streaming")
            assert app.query_one("#chat-input", TextArea).text == ""
            assert "Status: completed" in app.query_one("#status", StatusPanel).get_plain_text()

    @pytest.mark.asyncio
    async def test_failed_reply_shows_fallback(self, tmp_path, scripted_provider, recording_clipboard):
        provider = scripted_provider(["Hel", "lo"], error=ConnectionError("reset"))
        app = _make_app(tmp_path, provider, recording_clipboard)
        async with app.run_test(size=(100, 40)) as pilot:
            await _submit(app, pilot, "hi")

            assert app.query_one(AssistantMessage).content == FALLBACK_MESSAGE
            assert app.session.last_outcome.status is StreamStatus.FAILED
            assert not app.session.busy

    @pytest.mark.asyncio
    async def test_cancel_keeps_partial_reply(self, tmp_path, scripted_provider, recording_clipboard):
        provider = scripted_provider(["part", "ial"], hang=True)
        app = _make_app(tmp_path, provider, recording_clipboard)
        async with app.run_test(size=(100, 40)) as pilot:
            app.query_one("#chat-input-bar", ChatInputBar).set_text("hi")
            await pilot.press("enter")
            for _ in range(200):
                await pilot.pause()
                messages = app.session.conversation.messages
                if len(messages) == 2 and messages[1].content == "partial":
                    break
                await asyncio.sleep(0.005)

            app.action_cancel_stream()
            await app.workers.wait_for_complete()
            await pilot.pause()

            assert app.session.last_outcome.status is StreamStatus.CANCELLED
            assert app.query_one(AssistantMessage).content == "partial"
            assert not app.query_one("#chat-input-bar", ChatInputBar).busy

    @pytest.mark.asyncio
    async def test_clear_returns_to_landing_view(self, tmp_path, scripted_provider, recording_clipboard):
        app = _make_app(tmp_path, scripted_provider(["ok"]), recording_clipboard)
        async with app.run_test(size=(100, 40)) as pilot:
            await _submit(app, pilot, "hi")

            app.action_clear_chat()
            await pilot.pause()

            assert len(app.session.conversation) == 0
            assert app.query_one("#chat-history", ChatHistoryWidget).message_count == 0
            assert app.query_one("#suggestions", PromptSuggestions).display


class TestCodeActionsInView:
    """Tests for code block controls inside a rendered reply."""

    @pytest.mark.asyncio
    async def test_code_block_gets_action_bar(self, tmp_path, scripted_provider, recording_clipboard):
        app = _make_app(tmp_path, scripted_provider(REPLY), recording_clipboard)
        async with app.run_test(size=(100, 40)) as pilot:
            await _submit(app, pilot, "a card")

            bar = app.query_one(AssistantMessage).query_one(CodeActionBar)
            assert bar.actions.language == "html"
            assert bar.actions.previewable
            assert bar.actions.text == "<!DOCTYPE html>\n<html><body>hi</body></html>"

    @pytest.mark.asyncio
    async def test_copy_marks_bar_as_copied(self, tmp_path, scripted_provider, recording_clipboard):
        clipboard = recording_clipboard
        app = _make_app(tmp_path, scripted_provider(REPLY), clipboard)
        async with app.run_test(size=(100, 40)) as pilot:
            await _submit(app, pilot, "a card")
            bar = app.query_one(CodeActionBar)

            assert await bar.actions.copy()
            await pilot.pause()
            assert clipboard.texts == [bar.actions.text]
            assert bar.query_one(".copy-btn").has_class("-copied")

            await asyncio.sleep(0.15)
            await pilot.pause()
            assert not bar.query_one(".copy-btn").has_class("-copied")

    @pytest.mark.asyncio
    async def test_copy_failure_leaves_conversation_alone(self, tmp_path, scripted_provider, failing_clipboard):
        app = _make_app(tmp_path, scripted_provider(REPLY), failing_clipboard)
        async with app.run_test(size=(100, 40)) as pilot:
            await _submit(app, pilot, "a card")
            bar = app.query_one(CodeActionBar)

            assert not await bar.actions.copy()
            await pilot.pause()

            assert not bar.query_one(".copy-btn").has_class("-copied")
            assert app.session.conversation[1].content == "".join(REPLY)

    @pytest.mark.asyncio
    async def test_clear_releases_previews(self, tmp_path, scripted_provider, recording_clipboard):
        app = _make_app(tmp_path, scripted_provider(REPLY), recording_clipboard)
        async with app.run_test(size=(100, 40)) as pilot:
            await _submit(app, pilot, "a card")
            surface = await app.query_one(CodeActionBar).actions.open_preview()
            assert surface is not None and surface.path.exists()

            app.action_clear_chat()
            await pilot.pause()

            assert surface.closed
            assert not surface.path.exists()

    @pytest.mark.asyncio
    async def test_copy_button_failure_posts_no_notification(self, tmp_path, scripted_provider, failing_clipboard):
        """Test that a refused copy is only logged, never shown as a toast."""
        app = _make_app(tmp_path, scripted_provider(REPLY), failing_clipboard)
        async with app.run_test(size=(100, 40)) as pilot:
            await _submit(app, pilot, "a card")
            bar = app.query_one(CodeActionBar)
            before = len(app._notifications)

            bar.query_one(".copy-btn", Button).press()
            for _ in range(5):
                await pilot.pause()

            assert len(app._notifications) == before
            assert not bar.query_one(".copy-btn").has_class("-copied")

    @pytest.mark.asyncio
    async def test_preview_button_failure_posts_no_notification(
        self, tmp_path, scripted_provider, recording_clipboard, failing_sandbox
    ):
        app = _make_app(tmp_path, scripted_provider(REPLY), recording_clipboard, sandbox=failing_sandbox)
        async with app.run_test(size=(100, 40)) as pilot:
            await _submit(app, pilot, "a card")
            bar = app.query_one(CodeActionBar)
            before = len(app._notifications)

            bar.query_one(".preview-btn", Button).press()
            for _ in range(5):
                await pilot.pause()

            assert len(app._notifications) == before
            assert len(app.screen_stack) == 1
            assert not bar.actions.state.preview_open
