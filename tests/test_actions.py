"""Tests for code block copy and preview actions."""
import asyncio
import html
import threading
import webbrowser

import pyperclip
import pytest

from pagechat.actions import (
    ActionsRegistry,
    CodeActions,
    FallbackClipboard,
    IframeSandbox,
    SystemClipboard,
    build_host_page,
    is_previewable,
)
from pagechat.actions.sandbox import PreviewSurface
from pagechat.errors import ClipboardError, SandboxError


class TestPreviewable:
    """Tests for the HTML document judgement."""

    @pytest.mark.parametrize(
        ("language", "text", "expected"),
        [
            ("html", "<p>hi</p>", True),
            ("HTML", "", True),
            (None, "<!DOCTYPE html><p>x</p>", True),
            (None, "<!doctype HTML>", True),
            ("text", "<HTML lang='en'>", True),
            ("js", "document.body.innerHTML = '<p>'", False),
            (None, "<div>fragment</div>", False),
            ("xml", "<root/>", False),
        ],
    )
    def test_is_previewable(self, language, text, expected):
        assert is_previewable(language, text) is expected


class TestCopy:
    """Tests for the copy action."""

    @pytest.mark.asyncio
    async def test_copy_places_exact_text(self, recording_clipboard, code_block):
        block = code_block("print('hi')\n", "python")
        actions = CodeActions(block, recording_clipboard)

        assert await actions.copy()

        assert recording_clipboard.texts == ["print('hi')\n"]
        assert actions.state.copied
        actions.dispose()

    @pytest.mark.asyncio
    async def test_copied_state_reverts(self, recording_clipboard, code_block):
        """Test that the confirmation clears itself after the delay."""
        changes = []
        actions = CodeActions(code_block("x"), recording_clipboard, revert_delay=0.01)
        actions.set_change_callback(lambda a: changes.append(a.state.copied))

        await actions.copy()
        await asyncio.sleep(0.1)

        assert not actions.state.copied
        assert changes == [True, False]

    @pytest.mark.asyncio
    async def test_copy_again_restarts_delay(self, recording_clipboard, code_block):
        actions = CodeActions(code_block("x"), recording_clipboard, revert_delay=0.3)

        await actions.copy()
        await asyncio.sleep(0.2)
        await actions.copy()
        await asyncio.sleep(0.2)
        assert actions.state.copied

        await asyncio.sleep(0.3)
        assert not actions.state.copied

    @pytest.mark.asyncio
    async def test_copy_failure_is_logged_only(self, failing_clipboard, code_block, debug_recorder):
        actions = CodeActions(code_block("x"), failing_clipboard)
        actions.set_debug_callback(debug_recorder)

        assert not await actions.copy()

        assert not actions.state.copied
        assert debug_recorder.levels("Actions") == ["warning"]
        assert "no display" in debug_recorder.entries[0][2]

    @pytest.mark.asyncio
    async def test_failure_after_success_clears_confirmation(self, recording_clipboard, code_block):
        actions = CodeActions(code_block("x"), recording_clipboard)
        await actions.copy()

        actions._clipboard = FallbackClipboard()
        assert not await actions.copy()
        assert not actions.state.copied

    @pytest.mark.asyncio
    async def test_copy_uses_latest_snapshot(self, recording_clipboard, code_block):
        """Test that a streaming block is copied as it currently stands."""
        actions = CodeActions(code_block("def f(", "python"), recording_clipboard)
        await actions.copy()

        actions.update_text("def f():\n    return 1")
        await actions.copy()

        assert recording_clipboard.texts == ["def f(", "def f():\n    return 1"]
        assert actions.language == "python"
        actions.dispose()


class TestPreview:
    """Tests for the preview action."""

    @pytest.mark.asyncio
    async def test_preview_writes_sandboxed_host_page(self, tmp_path, recording_clipboard, code_block, sample_page):
        actions = CodeActions(code_block(sample_page, "html"), recording_clipboard, IframeSandbox(tmp_path))

        surface = await actions.open_preview()

        assert surface is not None
        assert actions.state.preview_open
        page = surface.path.read_text(encoding="utf-8")
        assert 'sandbox="allow-scripts"' in page
        assert "allow-same-origin" not in page
        assert html.escape(sample_page, quote=True) in page
        assert surface.size == len(sample_page)

    @pytest.mark.asyncio
    async def test_close_preview_discards_surface(self, tmp_path, recording_clipboard, code_block, sample_page):
        actions = CodeActions(code_block(sample_page, "html"), recording_clipboard, IframeSandbox(tmp_path))
        surface = await actions.open_preview()

        actions.close_preview()

        assert surface.closed
        assert not surface.path.exists()
        assert not actions.state.preview_open
        assert actions.surface is None

    @pytest.mark.asyncio
    async def test_reopen_renders_current_text(self, tmp_path, recording_clipboard, code_block):
        """Test that each open is a fresh render and replaces the old surface."""
        actions = CodeActions(code_block("<html><p>one", "html"), recording_clipboard, IframeSandbox(tmp_path))
        first = await actions.open_preview()

        actions.update_text("<html><p>two</p></html>")
        second = await actions.open_preview()

        assert first.closed
        assert second is not first
        assert "two" in second.path.read_text(encoding="utf-8")
        assert list(tmp_path.iterdir()) == [second.path]

    @pytest.mark.asyncio
    async def test_non_html_block_has_no_preview(self, tmp_path, recording_clipboard, code_block):
        actions = CodeActions(code_block("a = 1", "python"), recording_clipboard, IframeSandbox(tmp_path))

        assert not actions.previewable
        assert await actions.open_preview() is None
        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_no_sandbox_means_no_preview(self, recording_clipboard, code_block, sample_page):
        actions = CodeActions(code_block(sample_page, "html"), recording_clipboard)
        assert not actions.previewable
        assert await actions.open_preview() is None

    @pytest.mark.asyncio
    async def test_sandbox_failure_is_logged_only(self, failing_sandbox, recording_clipboard, code_block, debug_recorder):
        actions = CodeActions(code_block("<html>", "html"), recording_clipboard, failing_sandbox)
        actions.set_debug_callback(debug_recorder)

        assert await actions.open_preview() is None

        assert not actions.state.preview_open
        assert debug_recorder.levels("Actions") == ["warning"]


class TestSandbox:
    """Tests for host pages and surfaces."""

    def test_host_page_escapes_document(self):
        page = build_host_page('<p title="x">a & b</p>')
        assert 'srcdoc="&lt;p title=&quot;x&quot;&gt;a &amp; b&lt;/p&gt;"' in page

    def test_closed_surface_cannot_open(self, tmp_path):
        surface = PreviewSurface(tmp_path / "p.html", size=0)
        surface.close()

        with pytest.raises(SandboxError):
            surface.open_in_browser()

    def test_missing_browser_raises(self, tmp_path, monkeypatch):
        path = tmp_path / "p.html"
        path.write_text("x")
        monkeypatch.setattr(webbrowser, "open", lambda *args, **kwargs: False)

        with pytest.raises(SandboxError, match="no web browser"):
            PreviewSurface(path, size=1).open_in_browser()

    @pytest.mark.asyncio
    async def test_cleanup_removes_owned_directory(self):
        sandbox = IframeSandbox()
        surface = await sandbox.render("<html></html>")
        directory = surface.path.parent

        sandbox.cleanup()

        assert not directory.exists()

    @pytest.mark.asyncio
    async def test_cleanup_keeps_given_directory(self, tmp_path):
        sandbox = IframeSandbox(tmp_path)
        await sandbox.render("<html></html>")

        sandbox.cleanup()

        assert tmp_path.exists()


class TestRegistry:
    """Tests for per-position action lookup."""

    @pytest.mark.asyncio
    async def test_actions_survive_reparse(self, recording_clipboard, code_block):
        registry = ActionsRegistry(recording_clipboard)
        first = registry.actions_for(0, code_block("a", "js"))
        await first.copy()

        again = registry.actions_for(0, code_block("ab", "js"))

        assert again is first
        assert again.text == "ab"
        assert again.state.copied
        registry.dispose()

    def test_prune_drops_trailing_positions(self, recording_clipboard, code_block):
        registry = ActionsRegistry(recording_clipboard)
        for ordinal in range(3):
            registry.actions_for(ordinal, code_block(str(ordinal)))

        registry.prune(1)

        assert len(registry) == 1
        registry.dispose()
        assert len(registry) == 0

    def test_debug_callback_is_shared(self, failing_clipboard, code_block, debug_recorder):
        registry = ActionsRegistry(failing_clipboard, debug_callback=debug_recorder)
        actions = registry.actions_for(0, code_block("x"))

        asyncio.run(actions.copy())

        assert debug_recorder.levels("Actions") == ["warning"]


class TestClipboards:
    """Tests for clipboard capabilities."""

    @pytest.mark.asyncio
    async def test_fallback_uses_first_that_works(self, failing_clipboard, recording_clipboard):
        clipboard = FallbackClipboard(failing_clipboard, recording_clipboard)

        await clipboard.write_text("hi")

        assert recording_clipboard.texts == ["hi"]

    @pytest.mark.asyncio
    async def test_fallback_raises_when_all_fail(self, failing_clipboard):
        with pytest.raises(ClipboardError, match="no display"):
            await FallbackClipboard(failing_clipboard).write_text("hi")

    @pytest.mark.asyncio
    async def test_system_clipboard_wraps_pyperclip_errors(self, monkeypatch):
        def refuse(text):
            raise pyperclip.PyperclipException("no copy mechanism")

        monkeypatch.setattr(pyperclip, "copy", refuse)

        with pytest.raises(ClipboardError, match="no copy mechanism"):
            await SystemClipboard().write_text("hi")

    @pytest.mark.asyncio
    async def test_system_clipboard_copies_off_the_event_loop(self, monkeypatch):
        """Test that the blocking pyperclip call runs in a worker thread."""
        calls = []
        monkeypatch.setattr(pyperclip, "copy", lambda text: calls.append((text, threading.get_ident())))

        await SystemClipboard().write_text("hi")

        assert calls == [("hi", calls[0][1])]
        assert calls[0][1] != threading.get_ident()
