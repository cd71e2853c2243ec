"""Pytest configuration and shared fixtures."""
import asyncio
from typing import Any

import pytest

from pagechat.errors import ClipboardError, SandboxError
from pagechat.llm.base import LLMProvider
from pagechat.llm.models import ChatMessage, StreamingResponse
from pagechat.render import CodeBlock
from pagechat.render.code import classify_code


class ScriptedProvider(LLMProvider):
    """Backend that replays a fixed list of fragments.

    Args:
        fragments: Fragments yielded in order
        error: Raised after the last fragment, if given
        request_error: Raised by the call itself, before any stream exists
        delay: Seconds to sleep before each fragment
        usage: Usage reported once the stream is exhausted
        hang: Block forever after the last fragment (until cancelled)
    """

    def __init__(
        self,
        fragments: list[str] | tuple[str, ...] = (),
        error: Exception | None = None,
        request_error: Exception | None = None,
        delay: float = 0.0,
        usage: dict[str, Any] | None = None,
        hang: bool = False,
    ) -> None:
        self._fragments = list(fragments)
        self._error = error
        self._request_error = request_error
        self._delay = delay
        self._usage = usage
        self._hang = hang
        self.requests: list[list[ChatMessage]] = []
        self.closed = False

    @property
    def model(self) -> str:
        return "scripted"

    async def chat_completion_stream(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> StreamingResponse:
        self.requests.append(list(messages))
        if self._request_error is not None:
            raise self._request_error

        async def _generate():
            for fragment in self._fragments:
                if self._delay:
                    await asyncio.sleep(self._delay)
                yield fragment
            if self._error is not None:
                raise self._error
            if self._hang:
                await asyncio.Event().wait()
            if self._usage is not None:
                response.set_usage(self._usage)

        response = StreamingResponse(_generate())
        return response

    async def close(self) -> None:
        self.closed = True


class RecordingClipboard:
    """Clipboard that keeps everything written to it."""

    def __init__(self) -> None:
        self.texts: list[str] = []

    async def write_text(self, text: str) -> None:
        self.texts.append(text)


class FailingClipboard:
    """Clipboard that always refuses."""

    def __init__(self, reason: str = "no display") -> None:
        self.reason = reason

    async def write_text(self, text: str) -> None:
        raise ClipboardError(self.reason)


class FailingSandbox:
    """Sandbox that cannot create surfaces."""

    async def render(self, document: str):
        raise SandboxError("disk full")


class DebugRecorder:
    """Debug callback collecting (level, component, message) tuples."""

    def __init__(self) -> None:
        self.entries: list[tuple[str, str, str]] = []

    def __call__(self, level: str, component: str, message: str) -> None:
        self.entries.append((level, component, message))

    def levels(self, component: str | None = None) -> list[str]:
        return [level for level, comp, _ in self.entries if component is None or comp == component]


def make_code_block(text: str, language: str | None = None) -> CodeBlock:
    lexer, kind = classify_code(language, text)
    return CodeBlock(language=language, text=text, lexer=lexer, kind=kind)


@pytest.fixture
def scripted_provider():
    """Return the ScriptedProvider class for building fake backends."""
    return ScriptedProvider


@pytest.fixture
def recording_clipboard():
    return RecordingClipboard()


@pytest.fixture
def failing_clipboard():
    return FailingClipboard()


@pytest.fixture
def failing_sandbox():
    return FailingSandbox()


@pytest.fixture
def debug_recorder():
    return DebugRecorder()


@pytest.fixture
def code_block():
    """Return a factory for classified code blocks."""
    return make_code_block


@pytest.fixture
def sample_page():
    """Return a small self-contained HTML document."""
    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        "<head><title>Card</title></head>\n"
        "<body>\n"
        '  <div class="card"><h2>Title</h2><script>console.log("hi")</script></div>\n'
        "</body>\n"
        "</html>"
    )

