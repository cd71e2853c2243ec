"""Google Gemini backend.

Uses the official Google GenAI SDK for async streaming.
Reference: https://github.com/googleapis/python-genai
"""

from collections.abc import AsyncIterator, Callable
from typing import Any

from google import genai
from google.genai import types

from ..base import LLMProvider
from ..models import ChatMessage, StreamingResponse

# Relaxed so that generated markup and scripts are not blocked
DEFAULT_SAFETY_SETTINGS = [
    types.SafetySetting(category="HARM_CATEGORY_HARASSMENT", threshold="BLOCK_ONLY_HIGH"),
    types.SafetySetting(category="HARM_CATEGORY_HATE_SPEECH", threshold="BLOCK_ONLY_HIGH"),
    types.SafetySetting(category="HARM_CATEGORY_SEXUALLY_EXPLICIT", threshold="BLOCK_ONLY_HIGH"),
    types.SafetySetting(category="HARM_CATEGORY_DANGEROUS_CONTENT", threshold="BLOCK_ONLY_HIGH"),
]


def _chunk_text(chunk: types.GenerateContentResponse) -> str:
    """Extract the text of one streamed chunk; empty for filtered chunks."""
    if chunk.candidates:
        candidate = chunk.candidates[0]
        if candidate.content and candidate.content.parts:
            return "".join(part.text for part in candidate.content.parts if part.text)
    return ""


class GeminiProvider(LLMProvider):
    """Google Gemini backend.

    Hidden design decisions:
    - Google GenAI client initialization
    - 'assistant' turns are sent with Gemini's 'model' role
    - Automatic function calling disabled so code-like prompts stay text
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        **client_kwargs: Any
    ):
        self._model = model
        self._client = genai.Client(api_key=api_key, **client_kwargs)

    @property
    def model(self) -> str:
        return self._model

    def _convert_messages(self, messages: list[ChatMessage]) -> tuple[str | None, list[types.Content]]:
        """Split out the system instruction and convert the remaining turns."""
        system_instruction = None
        contents = []

        for msg in messages:
            if msg.role == "system":
                system_instruction = msg.content
            else:
                role = "model" if msg.role == "assistant" else "user"
                contents.append(types.Content(role=role, parts=[types.Part(text=msg.content)]))

        return system_instruction, contents

    async def chat_completion_stream(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> StreamingResponse:
        """Stream a chat completion from Gemini.

        Args:
            messages: Conversation history
            model: Model to use (overrides default)
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            **kwargs: Additional GenerateContentConfig fields

        Returns:
            StreamingResponse that yields text fragments and captures usage info
        """
        system_instruction, contents = self._convert_messages(messages)

        config = types.GenerateContentConfig(
            temperature=temperature,
            system_instruction=system_instruction,
            safety_settings=DEFAULT_SAFETY_SETTINGS,
            tool_config=types.ToolConfig(
                function_calling_config=types.FunctionCallingConfig(mode="NONE")
            ),
            **kwargs
        )
        if max_tokens is not None:
            config.max_output_tokens = max_tokens

        response = StreamingResponse(self._stream_generator(
            model or self._model, contents, config, lambda usage: response.set_usage(usage)
        ))
        return response

    async def _stream_generator(
        self,
        model: str,
        contents: list[types.Content],
        config: types.GenerateContentConfig,
        on_usage: Callable[[dict[str, Any]], None],
    ) -> AsyncIterator[str]:
        usage = None

        stream = await self._client.aio.models.generate_content_stream(
            model=model, contents=contents, config=config
        )
        async for chunk in stream:
            # usage_metadata is complete on the final chunk
            if chunk.usage_metadata:
                usage = {
                    "prompt_tokens": chunk.usage_metadata.prompt_token_count or 0,
                    "completion_tokens": chunk.usage_metadata.candidates_token_count or 0,
                    "total_tokens": chunk.usage_metadata.total_token_count or 0,
                }
            text = _chunk_text(chunk)
            if text:
                yield text

        if usage:
            on_usage(usage)

    async def close(self) -> None:
        """Nothing to release; the GenAI client holds no open session."""
