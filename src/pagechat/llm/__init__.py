"""Generation backends.

The chat pipeline consumes a backend only as "ordered conversation in,
token stream out"; everything provider-specific stays in this package.
"""

from .base import LLMProvider
from .factory import SUPPORTED_PROVIDERS, create_llm_provider
from .models import ChatMessage, StreamingResponse
from .providers import AnthropicProvider, DeepSeekProvider, GeminiProvider, OpenAIProvider

__all__ = [
    "LLMProvider",
    "SUPPORTED_PROVIDERS",
    "create_llm_provider",
    "ChatMessage",
    "StreamingResponse",
    "AnthropicProvider",
    "DeepSeekProvider",
    "GeminiProvider",
    "OpenAIProvider",
]
