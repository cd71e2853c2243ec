from .anthropic import AnthropicProvider
from .deepseek import DeepSeekProvider
from .gemini import GeminiProvider
from .openai import OpenAIProvider

__all__ = ["AnthropicProvider", "DeepSeekProvider", "GeminiProvider", "OpenAIProvider"]
