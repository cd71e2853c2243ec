from typing import Any

from .base import LLMProvider
from .providers import AnthropicProvider, DeepSeekProvider, GeminiProvider, OpenAIProvider

_PROVIDERS: dict[str, type[LLMProvider]] = {
    "openai": OpenAIProvider,
    "deepseek": DeepSeekProvider,
    "anthropic": AnthropicProvider,
    "claude": AnthropicProvider,
    "gemini": GeminiProvider,
}

SUPPORTED_PROVIDERS = ("openai", "deepseek", "anthropic", "gemini")


def create_llm_provider(provider: str, **config: Any) -> LLMProvider:
    """Create a generation backend.

    Args:
        provider: Provider type ('openai', 'deepseek', 'anthropic'/'claude', 'gemini')
        **config: Provider-specific configuration. Every provider requires
            'api_key'; 'model' overrides the provider default. OpenAI also
            accepts 'base_url' and 'organization'.

    Returns:
        Initialized LLM provider instance

    Raises:
        ValueError: If provider type is not supported
        TypeError: If 'api_key' is missing

    Examples:
        >>> provider = create_llm_provider("deepseek", api_key="sk-...")
        >>> provider = create_llm_provider(
        ...     "anthropic",
        ...     api_key="sk-ant-...",
        ...     model="claude-sonnet-4-20250514"
        ... )
    """
    provider_cls = _PROVIDERS.get(provider.lower())
    if provider_cls is None:
        raise ValueError(
            f"Unsupported provider: {provider}. "
            f"Supported providers: {', '.join(repr(p) for p in SUPPORTED_PROVIDERS)}"
        )

    if "api_key" not in config:
        raise TypeError(f"{provider_cls.__name__} requires 'api_key' in config")

    return provider_cls(**config)
