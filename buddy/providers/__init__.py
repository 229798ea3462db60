"""
Multi-provider LLM API clients.

Every supported vendor speaks the OpenAI chat-completions format:
- chatgpt (OpenAI)
- deepseek (DeepSeek)
- grok (xAI)

Usage:
    from buddy.providers import ProviderRegistry

    registry = ProviderRegistry.from_settings(settings)

    # Query one provider
    result = await registry.ask("deepseek", messages)

    # Query several providers in parallel
    results = await registry.ask_parallel(["chatgpt", "grok"], messages)
"""

from .openai_compatible import OpenAICompatibleProvider
from .registry import ChatProvider, ProviderRegistry, result_text

__all__ = ["ChatProvider", "OpenAICompatibleProvider", "ProviderRegistry", "result_text"]
