"""
Provider registry for multi-provider LLM queries.

Maps a provider identity ("chatgpt", "deepseek", "grok") to its adapter.
Lookups are case-insensitive and answers always come back in registration
order, whatever order the calls finish in.
"""

import asyncio
from typing import Dict, Iterable, List, Optional, Protocol

import httpx

from ..config import PROVIDER_SPECS, Settings
from .openai_compatible import OpenAICompatibleProvider


class ChatProvider(Protocol):
    name: str

    async def send(
        self,
        messages: List[Dict[str, str]],
        model: Optional[str] = None
    ) -> Dict[str, str]:
        ...


def result_text(result: Optional[Dict[str, str]]) -> str:
    """Content if present, else error text, else ''."""
    if not result:
        return ""
    return result.get("content") or result.get("error") or ""


class ProviderRegistry:
    """Ordered mapping of provider identity to adapter."""

    def __init__(self, providers: Iterable[ChatProvider]):
        self._providers: Dict[str, ChatProvider] = {}
        for provider in providers:
            self._providers[provider.name.lower()] = provider

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> "ProviderRegistry":
        return cls(
            OpenAICompatibleProvider(
                spec,
                settings.api_key(spec.name),
                timeout=settings.request_timeout,
                transport=transport,
            )
            for spec in PROVIDER_SPECS
        )

    @property
    def names(self) -> List[str]:
        return list(self._providers)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._providers

    def get(self, name: Optional[str]) -> Optional[ChatProvider]:
        if not name:
            return None
        return self._providers.get(str(name).lower())

    def resolve(self, names: Optional[Iterable[str]]) -> List[str]:
        """
        Match requested names against the registry.

        Returns:
            Known identities in registration order; unknown names are ignored
        """
        wanted = {str(n).lower() for n in (names or [])}
        return [name for name in self._providers if name in wanted]

    async def ask(
        self,
        name: str,
        messages: List[Dict[str, str]],
        model: Optional[str] = None
    ) -> Dict[str, str]:
        provider = self.get(name)
        if provider is None:
            return {"error": f"Unknown provider '{name}'"}
        return await provider.send(messages, model)

    async def ask_parallel(
        self,
        names: List[str],
        messages: List[Dict[str, str]]
    ) -> Dict[str, Dict[str, str]]:
        """
        Query several providers concurrently with the same messages.

        Args:
            names: Provider identities, in the order results should be keyed
            messages: List of message dicts to send to each provider

        Returns:
            Dict mapping provider identity to its result
        """
        tasks = [self.ask(name, messages) for name in names]

        # Wait for all to complete
        results = await asyncio.gather(*tasks)

        return {name: result for name, result in zip(names, results)}
