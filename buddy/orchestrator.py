"""Parallel and pipeline orchestration across providers."""

import logging
from typing import Any, Dict, List, Mapping, Optional

from .config import DEFAULT_PROVIDERS, MAX_ANSWER_CHARS, Settings
from .messages import build_messages
from .providers import ProviderRegistry, result_text
from .synthesizer import Synthesizer

logger = logging.getLogger(__name__)

SUMMARIZER_PLACEHOLDER = "(used as summarizer)"


def build_polish_prompt(query: str, draft: str) -> str:
    return (
        "You are given a user query and a draft/retrieved answer. Produce a final, polished answer "
        "that is accurate, concise, and well-structured. Improve clarity, fix any issues, and add "
        "missing steps if necessary.\n\n"
        f"User query:\n{query}\n\nDraft answer:\n{draft[:MAX_ANSWER_CHARS]}"
    )


class Orchestrator:
    """
    Runs one query against the configured providers.

    Holds no per-run state, so a single instance serves concurrent requests.
    """

    def __init__(
        self,
        settings: Settings,
        registry: ProviderRegistry,
        synthesizer: Optional[Synthesizer] = None
    ):
        self.settings = settings
        self.registry = registry
        self.synthesizer = synthesizer or Synthesizer(registry, self.default_provider)

    @property
    def default_provider(self) -> str:
        if self.settings.default_summarizer in self.registry:
            return self.settings.default_summarizer.lower()
        return self.registry.names[0]

    def _pick(self, name: Optional[str]) -> str:
        """Registered identity for name, or the default provider."""
        if name and name in self.registry:
            return str(name).lower()
        return self.default_provider

    async def run(
        self,
        mode: Optional[str],
        enabled_providers: Optional[List[str]],
        query: str,
        history: Any = None,
        pipeline: Optional[Mapping[str, Optional[str]]] = None,
        summarizer: Optional[str] = None
    ) -> Dict[str, str]:
        """
        Entry point used by the HTTP layer.

        An empty provider list means every default provider; any mode other
        than "pipeline" runs in parallel.
        """
        enabled = list(enabled_providers) if enabled_providers else list(DEFAULT_PROVIDERS)
        run_mode = (mode or "parallel").lower()

        if run_mode == "pipeline":
            pipeline = pipeline or {}
            return await self.run_pipeline(
                enabled,
                query,
                history,
                retriever=pipeline.get("retriever"),
                summarizer=pipeline.get("summarizer"),
            )
        return await self.run_parallel(enabled, query, history, summarizer)

    async def run_parallel(
        self,
        enabled_providers: List[str],
        query: str,
        history: Any = None,
        summarizer: Optional[str] = None
    ) -> Dict[str, str]:
        """Ask every enabled provider at once, then merge the answers."""
        providers = self.registry.resolve(enabled_providers)
        logger.info("Parallel run across %s", providers)

        messages = build_messages(history, query)
        results = await self.registry.ask_parallel(providers, messages)
        answers = {name: result_text(results[name]) for name in providers}

        combined = await self.synthesizer.synthesize(query, history, answers, summarizer)
        return {**answers, "combined": combined}

    async def run_pipeline(
        self,
        enabled_providers: List[str],
        query: str,
        history: Any = None,
        retriever: Optional[str] = None,
        summarizer: Optional[str] = None
    ) -> Dict[str, str]:
        """Draft with the retriever, then have the summarizer polish the draft."""
        retriever_name = self._pick(retriever or (enabled_providers[0] if enabled_providers else None))
        summarizer_name = self._pick(summarizer or self.settings.default_summarizer)
        logger.info("Pipeline run: retriever=%s summarizer=%s", retriever_name, summarizer_name)

        draft_result = await self.registry.ask(retriever_name, build_messages(history, query))
        draft = result_text(draft_result)
        answers = {retriever_name: draft}

        polish_messages = build_messages(history, build_polish_prompt(query, draft))
        final_result = await self.registry.ask(summarizer_name, polish_messages)
        combined = result_text(final_result)

        answers.setdefault(summarizer_name, SUMMARIZER_PLACEHOLDER)
        return {**answers, "combined": combined}
