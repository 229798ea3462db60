"""Merge several provider answers into one."""

import logging
from typing import Any, Dict, List, Mapping, Optional

from .config import DEFAULT_SUMMARIZER, MAX_ANSWER_CHARS
from .providers import ProviderRegistry

logger = logging.getLogger(__name__)

EDITOR_SYSTEM_PROMPT = "You are a careful, reliable editor and synthesizer."

# How much trailing history the merge call sees
HISTORY_WINDOW = 6


def build_merge_prompt(query: str, answers: Mapping[str, str]) -> str:
    bullets = "\n".join(
        f"- {provider}: {(answer or '')[:MAX_ANSWER_CHARS]}"
        for provider, answer in answers.items()
    )
    return (
        "You are an expert editor that merges multiple AI answers into one concise, accurate, "
        "and well-structured response.\n"
        "Given the user query and several model answers, produce a single best answer. "
        "Prefer points of agreement, resolve conflicts with justification, keep it under "
        "~12 sentences when possible, and include concrete steps or examples if helpful.\n\n"
        f"User query:\n{query}\n\nModel answers:\n{bullets}"
    )


def recent_turns(history: Any) -> List[Dict[str, str]]:
    """User/assistant turns among the last few history entries."""
    if not isinstance(history, (list, tuple)):
        return []
    turns = []
    for item in list(history)[-HISTORY_WINDOW:]:
        if not isinstance(item, dict) or not item.get("content"):
            continue
        if item.get("role") in ("user", "assistant"):
            turns.append({"role": item["role"], "content": str(item["content"])})
    return turns


def fallback_combined(answers: Mapping[str, str]) -> str:
    """Deterministic 'PROVIDER: answer' concatenation."""
    return "\n\n".join(
        f"{provider.upper()}: {answer or ''}" for provider, answer in answers.items()
    )


class Synthesizer:
    """Merges provider answers through one summarizer call."""

    def __init__(self, registry: ProviderRegistry, default_summarizer: str = DEFAULT_SUMMARIZER):
        self.registry = registry
        self.default_summarizer = default_summarizer

    async def synthesize(
        self,
        query: str,
        history: Any,
        answers: Mapping[str, str],
        summarizer: Optional[str] = None
    ) -> str:
        """
        Produce the combined answer.

        Args:
            query: The original user query
            history: Conversation history; only the recent tail is used
            answers: Provider identity -> answer (or error) text
            summarizer: Provider that performs the merge

        Returns:
            The summarizer's answer, or the concatenation fallback when it
            gives nothing back
        """
        name = str(summarizer or self.default_summarizer).lower()
        messages = [
            {"role": "system", "content": EDITOR_SYSTEM_PROMPT},
            *recent_turns(history),
            {"role": "user", "content": build_merge_prompt(query, answers)},
        ]

        if name in self.registry:
            result = await self.registry.ask(name, messages)
            if result.get("content"):
                return result["content"]
            logger.info("Summarizer %s returned no content (%s), using fallback", name, result.get("error", "empty"))
        else:
            logger.info("Unknown summarizer %r, using fallback", summarizer)

        return fallback_combined(answers)
