"""Build OpenAI-style chat message lists from a simple history."""

from typing import Any, Dict, List

SYSTEM_PROMPT = (
    "You are an expert assistant. Provide accurate, concise, and well-structured answers. "
    "Use markdown where helpful."
)

ROLES = ("system", "user", "assistant")


def build_messages(history: Any, query: Any) -> List[Dict[str, str]]:
    """
    Turn a conversation history plus a new query into a message list.

    Args:
        history: Sequence of {'role', 'content'} items; malformed items are dropped
        query: The new user query, appended only if it is not blank

    Returns:
        List of message dicts, always starting with the system prompt
    """
    messages = [{"role": "system", "content": SYSTEM_PROMPT}]

    if isinstance(history, (list, tuple)):
        for item in history:
            if not isinstance(item, dict):
                continue
            role = item.get("role")
            content = item.get("content")
            if not role or not content:
                continue
            if role in ROLES:
                messages.append({"role": role, "content": str(content)})

    if query is not None and str(query).strip():
        messages.append({"role": "user", "content": str(query)})

    return messages
