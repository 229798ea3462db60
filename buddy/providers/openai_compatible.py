"""Client for OpenAI-compatible chat-completions APIs (OpenAI, DeepSeek, xAI)."""

import logging
from typing import Any, Dict, List, Optional

import httpx

from ..config import DEFAULT_REQUEST_TIMEOUT, TEMPERATURE, ProviderSpec

logger = logging.getLogger(__name__)


def _extract_content(data: Any) -> str:
    """Pull choices[0].message.content out of a response body, or ''."""
    if not isinstance(data, dict):
        return ""
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return ""
    first = choices[0]
    message = first.get("message") if isinstance(first, dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str):
        return ""
    return content.strip()


class OpenAICompatibleProvider:
    """
    Adapter around one vendor's chat-completions endpoint.

    Never raises: missing credentials, HTTP errors and transport failures
    all come back as {'error': ...}.
    """

    def __init__(
        self,
        spec: ProviderSpec,
        api_key: Optional[str],
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.spec = spec
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def send(
        self,
        messages: List[Dict[str, str]],
        model: Optional[str] = None
    ) -> Dict[str, str]:
        """
        Send a message list to the provider.

        Args:
            messages: List of message dicts with 'role' and 'content'
            model: Model override; the provider default is used when omitted

        Returns:
            {'content': text} on success, {'error': text} otherwise
        """
        if not self.api_key:
            return {"error": f"{self.spec.api_key_env} is not set"}

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

        payload = {
            "model": model or self.spec.model,
            "messages": messages,
            "temperature": TEMPERATURE,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.spec.api_url,
                    headers=headers,
                    json=payload
                )
                if not response.is_success:
                    logger.warning(
                        "%s API error for %s: %s",
                        self.spec.api_label, payload["model"], response.status_code
                    )
                    return {"error": f"{self.spec.api_label} API error: {response.status_code} {response.text}"}

                data = response.json()
                return {"content": _extract_content(data)}

        except Exception as e:
            message = str(e) or type(e).__name__
            logger.warning("%s request failed for %s: %s", self.spec.request_label, payload["model"], message)
            return {"error": f"{self.spec.request_label} request failed: {message}"}
