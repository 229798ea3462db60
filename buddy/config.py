"""Configuration for Buddy AI."""

import logging
import os
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class ProviderSpec:
    """Static description of one chat-completions vendor."""
    name: str
    model: str
    api_key_env: str
    api_url: str
    api_label: str
    request_label: str


# Registration order is the priority order answers are reported in
PROVIDER_SPECS: Tuple[ProviderSpec, ...] = (
    ProviderSpec(
        name="chatgpt",
        model="gpt-4o-mini",
        api_key_env="OPENAI_API_KEY",
        api_url="https://api.openai.com/v1/chat/completions",
        api_label="OpenAI",
        request_label="OpenAI",
    ),
    ProviderSpec(
        name="deepseek",
        model="deepseek-chat",
        api_key_env="DEEPSEEK_API_KEY",
        api_url="https://api.deepseek.com/chat/completions",
        api_label="DeepSeek",
        request_label="DeepSeek",
    ),
    ProviderSpec(
        name="grok",
        model="grok-2-latest",
        api_key_env="XAI_API_KEY",
        api_url="https://api.x.ai/v1/chat/completions",
        api_label="xAI Grok",
        request_label="xAI",
    ),
)

DEFAULT_SUMMARIZER = "chatgpt"
DEFAULT_PROVIDERS = ["grok", "deepseek", "chatgpt"]
DEFAULT_REQUEST_TIMEOUT = 120.0
DEFAULT_PORT = 3000
TEMPERATURE = 0.3

# Per-answer cap when answers are embedded in another prompt
MAX_ANSWER_CHARS = 8000


@dataclass(frozen=True)
class Settings:
    """Process-wide settings, built once at startup and passed explicitly."""
    api_keys: Dict[str, Optional[str]] = field(default_factory=dict)
    default_summarizer: str = DEFAULT_SUMMARIZER
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    cors_origins: Tuple[str, ...] = ("*",)
    log_level: str = "INFO"
    port: int = DEFAULT_PORT

    def api_key(self, provider: str) -> Optional[str]:
        return self.api_keys.get(provider)


def _get_float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def load_settings() -> Settings:
    """Read settings from the environment (and .env, loaded at import)."""
    api_keys = {spec.name: os.getenv(spec.api_key_env) or None for spec in PROVIDER_SPECS}

    origins = os.getenv("BUDDY_CORS_ORIGINS", "*")
    cors_origins = tuple(o.strip() for o in origins.split(",") if o.strip()) or ("*",)

    return Settings(
        api_keys=api_keys,
        default_summarizer=os.getenv("BUDDY_DEFAULT_SUMMARIZER", DEFAULT_SUMMARIZER).strip().lower()
        or DEFAULT_SUMMARIZER,
        request_timeout=_get_float_env("BUDDY_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT),
        cors_origins=cors_origins,
        log_level=os.getenv("BUDDY_LOG_LEVEL", "INFO"),
        port=_get_int_env("PORT", DEFAULT_PORT),
    )


def configure_logging(level: str = "INFO") -> None:
    """Attach a single stream handler to the root logger."""
    logging.basicConfig(
        level=getattr(logging, level.strip().upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
