from __future__ import annotations

from typing import Any, Dict

from .client import AdvisoryClient
from .providers.gemini import GeminiClient
from .providers.local_openai import LocalOpenAIClient


def get_client(cfg: Dict[str, Any]) -> AdvisoryClient:
    provider = (cfg.get("provider") or "gemini").lower()
    if provider == "gemini":
        return GeminiClient(cfg)
    if provider == "local_openai":
        return LocalOpenAIClient(cfg)
    raise ValueError(f"unknown advisory provider: {provider!r}")
