from __future__ import annotations

import os
from typing import Any, Dict, Optional

import httpx

from ..client import AdvisoryClient, AdvisoryError


class LocalOpenAIClient(AdvisoryClient):
    """OpenAI-compatible chat/completions endpoint (llama.cpp, vLLM, Ollama...)."""

    provider = "local_openai"

    def __init__(self, config: Dict[str, Any], http_client: Optional[httpx.Client] = None):
        super().__init__(config)
        self.api_key = self.cfg.get("api_key") or os.getenv("LOCAL_OPENAI_API_KEY", "")
        self.model = self.cfg.get("model") or "local"
        self.base_url = (self.cfg.get("base_url") or "http://localhost:8080/v1").rstrip("/")
        self.timeout_s = float(self.cfg.get("timeout_s", 30.0))
        self._http = http_client

    def generate_text(self, prompt: str) -> str:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": 0.7,
        }
        http = self._http or httpx.Client(timeout=self.timeout_s)
        try:
            resp = http.post(f"{self.base_url}/chat/completions", json=payload, headers=headers)
        except httpx.HTTPError as e:
            raise AdvisoryError(f"local_openai request failed: {e}") from e
        finally:
            if self._http is None:
                http.close()
        if resp.status_code != 200:
            raise AdvisoryError(f"local_openai error {resp.status_code}: {resp.text[:200]}")
        data = resp.json()
        text = (data.get("choices") or [{}])[0].get("message", {}).get("content", "") or ""
        if not text.strip():
            raise AdvisoryError("empty response from local_openai")
        return text.strip()
