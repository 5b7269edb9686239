from __future__ import annotations

import os
from typing import Any, Dict, Optional

import httpx

from ..client import AdvisoryClient, AdvisoryError

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


class GeminiClient(AdvisoryClient):
    provider = "gemini"

    def __init__(self, config: Dict[str, Any], http_client: Optional[httpx.Client] = None):
        super().__init__(config)
        self.api_key = self.cfg.get("api_key") or os.getenv("GEMINI_API_KEY", "")
        self.model = self.cfg.get("model") or "gemini-2.0-flash"
        self.base_url = (self.cfg.get("base_url") or DEFAULT_BASE_URL).rstrip("/")
        self.timeout_s = float(self.cfg.get("timeout_s", 30.0))
        self._http = http_client

    def generate_text(self, prompt: str) -> str:
        if not self.api_key:
            raise AdvisoryError("GEMINI_API_KEY not configured")
        url = f"{self.base_url}/models/{self.model}:generateContent"
        payload = {"contents": [{"parts": [{"text": prompt}]}]}
        headers = {"x-goog-api-key": self.api_key, "Content-Type": "application/json"}
        http = self._http or httpx.Client(timeout=self.timeout_s)
        try:
            resp = http.post(url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            raise AdvisoryError(f"gemini request failed: {e}") from e
        finally:
            if self._http is None:
                http.close()
        if resp.status_code != 200:
            raise AdvisoryError(f"gemini error {resp.status_code}: {resp.text[:200]}")
        return _parse_gemini_response(resp.json())


def _parse_gemini_response(data: Dict[str, Any]) -> str:
    parts = []
    for cand in data.get("candidates", [])[:1]:
        for part in cand.get("content", {}).get("parts", []):
            parts.append(part.get("text", ""))
    text = "".join(parts).strip()
    if not text:
        raise AdvisoryError("empty response from gemini")
    return text
