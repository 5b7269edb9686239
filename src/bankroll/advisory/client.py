from __future__ import annotations

from typing import Any, Dict


class AdvisoryError(RuntimeError):
    """Raised by providers when the advisory text service fails."""
    pass


class AdvisoryClient:
    provider = "base"

    def __init__(self, config: Dict[str, Any] | None = None):
        self.cfg = config or {}

    def generate_text(self, prompt: str) -> str:
        raise NotImplementedError
