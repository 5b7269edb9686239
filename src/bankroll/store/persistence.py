from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import ValidationError

from ..ledger.ledger import Ledger
from ..logs.event_log import log_event
from ..metrics.prom import get_ledger_load_fallback_total
from .schema import EXPORT_FORMAT, ExportDoc, LedgerDoc


def parse_document(data: Any) -> Ledger:
    """Build a Ledger from a bare ledger document or an export document.

    Raises ValueError (including pydantic.ValidationError) on malformed input.
    """
    if not isinstance(data, dict):
        raise ValueError("ledger document must be a JSON object")
    if "format" in data:
        if data.get("format") != EXPORT_FORMAT:
            raise ValueError(f"unknown document format: {data.get('format')!r}")
        return ExportDoc.model_validate(data).ledger.to_ledger()
    return LedgerDoc.model_validate(data).to_ledger()


def export_document(ledger: Ledger, exported_at: Optional[datetime] = None) -> Dict[str, Any]:
    ts = exported_at or datetime.now(timezone.utc)
    doc = ExportDoc(exported_at=ts.isoformat(), ledger=LedgerDoc.from_ledger(ledger))
    return doc.model_dump(by_alias=True)


class LedgerStore:
    """Single-file JSON persistence for the ledger.

    `load` never raises: a missing file returns the defaults and an unreadable
    or malformed one is replaced wholesale by the defaults (logged + counted).
    """

    def __init__(self, path: str = "data/bankroll.json", defaults: Optional[Ledger] = None):
        self.path = path
        self.defaults = defaults if defaults is not None else Ledger()
        self._fallbacks = get_ledger_load_fallback_total()

    def load(self) -> Ledger:
        if not os.path.exists(self.path):
            return self.defaults
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError, RecursionError) as e:
            return self._fallback("unreadable", e)
        try:
            return parse_document(data)
        except ValidationError as e:
            return self._fallback("invalid_schema", e)
        except ValueError as e:
            return self._fallback("invalid_document", e)

    def save(self, ledger: Ledger) -> bool:
        """Write the ledger as one JSON blob (temp file + atomic replace)."""
        doc = LedgerDoc.from_ledger(ledger).model_dump(by_alias=True)
        return self._write(self.path, doc)

    def export(self, ledger: Ledger, path: str, exported_at: Optional[datetime] = None) -> bool:
        return self._write(path, export_document(ledger, exported_at))

    def _write(self, path: str, doc: Dict[str, Any]) -> bool:
        tmp = path + ".tmp"
        try:
            parent = os.path.dirname(path)
            if parent:
                os.makedirs(parent, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(doc, f, ensure_ascii=False, indent=2)
            os.replace(tmp, path)
            return True
        except OSError as e:
            log_event("ledger_save_failed", component="store", severity="ERROR", path=path, error=str(e))
            return False

    def _fallback(self, reason: str, err: Exception) -> Ledger:
        try:
            self._fallbacks.labels(reason).inc()
        except Exception:
            pass
        log_event(
            "ledger_load_fallback",
            component="store",
            severity="WARNING",
            path=self.path,
            reason=reason,
            error=str(err)[:300],
        )
        return self.defaults
