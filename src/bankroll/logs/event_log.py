from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, Optional


def log_event(
    event_type: str,
    component: str,
    severity: str = "INFO",
    ts: Optional[int] = None,
    **fields: Any,
) -> None:
    """Emit a single-line JSON log record on the `bankroll.<component>` logger.

    Keys: event, component, severity, ts, schema_version, plus any extra fields.
    """
    try:
        logger = logging.getLogger(f"bankroll.{component}")
        payload: Dict[str, Any] = {
            "event": str(event_type),
            "component": str(component),
            "severity": severity.upper(),
            "ts": int(ts if ts is not None else int(time.time() * 1000)),
            "schema_version": "v1",
        }
        payload.update(fields)
        level = getattr(logging, severity.upper(), logging.INFO)
        logger.log(level, json.dumps(payload, separators=(",", ":"), default=str))
    except Exception:
        # Logging must never throw
        pass
