from __future__ import annotations

"""Prometheus collectors for the bankroll engine.

Collectors are created lazily and tolerate duplicate registration (tests
import modules repeatedly) by reusing the registered collector. Setting
DISABLE_PROMETHEUS=1 swaps every collector for a no-op.

Gauges:
- bankroll_balance, bankroll_max_drawdown_pct, bankroll_unit_value
- daily_stop_reached

Counters:
- metrics_recompute_total
- advisory_calls_total{provider,ok}
- ledger_load_fallback_total{reason}
"""

import logging
import os
from typing import Optional

from prometheus_client import Counter, Gauge, REGISTRY, start_http_server

_balance: Optional[Gauge] = None
_max_drawdown: Optional[Gauge] = None
_unit_value: Optional[Gauge] = None
_daily_stop: Optional[Gauge] = None
_recompute_total: Optional[Counter] = None
_advisory_calls: Optional[Counter] = None
_load_fallback: Optional[Counter] = None


class _NoOp:
    def labels(self, *args, **kwargs):
        return self
    def inc(self, *args, **kwargs):
        return None
    def set(self, *args, **kwargs):
        return None


def _registered(name: str):
    try:
        coll = getattr(REGISTRY, "_names_to_collectors", {}).get(name)
        if coll is not None:
            return coll
        for coll in list(getattr(REGISTRY, "_collector_to_names", {}).keys()):  # type: ignore[attr-defined]
            if getattr(coll, "_name", None) == name:
                return coll
    except Exception:
        pass
    return None


def _safe_counter(name: str, doc: str, labelnames=()):
    if os.getenv("DISABLE_PROMETHEUS", "0") == "1":
        return _NoOp()
    try:
        return Counter(name, doc, labelnames)
    except ValueError:
        # counters register as <name> and <name>_total
        return _registered(name) or _registered(name.removesuffix("_total")) or _NoOp()


def _safe_gauge(name: str, doc: str, labelnames=()):
    if os.getenv("DISABLE_PROMETHEUS", "0") == "1":
        return _NoOp()
    try:
        return Gauge(name, doc, labelnames)
    except ValueError:
        return _registered(name) or _NoOp()


def get_balance_gauge():
    global _balance
    if _balance is None:
        _balance = _safe_gauge("bankroll_balance", "Current bankroll balance")
    return _balance


def get_max_drawdown_gauge():
    global _max_drawdown
    if _max_drawdown is None:
        _max_drawdown = _safe_gauge("bankroll_max_drawdown_pct", "Maximum drawdown from running peak, percent")
    return _max_drawdown


def get_unit_value_gauge():
    global _unit_value
    if _unit_value is None:
        _unit_value = _safe_gauge("bankroll_unit_value", "Currency value of one stake unit")
    return _unit_value


def get_daily_stop_gauge():
    global _daily_stop
    if _daily_stop is None:
        _daily_stop = _safe_gauge("daily_stop_reached", "1 when today's stop-loss threshold is reached")
    return _daily_stop


def get_metrics_recompute_total():
    global _recompute_total
    if _recompute_total is None:
        _recompute_total = _safe_counter("metrics_recompute_total", "Full metric recomputations")
    return _recompute_total


def get_advisory_calls_total():
    global _advisory_calls
    if _advisory_calls is None:
        _advisory_calls = _safe_counter("advisory_calls_total", "Advisory text service calls", ["provider", "ok"])
    return _advisory_calls


def get_ledger_load_fallback_total():
    global _load_fallback
    if _load_fallback is None:
        _load_fallback = _safe_counter(
            "ledger_load_fallback_total", "Ledger loads that fell back to defaults", ["reason"]
        )
    return _load_fallback


def set_ledger_gauges(balance: float, max_drawdown_pct: float, unit_value: float, stop_reached: bool) -> None:
    """Publish the latest snapshot; metrics are optional and never raise."""
    try:
        get_balance_gauge().set(float(balance))
        get_max_drawdown_gauge().set(float(max_drawdown_pct))
        get_unit_value_gauge().set(float(unit_value))
        get_daily_stop_gauge().set(1.0 if stop_reached else 0.0)
    except Exception:
        pass


def start_server_safe(port: int) -> Optional[int]:
    """Start Prometheus metrics server; return port or None if failed."""
    try:
        start_http_server(port)
        logging.info(f"Prometheus metrics server started on :{port}")
        return port
    except OSError as e:
        logging.warning(f"Failed to start Prometheus server on :{port}: {e}")
        return None
