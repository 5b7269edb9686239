from __future__ import annotations

from datetime import date
from typing import Optional

from ..ledger.ledger import Ledger
from ..logs.event_log import log_event
from .aggregate import MetricsSnapshot, compute_metrics
from .prom import get_metrics_recompute_total, set_ledger_gauges


class MetricsEngine:
    """Recompute metrics from scratch whenever the ledger reference changes.

    Ledgers are immutable, so identity of the ledger object (plus the calendar
    day, which moves the daily band) fully determines the snapshot.
    """

    def __init__(self):
        self._ledger: Optional[Ledger] = None
        self._day: Optional[date] = None
        self._snapshot: Optional[MetricsSnapshot] = None
        self.daily_stop_active = False
        self.recomputes = 0
        self._recompute_counter = get_metrics_recompute_total()

    def refresh(self, ledger: Ledger, today: Optional[date] = None) -> MetricsSnapshot:
        day = today or date.today()
        if self._snapshot is not None and ledger is self._ledger and day == self._day:
            return self._snapshot
        snap = compute_metrics(ledger, today=day)
        self._ledger, self._day, self._snapshot = ledger, day, snap
        self.recomputes += 1
        self._recompute_counter.inc()
        set_ledger_gauges(snap.current_balance, snap.max_drawdown_pct, snap.unit_value, snap.daily.stop_loss_reached)
        self._on_daily_state(snap)
        return snap

    def _on_daily_state(self, snap: MetricsSnapshot) -> None:
        d = snap.daily
        if d.stop_loss_reached and not self.daily_stop_active:
            log_event(
                "daily_stop_reached",
                component="risk",
                severity="WARNING",
                day=d.day.isoformat(),
                today_pl=round(d.today_pl, 2),
                stop_loss_threshold=round(d.stop_loss_threshold, 2),
                starting_balance_today=round(d.starting_balance_today, 2),
            )
        self.daily_stop_active = d.stop_loss_reached
