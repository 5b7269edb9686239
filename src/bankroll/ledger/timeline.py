from __future__ import annotations

"""
Timeline reconstruction: merge transactions and operations into one
chronological sequence and replay it into a running-balance series.

Drawdown is measured against the running peak (never the initial balance
alone) and is clamped to [0, 100]. A step whose peak is <= 0 reports 0.
Entries with equal timestamps keep their input order: operations first,
then transactions, each in stored order.
"""

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

import pandas as pd

from .model import Operation, Transaction


@dataclass(frozen=True)
class TimelinePoint:
    ts: int
    source: str  # "operation" | "transaction"
    ref_id: str
    value: float
    balance: float
    peak: float
    drawdown_pct: float
    goal: float


@dataclass(frozen=True)
class Timeline:
    initial_balance: float
    balance: float
    peak: float
    max_drawdown_pct: float
    points: Tuple[TimelinePoint, ...] = field(default_factory=tuple)

    def to_frame(self) -> pd.DataFrame:
        """Per-step series as a DataFrame, starting with a synthetic "start" row."""
        start = {
            "ts": None,
            "source": "start",
            "ref_id": "",
            "value": 0.0,
            "balance": self.initial_balance,
            "peak": self.initial_balance,
            "drawdown_pct": 0.0,
            "goal": self.initial_balance,
        }
        rows = [start] + [p.__dict__ for p in self.points]
        return pd.DataFrame(rows)


def merged_entries(
    transactions: Sequence[Transaction], operations: Sequence[Operation]
) -> List[Tuple[int, str, str, float]]:
    entries = [(int(o.timestamp), "operation", o.id, float(o.profit_loss)) for o in operations]
    entries += [(int(t.timestamp), "transaction", t.id, float(t.signed_amount)) for t in transactions]
    # sorted() is stable, so equal timestamps keep insertion order
    return sorted(entries, key=lambda e: e[0])


def replay(
    transactions: Sequence[Transaction],
    operations: Sequence[Operation],
    initial_balance: float,
    daily_goal_percent: float = 0.0,
) -> Timeline:
    balance = float(initial_balance)
    peak = float(initial_balance)
    max_dd = 0.0
    goal = float(initial_balance)
    growth = 1.0 + float(daily_goal_percent) / 100.0
    points: List[TimelinePoint] = []
    for ts, source, ref_id, value in merged_entries(transactions, operations):
        balance += value
        peak = max(peak, balance)
        drawdown = (peak - balance) / peak * 100.0 if peak > 0 else 0.0
        drawdown = min(100.0, max(0.0, drawdown))
        max_dd = max(max_dd, drawdown)
        # projected target compounds once per ledger event
        goal *= growth
        points.append(
            TimelinePoint(
                ts=ts,
                source=source,
                ref_id=ref_id,
                value=value,
                balance=balance,
                peak=peak,
                drawdown_pct=drawdown,
                goal=goal,
            )
        )
    return Timeline(
        initial_balance=float(initial_balance),
        balance=balance,
        peak=peak,
        max_drawdown_pct=max_dd,
        points=tuple(points),
    )
