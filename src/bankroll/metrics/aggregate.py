from __future__ import annotations

"""
Ledger metrics aggregation.

`compute_metrics` is a pure function of a Ledger (plus the calendar day used
for the daily band). Every ratio falls back to 0 on a zero denominator, so
an empty ledger yields identity values and no best/worst category.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple

from ..ledger.ledger import Ledger
from ..ledger.model import BEHAVIOR_TAGS, Operation
from ..ledger.timeline import Timeline
from ..risk.daily import DailyState, capital_alert, compute_daily_state
from ..risk.sizing import unit_value as _unit_value


@dataclass(frozen=True)
class CategoryStats:
    category: str
    profit: float
    stake: float
    wins: int
    total: int
    roi_pct: float
    win_rate_pct: float


@dataclass(frozen=True)
class MetricsSnapshot:
    current_balance: float
    max_drawdown_pct: float
    unit_value: float
    roi_pct: float
    win_rate_pct: float
    ev_rate_pct: float
    total_profit: float
    total_stake: float
    wins: int
    losses: int
    voids: int
    pending: int
    total_deposits: float
    total_withdrawals: float
    net_investment: float
    yield_pct: float
    total_progress_pct: float
    capital_ratio_pct: float
    high_risk: bool
    categories: Tuple[CategoryStats, ...]
    best_category: Optional[CategoryStats]
    worst_category: Optional[CategoryStats]
    behavior_profit: Dict[str, float]
    daily: DailyState
    timeline: Timeline = field(repr=False, compare=False)


def _pct(num: float, den: float) -> float:
    return num / den * 100.0 if den else 0.0


def roi_pct(operations: Sequence[Operation]) -> float:
    settled = [o for o in operations if o.status != "PENDING"]
    return _pct(sum(o.profit_loss for o in settled), sum(o.stake_amount for o in settled))


def win_rate_pct(operations: Sequence[Operation]) -> float:
    wins = sum(1 for o in operations if o.status == "WIN")
    losses = sum(1 for o in operations if o.status == "LOSS")
    return _pct(wins, wins + losses)


def ev_rate_pct(operations: Sequence[Operation]) -> float:
    return _pct(sum(1 for o in operations if o.is_positive_ev), len(operations))


def category_breakdown(operations: Sequence[Operation]) -> List[CategoryStats]:
    """Group by normalised category, sorted by summed profit, best first."""
    groups: Dict[str, Dict[str, float]] = {}
    for o in operations:
        key = (o.category or "").upper()
        g = groups.setdefault(key, {"profit": 0.0, "stake": 0.0, "wins": 0, "losses": 0, "total": 0})
        g["profit"] += o.profit_loss
        g["stake"] += o.stake_amount
        g["total"] += 1
        if o.status == "WIN":
            g["wins"] += 1
        elif o.status == "LOSS":
            g["losses"] += 1
    stats = [
        CategoryStats(
            category=name,
            profit=g["profit"],
            stake=g["stake"],
            wins=int(g["wins"]),
            total=int(g["total"]),
            roi_pct=_pct(g["profit"], g["stake"]),
            win_rate_pct=_pct(g["wins"], g["wins"] + g["losses"]),
        )
        for name, g in groups.items()
    ]
    return sorted(stats, key=lambda s: s.profit, reverse=True)


def best_and_worst(stats: Sequence[CategoryStats]) -> Tuple[Optional[CategoryStats], Optional[CategoryStats]]:
    """Best is the top earner; worst is the biggest loser, only if it lost money."""
    if not stats:
        return None, None
    best = max(stats, key=lambda s: s.profit)
    worst = min(stats, key=lambda s: s.profit)
    return best, (worst if worst.profit < 0 else None)


def behavior_breakdown(operations: Sequence[Operation]) -> Dict[str, float]:
    out = {tag: 0.0 for tag in BEHAVIOR_TAGS}
    for o in operations:
        out[o.behavior_tag] = out.get(o.behavior_tag, 0.0) + o.profit_loss
    return out


def compute_metrics(ledger: Ledger, today: Optional[date] = None) -> MetricsSnapshot:
    ops = ledger.operations
    timeline = ledger.timeline()
    balance = timeline.balance

    settled = [o for o in ops if o.status != "PENDING"]
    total_profit = sum(o.profit_loss for o in settled)
    total_stake = sum(o.stake_amount for o in settled)

    deposits = ledger.initial_balance + sum(t.amount for t in ledger.transactions if t.kind == "DEPOSIT")
    withdrawals = sum(t.amount for t in ledger.transactions if t.kind == "WITHDRAWAL")
    net = deposits - withdrawals

    cats = category_breakdown(ops)
    best, worst = best_and_worst(cats)

    return MetricsSnapshot(
        current_balance=balance,
        max_drawdown_pct=timeline.max_drawdown_pct,
        unit_value=_unit_value(balance, ledger.unit_risk_percent),
        roi_pct=roi_pct(ops),
        win_rate_pct=win_rate_pct(ops),
        ev_rate_pct=ev_rate_pct(ops),
        total_profit=total_profit,
        total_stake=total_stake,
        wins=sum(1 for o in ops if o.status == "WIN"),
        losses=sum(1 for o in ops if o.status == "LOSS"),
        voids=sum(1 for o in ops if o.status == "VOID"),
        pending=sum(1 for o in ops if o.status == "PENDING"),
        total_deposits=deposits,
        total_withdrawals=withdrawals,
        net_investment=net,
        yield_pct=_pct(total_profit, net) if net > 0 else 0.0,
        total_progress_pct=_pct(total_profit, net or 1.0),
        capital_ratio_pct=min(100.0, max(0.0, _pct(balance, net or 1.0))),
        high_risk=capital_alert(balance, net),
        categories=tuple(cats),
        best_category=best,
        worst_category=worst,
        behavior_profit=behavior_breakdown(ops),
        daily=compute_daily_state(ops, balance, ledger.daily_goal_percent, today),
        timeline=timeline,
    )
