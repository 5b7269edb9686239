from __future__ import annotations

"""Daily stop-loss / goal band and the capital drawdown alert.

The band is symmetric: the goal target is `daily_goal_percent` of the balance
at the start of the day and the stop-loss threshold is its negative.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Sequence

from ..ledger.model import Operation

# Alert when the balance falls below this share of net invested capital.
CAPITAL_ALERT_RATIO = 0.8


@dataclass(frozen=True)
class DailyState:
    day: date
    today_pl: float
    starting_balance_today: float
    goal_target: float
    stop_loss_threshold: float
    stop_loss_reached: bool
    goal_reached: bool
    progress_pct: float


def local_day(ts_ms: int) -> Optional[date]:
    """Local calendar day of an epoch-ms timestamp, None when it is not representable."""
    try:
        return datetime.fromtimestamp(ts_ms / 1000.0).date()
    except (OverflowError, OSError, ValueError):
        return None


def daily_progress(today_pl: float, goal_target: float, stop_loss_threshold: float) -> float:
    """Progress toward the goal (gains) or the stop (losses), in [0, 100]."""
    if today_pl > 0:
        if goal_target == 0:
            return 0.0
        return max(0.0, min(100.0, today_pl / goal_target * 100.0))
    if today_pl < 0:
        if stop_loss_threshold == 0:
            return 0.0
        return max(0.0, min(100.0, abs(today_pl) / abs(stop_loss_threshold) * 100.0))
    return 0.0


def compute_daily_state(
    operations: Sequence[Operation],
    current_balance: float,
    daily_goal_percent: float,
    today: Optional[date] = None,
) -> DailyState:
    day = today or date.today()
    today_pl = sum(
        o.profit_loss for o in operations if o.status != "PENDING" and local_day(o.timestamp) == day
    )
    starting = current_balance - today_pl
    target = starting * daily_goal_percent / 100.0
    threshold = -target
    return DailyState(
        day=day,
        today_pl=today_pl,
        starting_balance_today=starting,
        goal_target=target,
        stop_loss_threshold=threshold,
        stop_loss_reached=today_pl <= threshold and threshold != 0,
        goal_reached=target > 0 and today_pl >= target,
        progress_pct=daily_progress(today_pl, target, threshold),
    )


def capital_alert(current_balance: float, net_investment: float) -> bool:
    """True when the bankroll has lost more than 20% of net invested capital."""
    return net_investment > 0 and current_balance < net_investment * CAPITAL_ALERT_RATIO
