from __future__ import annotations

"""
Advisory prompt building and the guarded call into the text service.

The provider is opaque (text in, text out, may fail). Any failure is caught
here, logged and counted, and replaced by a fixed fallback message; it never
touches ledger state.
"""

from dataclasses import dataclass
from typing import List

from ..ledger.ledger import Ledger
from ..logs.event_log import log_event
from ..metrics.aggregate import MetricsSnapshot
from ..metrics.prom import get_advisory_calls_total
from .client import AdvisoryClient

INSUFFICIENT_DATA_MESSAGE = "Record at least {n} operations for a meaningful analysis."
FALLBACK_MESSAGE = "Advisory analysis is currently unavailable. Please try again later."
EMPTY_MESSAGE = "No insights available."


def fmt_money(value: float) -> str:
    return f"{value:.2f}"


def fmt_pct(value: float) -> str:
    return f"{value:.1f}%"


def summary_lines(snap: MetricsSnapshot, ledger: Ledger) -> List[str]:
    lines = [
        f"- Current balance: {fmt_money(snap.current_balance)}",
        f"- Net profit: {fmt_money(snap.total_profit)}",
        f"- ROI: {fmt_pct(snap.roi_pct)}",
        f"- Win rate: {fmt_pct(snap.win_rate_pct)} ({snap.wins}W / {snap.losses}L / {snap.voids}V)",
        f"- Max drawdown: {fmt_pct(snap.max_drawdown_pct)}",
        f"- +EV entries: {fmt_pct(snap.ev_rate_pct)}",
        f"- Daily goal: {fmt_pct(ledger.daily_goal_percent)} (today P/L {fmt_money(snap.daily.today_pl)})",
        f"- Risk per unit: {fmt_pct(ledger.unit_risk_percent)} ({fmt_money(snap.unit_value)})",
    ]
    if snap.best_category is not None:
        lines.append(f"- Best category: {snap.best_category.category} ({fmt_money(snap.best_category.profit)})")
    if snap.worst_category is not None:
        lines.append(f"- Worst category: {snap.worst_category.category} ({fmt_money(snap.worst_category.profit)})")
    if snap.daily.stop_loss_reached:
        lines.append("- Daily stop-loss reached")
    return lines


def build_prompt(snap: MetricsSnapshot, ledger: Ledger) -> str:
    header = (
        "Analyse this staking bankroll management data and give 3 crucial "
        "recommendations as bullet points:"
    )
    return "\n".join([header] + summary_lines(snap, ledger))


@dataclass(frozen=True)
class Advice:
    text: str
    ok: bool
    provider: str


def request_advice(
    client: AdvisoryClient,
    snap: MetricsSnapshot,
    ledger: Ledger,
    min_operations: int = 3,
) -> Advice:
    if len(ledger.operations) < min_operations:
        return Advice(INSUFFICIENT_DATA_MESSAGE.format(n=min_operations), ok=False, provider=client.provider)
    calls = get_advisory_calls_total()
    try:
        text = client.generate_text(build_prompt(snap, ledger))
    except Exception as e:
        calls.labels(client.provider, "false").inc()
        log_event("advisory_failed", component="advisory", severity="WARNING", provider=client.provider, error=str(e)[:300])
        return Advice(FALLBACK_MESSAGE, ok=False, provider=client.provider)
    calls.labels(client.provider, "true").inc()
    return Advice(text or EMPTY_MESSAGE, ok=True, provider=client.provider)
