"""
Bankroll entry point.

Loads settings and the persisted ledger, recomputes all metrics, logs a
one-line summary per area and optionally:
- requests advisory commentary (ENABLE_ADVISORY=1),
- renders the HTML report (ENABLE_REPORT=1),
- previews a leverage cycle from the configured defaults (ENABLE_LEVERAGE_PREVIEW=1).

Usage (venv):
  PYTHONPATH=src python -m bankroll.main
"""

import json
import logging
import os

from bankroll.advisory.advisor import request_advice
from bankroll.advisory.router import get_client
from bankroll.config.loader import load_settings
from bankroll.leverage.cycle import generate_cycle
from bankroll.ledger.ledger import Ledger
from bankroll.metrics.engine import MetricsEngine
from bankroll.metrics.prom import start_server_safe
from bankroll.reports.generate import render_report
from bankroll.store.persistence import LedgerStore


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    settings = load_settings(os.getenv("BANKROLL_CONFIG", "config/config.yaml"))

    if settings.prometheus_port:
        start_server_safe(settings.prometheus_port)

    defaults = Ledger(
        initial_balance=settings.ledger.initial_balance,
        unit_risk_percent=settings.ledger.unit_risk_percent,
        daily_goal_percent=settings.ledger.daily_goal_percent,
    )
    store = LedgerStore(settings.store.path, defaults=defaults)
    ledger = store.load()
    logging.info(
        f"Ledger loaded from {settings.store.path}: "
        f"{len(ledger.operations)} operations, {len(ledger.transactions)} transactions"
    )

    engine = MetricsEngine()
    snap = engine.refresh(ledger)
    logging.info(
        f"Balance {snap.current_balance:.2f} | unit {snap.unit_value:.2f} | "
        f"ROI {snap.roi_pct:.1f}% | win rate {snap.win_rate_pct:.1f}% | "
        f"max DD {snap.max_drawdown_pct:.1f}% | +EV {snap.ev_rate_pct:.1f}%"
    )
    d = snap.daily
    logging.info(
        f"Today P/L {d.today_pl:.2f} (goal {d.goal_target:.2f}, stop {d.stop_loss_threshold:.2f}, "
        f"progress {d.progress_pct:.1f}%)"
    )
    if snap.high_risk:
        logging.warning("Capital below 80% of net investment: reduce the unit size")

    advice_text = None
    if os.getenv("ENABLE_ADVISORY", "0") == "1":
        client = get_client(settings.advisory.model_dump())
        advice = request_advice(client, snap, ledger, min_operations=settings.advisory.min_operations)
        advice_text = advice.text
        logging.info(f"Advisory ({advice.provider}, ok={advice.ok}):\n{advice.text}")

    if os.getenv("ENABLE_REPORT", "0") == "1":
        out = render_report(snap, ledger, out_dir=settings.report_dir, advice=advice_text)
        logging.info(f"Report written to: {out}")

    if os.getenv("ENABLE_LEVERAGE_PREVIEW", "0") == "1":
        lv = settings.leverage
        cycle = generate_cycle(lv.start_capital, lv.target_odd, lv.step_count, lv.withdraw_percent)
        for row in cycle.rows:
            logging.info(json.dumps({
                "step": row.step,
                "stake": round(row.stake, 2),
                "return": round(row.return_amount, 2),
                "withdrawal": round(row.withdrawal_amount, 2),
                "next_stake": round(row.next_stake, 2),
            }, separators=(",", ":")))


if __name__ == "__main__":
    main()
