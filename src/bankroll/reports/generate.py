"""
Generate a static HTML bankroll report with an equity curve PNG.

Usage (venv):
  ENABLE_REPORT=1 PYTHONPATH=src python -m bankroll.main
"""

from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..advisory.advisor import fmt_money, fmt_pct, summary_lines
from ..ledger.ledger import Ledger
from ..metrics.aggregate import MetricsSnapshot
from .charts import save_equity_png


def _template_env(template_dir: str) -> Environment:
    return Environment(
        loader=FileSystemLoader(template_dir),
        autoescape=select_autoescape(["html", "xml"]),
    )


def render_report(
    snap: MetricsSnapshot,
    ledger: Ledger,
    out_dir: str = "reports",
    advice: Optional[str] = None,
    generated_at: Optional[datetime] = None,
    with_chart: bool = True,
) -> str:
    """Write `index.html` (and `images/equity.png`) under `out_dir`; return the HTML path."""
    os.makedirs(out_dir, exist_ok=True)
    image = None
    if with_chart:
        png = save_equity_png(snap.timeline, os.path.join(out_dir, "images", "equity.png"))
        image = os.path.relpath(png, start=os.path.abspath(out_dir))

    categories = [
        {
            "category": c.category,
            "profit": fmt_money(c.profit),
            "stake": fmt_money(c.stake),
            "roi": fmt_pct(c.roi_pct),
            "win_rate": fmt_pct(c.win_rate_pct),
            "total": c.total,
        }
        for c in snap.categories
    ]
    behavior = [(tag, fmt_money(v)) for tag, v in snap.behavior_profit.items()]

    template_dir = os.path.join(os.path.dirname(__file__), "templates")
    tpl = _template_env(template_dir).get_template("report.html.j2")
    html = tpl.render(
        generated_at=(generated_at or datetime.now(timezone.utc)).isoformat(),
        summary=summary_lines(snap, ledger),
        high_risk=snap.high_risk,
        stop_loss_reached=snap.daily.stop_loss_reached,
        image=image,
        categories=categories,
        behavior=behavior,
        advice=advice,
    )
    out_html = os.path.join(out_dir, "index.html")
    with open(out_html, "w", encoding="utf-8") as f:
        f.write(html)
    return out_html
