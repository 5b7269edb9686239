"""
Chart utilities to render the bankroll equity curve.

Plots the running balance against the compounding goal projection, with the
drawdown from the running peak on a secondary panel. Saves PNGs to a
destination path (ensures parent directories exist).
"""

from __future__ import annotations

import os

import matplotlib

# Use a non-interactive backend for headless environments
matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from ..ledger.timeline import Timeline  # noqa: E402


def save_equity_png(timeline: Timeline, out_path: str, title: str = "Equity curve vs goal") -> str:
    """Render balance, goal and drawdown series and save to `out_path` (PNG).

    Returns the absolute path to the saved file.
    """
    parent = os.path.dirname(out_path)
    if parent:
        os.makedirs(parent, exist_ok=True)

    df = timeline.to_frame()
    steps = list(range(len(df)))

    fig, (ax, ax_dd) = plt.subplots(
        2, 1, figsize=(10, 5), sharex=True, gridspec_kw={"height_ratios": [3, 1]}
    )
    ax.set_title(title)
    ax.plot(steps, df["balance"], color="green", linewidth=2.0, label="balance")
    ax.plot(steps, df["goal"], color="orange", linestyle="--", linewidth=1.2, label="projected goal")
    ax.legend(loc="best")
    ax.grid(True, linestyle=":", alpha=0.5)

    ax_dd.fill_between(steps, 0, -df["drawdown_pct"], color="red", alpha=0.4)
    ax_dd.set_ylabel("DD %")
    ax_dd.set_xlabel("ledger event")
    ax_dd.grid(True, linestyle=":", alpha=0.5)

    fig.tight_layout()
    fig.savefig(out_path, dpi=120)
    plt.close(fig)
    return os.path.abspath(out_path)
