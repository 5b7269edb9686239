from __future__ import annotations

"""
Leverage cycle (Soros-style compounding) simulator.

A cycle is a chain of hypothetical stakes where each step reinvests the
previous step's payout, optionally minus a partial withdrawal. Rows are
causally linked:

    next_stake[k] = return[k] - withdrawal[k]  if withdrawn[k] else return[k]
    stake[k+1]    = 0 if status[k] == LOSS else next_stake[k]

Editing row i (status or withdrawal flag) rebuilds the derived fields of rows
i+1..N. On row i only the edited field changes (plus its own next_stake when
the withdrawal flag flips); earlier rows are untouched. Cycles are immutable:
every edit returns a new LeverageCycle.
"""

from dataclasses import dataclass, field, replace
from typing import Any, List, Literal, Tuple

from ..ledger.model import parse_number

RowStatus = Literal["WIN", "LOSS", "PENDING"]
ROW_STATUSES = ("WIN", "LOSS", "PENDING")


@dataclass(frozen=True)
class LeverageRow:
    step: int
    stake: float
    odd: float
    return_amount: float
    withdrawal_amount: float
    is_withdrawn: bool = False
    status: RowStatus = "PENDING"
    next_stake: float = 0.0


def _derive(step: int, stake: float, odd: float, withdraw_percent: float,
            is_withdrawn: bool, status: str) -> LeverageRow:
    ret = stake * odd
    withdrawal = ret * withdraw_percent / 100.0
    return LeverageRow(
        step=step,
        stake=stake,
        odd=odd,
        return_amount=ret,
        withdrawal_amount=withdrawal,
        is_withdrawn=is_withdrawn,
        status=status,  # type: ignore[arg-type]
        next_stake=ret - withdrawal if is_withdrawn else ret,
    )


def _normalize_row_status(status: str) -> RowStatus:
    key = str(status or "").strip().upper()
    if key not in ROW_STATUSES:
        raise ValueError(f"invalid leverage row status: {status!r}")
    return key  # type: ignore[return-value]


@dataclass(frozen=True)
class LeverageCycle:
    start_capital: float
    target_odd: float
    step_count: int
    withdraw_percent: float
    rows: Tuple[LeverageRow, ...] = field(default_factory=tuple)

    # ---- summaries ----

    @property
    def total_withdrawals(self) -> float:
        return sum(r.withdrawal_amount for r in self.rows if r.is_withdrawn)

    @property
    def current_cycle_balance(self) -> float:
        """next_stake of the last WIN row, 0 when nothing has won yet."""
        for r in reversed(self.rows):
            if r.status == "WIN":
                return r.next_stake
        return 0.0

    # ---- edits ----

    def with_settings(self, **settings: Any) -> "LeverageCycle":
        """Change any generation setting; always a full rebuild."""
        params = {
            "start_capital": self.start_capital,
            "target_odd": self.target_odd,
            "step_count": self.step_count,
            "withdraw_percent": self.withdraw_percent,
        }
        params.update(settings)
        return generate_cycle(**params)

    def set_status(self, step: int, status: str) -> "LeverageCycle":
        idx = self._index(step)
        row = replace(self.rows[idx], status=_normalize_row_status(status))
        return self._recompute_after(idx, row)

    def set_withdrawn(self, step: int, is_withdrawn: bool) -> "LeverageCycle":
        idx = self._index(step)
        cur = self.rows[idx]
        flag = bool(is_withdrawn)
        # stake/return/withdrawal of the edited row stay; next_stake follows the flag
        row = replace(
            cur,
            is_withdrawn=flag,
            next_stake=cur.return_amount - cur.withdrawal_amount if flag else cur.return_amount,
        )
        return self._recompute_after(idx, row)

    def toggle_withdrawal(self, step: int) -> "LeverageCycle":
        return self.set_withdrawn(step, not self.rows[self._index(step)].is_withdrawn)

    def _index(self, step: int) -> int:
        if not 1 <= step <= len(self.rows):
            raise IndexError(f"step {step} out of range 1..{len(self.rows)}")
        return step - 1

    def _recompute_after(self, idx: int, edited: LeverageRow) -> "LeverageCycle":
        # Only the explicitly edited fields change on row idx itself.
        rows: List[LeverageRow] = list(self.rows)
        rows[idx] = edited
        for j in range(idx + 1, len(rows)):
            prev = rows[j - 1]
            cur = rows[j]
            stake = 0.0 if prev.status == "LOSS" else prev.next_stake
            rows[j] = _derive(cur.step, stake, cur.odd, self.withdraw_percent, cur.is_withdrawn, cur.status)
        return replace(self, rows=tuple(rows))


def generate_cycle(start_capital: Any, target_odd: Any, step_count: Any, withdraw_percent: Any = 0.0) -> LeverageCycle:
    """Build a fresh chain: every row PENDING, nothing withdrawn, full reinvestment."""
    start = parse_number(start_capital)
    odd = parse_number(target_odd)
    steps = max(0, int(parse_number(step_count)))
    pct = parse_number(withdraw_percent)
    rows: List[LeverageRow] = []
    stake = start
    for step in range(1, steps + 1):
        row = _derive(step, stake, odd, pct, False, "PENDING")
        rows.append(row)
        stake = row.next_stake
    return LeverageCycle(
        start_capital=start,
        target_odd=odd,
        step_count=steps,
        withdraw_percent=pct,
        rows=tuple(rows),
    )
