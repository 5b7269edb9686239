from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Optional, Tuple

from .model import (
    Operation,
    Transaction,
    make_operation,
    make_transaction,
    normalize_status,
    parse_number,
)
from .timeline import Timeline, replay
from ..risk.checks import check_stake_within_balance, check_withdrawal_funds
from ..risk.sizing import unit_value as _unit_value

DEFAULT_UNIT_RISK_PERCENT = 1.0
DEFAULT_DAILY_GOAL_PERCENT = 3.0


@dataclass(frozen=True)
class Ledger:
    """Immutable bankroll ledger.

    Every edit returns a new Ledger (structural copy); existing snapshots are
    never mutated, so a reader holding an older value always sees a complete
    state.
    """

    initial_balance: float = 0.0
    unit_risk_percent: float = DEFAULT_UNIT_RISK_PERCENT
    daily_goal_percent: float = DEFAULT_DAILY_GOAL_PERCENT
    transactions: Tuple[Transaction, ...] = field(default_factory=tuple)
    operations: Tuple[Operation, ...] = field(default_factory=tuple)

    # ---- derived ----

    def timeline(self) -> Timeline:
        return replay(self.transactions, self.operations, self.initial_balance, self.daily_goal_percent)

    @property
    def current_balance(self) -> float:
        return self.timeline().balance

    @property
    def unit_value(self) -> float:
        return _unit_value(self.current_balance, self.unit_risk_percent)

    def get_operation(self, op_id: str) -> Operation:
        for op in self.operations:
            if op.id == op_id:
                return op
        raise KeyError(op_id)

    def operations_with_status(self, status: Optional[str] = None) -> Tuple[Operation, ...]:
        """Filter operations by status; None returns all."""
        if status is None or str(status).upper() == "ALL":
            return self.operations
        st = normalize_status(status)
        return tuple(o for o in self.operations if o.status == st)

    # ---- configuration ----

    def with_config(
        self,
        initial_balance: Any = None,
        unit_risk_percent: Any = None,
        daily_goal_percent: Any = None,
    ) -> "Ledger":
        """Change scalar settings. Past operations keep their stake snapshots."""
        changes = {}
        if initial_balance is not None:
            changes["initial_balance"] = parse_number(initial_balance)
        if unit_risk_percent is not None:
            changes["unit_risk_percent"] = parse_number(unit_risk_percent)
        if daily_goal_percent is not None:
            changes["daily_goal_percent"] = parse_number(daily_goal_percent)
        return replace(self, **changes)

    # ---- operations ----

    def add_operation(self, op: Operation) -> "Ledger":
        return replace(self, operations=self.operations + (op.with_status(op.status),))

    def open_operation(self, *, enforce_limits: bool = True, **entry: Any) -> "Ledger":
        """Size and append a new operation from raw entry values.

        The stake amount is snapshotted from the current unit value. With
        `enforce_limits`, a stake larger than a positive balance raises
        RiskCheckError.
        """
        timeline = self.timeline()
        unit = _unit_value(timeline.balance, self.unit_risk_percent)
        op = make_operation(unit_value=unit, **entry)
        if enforce_limits:
            check_stake_within_balance(op.stake_amount, timeline.balance)
        return replace(self, operations=self.operations + (op,))

    def replace_operation(self, op: Operation) -> "Ledger":
        """Replace the operation with the same id; P/L is re-derived from its status."""
        fixed = op.with_status(op.status)
        found = False
        ops = []
        for existing in self.operations:
            if existing.id == op.id:
                ops.append(fixed)
                found = True
            else:
                ops.append(existing)
        if not found:
            raise KeyError(op.id)
        return replace(self, operations=tuple(ops))

    def settle_operation(self, op_id: str, status: str) -> "Ledger":
        return self.replace_operation(self.get_operation(op_id).with_status(status))

    def remove_operation(self, op_id: str) -> "Ledger":
        return replace(self, operations=tuple(o for o in self.operations if o.id != op_id))

    # ---- transactions ----

    def add_transaction(self, tx: Transaction) -> "Ledger":
        return replace(self, transactions=self.transactions + (tx,))

    def record_transaction(self, *, enforce_limits: bool = True, **entry: Any) -> "Ledger":
        tx = make_transaction(**entry)
        if enforce_limits and tx.kind == "WITHDRAWAL":
            check_withdrawal_funds(tx.amount, self.current_balance)
        return replace(self, transactions=self.transactions + (tx,))

    def remove_transaction(self, tx_id: str) -> "Ledger":
        return replace(self, transactions=tuple(t for t in self.transactions if t.id != tx_id))
