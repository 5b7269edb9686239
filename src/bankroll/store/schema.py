from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field

from ..ledger.ledger import Ledger
from ..ledger.model import (
    DEFAULT_BEHAVIOR_TAG,
    Operation,
    Transaction,
    normalize_behavior_tag,
    normalize_category,
    normalize_kind,
    normalize_status,
)

EXPORT_FORMAT = "bankroll-export"
EXPORT_VERSION = 1


class _Doc(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class TransactionDoc(_Doc):
    id: str
    kind: str
    amount: float = Field(ge=0)
    timestamp: int
    note: str = ""

    def to_record(self) -> Transaction:
        return Transaction(
            id=self.id, kind=normalize_kind(self.kind), amount=self.amount,
            timestamp=self.timestamp, note=self.note,
        )

    @classmethod
    def from_record(cls, t: Transaction) -> "TransactionDoc":
        return cls(id=t.id, kind=t.kind, amount=t.amount, timestamp=t.timestamp, note=t.note)


class OperationDoc(_Doc):
    id: str
    timestamp: int
    note: str = ""
    status: str = "PENDING"
    stake_units: float = Field(alias="stakeUnits")
    stake_amount: float = Field(alias="stakeAmount")
    odd: float
    profit_loss: float = Field(default=0.0, alias="profitLoss")
    category: str = ""
    behavior_tag: str = Field(default=DEFAULT_BEHAVIOR_TAG, alias="behaviorTag")
    estimated_probability: float = Field(default=0.0, alias="estimatedProbability")
    is_positive_ev: bool = Field(default=False, alias="isPositiveEV")

    def to_record(self) -> Operation:
        op = Operation(
            id=self.id,
            timestamp=self.timestamp,
            note=self.note,
            status=normalize_status(self.status),
            stake_units=self.stake_units,
            stake_amount=self.stake_amount,
            odd=self.odd,
            profit_loss=self.profit_loss,
            category=normalize_category(self.category),
            behavior_tag=normalize_behavior_tag(self.behavior_tag),
            estimated_probability=self.estimated_probability,
            is_positive_ev=self.is_positive_ev,
        )
        # stored P/L is not trusted; re-derive it from status and the stake snapshot
        return op.with_status(op.status)

    @classmethod
    def from_record(cls, o: Operation) -> "OperationDoc":
        return cls(
            id=o.id,
            timestamp=o.timestamp,
            note=o.note,
            status=o.status,
            stake_units=o.stake_units,
            stake_amount=o.stake_amount,
            odd=o.odd,
            profit_loss=o.profit_loss,
            category=o.category,
            behavior_tag=o.behavior_tag,
            estimated_probability=o.estimated_probability,
            is_positive_ev=o.is_positive_ev,
        )


class LedgerDoc(_Doc):
    initial_balance: float = Field(default=0.0, alias="initialBalance")
    unit_risk_percent: float = Field(default=1.0, alias="unitRiskPercent")
    daily_goal_percent: float = Field(default=3.0, alias="dailyGoalPercent")
    transactions: List[TransactionDoc] = []
    operations: List[OperationDoc] = []

    def to_ledger(self) -> Ledger:
        return Ledger(
            initial_balance=self.initial_balance,
            unit_risk_percent=self.unit_risk_percent,
            daily_goal_percent=self.daily_goal_percent,
            transactions=tuple(t.to_record() for t in self.transactions),
            operations=tuple(o.to_record() for o in self.operations),
        )

    @classmethod
    def from_ledger(cls, ledger: Ledger) -> "LedgerDoc":
        return cls(
            initial_balance=ledger.initial_balance,
            unit_risk_percent=ledger.unit_risk_percent,
            daily_goal_percent=ledger.daily_goal_percent,
            transactions=[TransactionDoc.from_record(t) for t in ledger.transactions],
            operations=[OperationDoc.from_record(o) for o in ledger.operations],
        )


class ExportDoc(_Doc):
    format: Literal["bankroll-export"] = EXPORT_FORMAT
    version: int = EXPORT_VERSION
    exported_at: str = Field(alias="exportedAt")
    ledger: LedgerDoc
