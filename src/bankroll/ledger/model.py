from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Literal, Optional
import time
import uuid

OperationStatus = Literal["WIN", "LOSS", "VOID", "PENDING"]
TransactionKind = Literal["DEPOSIT", "WITHDRAWAL"]

OPERATION_STATUSES = ("WIN", "LOSS", "VOID", "PENDING")
TRANSACTION_KINDS = ("DEPOSIT", "WITHDRAWAL")

# Self-reported emotional state at entry time. Closed set.
BEHAVIOR_TAGS = ("DISCIPLINED", "CONFIDENT", "NEUTRAL", "ANXIOUS", "IMPULSIVE", "TILTED")
DEFAULT_BEHAVIOR_TAG = "NEUTRAL"


def new_id() -> str:
    return uuid.uuid4().hex


def now_ms() -> int:
    return int(time.time() * 1000)


def parse_number(value: Any) -> float:
    """Coerce form input to a float; anything unparsable becomes 0.0."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.strip()
        # "1,5" is a decimal comma; in "1,000.50" commas group thousands
        value = value.replace(",", "") if "." in value else value.replace(",", ".")
        if not value:
            return 0.0
    try:
        out = float(value)
    except (TypeError, ValueError):
        return 0.0
    if out != out or out in (float("inf"), float("-inf")):
        return 0.0
    return out


def normalize_category(category: Optional[str]) -> str:
    return str(category or "").strip().upper()


def normalize_behavior_tag(tag: Optional[str]) -> str:
    key = str(tag or "").strip().upper()
    return key if key in BEHAVIOR_TAGS else DEFAULT_BEHAVIOR_TAG


def is_positive_ev(odd: float, estimated_probability: float) -> bool:
    """Heuristic +EV flag: odd * probability(%) - 100 > 0."""
    return odd * estimated_probability - 100 > 0


def settle_profit_loss(status: str, stake_amount: float, odd: float) -> float:
    if status == "WIN":
        return stake_amount * (odd - 1)
    if status == "LOSS":
        return -stake_amount
    return 0.0


@dataclass(frozen=True)
class Transaction:
    id: str
    kind: TransactionKind
    amount: float
    timestamp: int
    note: str = ""

    @property
    def signed_amount(self) -> float:
        return self.amount if self.kind == "DEPOSIT" else -self.amount


@dataclass(frozen=True)
class Operation:
    """A single recorded stake.

    Attributes:
        stake_amount: currency snapshot of `stake_units * unit_value` taken at
            creation; later changes to the unit size never touch it.
        profit_loss: always consistent with `status`, see `settle_profit_loss`.
        is_positive_ev: frozen at creation from `odd` and `estimated_probability`.
    """

    id: str
    timestamp: int
    note: str
    status: OperationStatus
    stake_units: float
    stake_amount: float
    odd: float
    profit_loss: float
    category: str
    behavior_tag: str
    estimated_probability: float
    is_positive_ev: bool

    def with_status(self, status: str) -> "Operation":
        """Return a copy settled to `status`, recomputing P/L from the frozen stake."""
        status = normalize_status(status)
        return replace(
            self,
            status=status,
            profit_loss=settle_profit_loss(status, self.stake_amount, self.odd),
        )


def normalize_status(status: Optional[str]) -> OperationStatus:
    key = str(status or "").strip().upper()
    if key not in OPERATION_STATUSES:
        return "PENDING"
    return key  # type: ignore[return-value]


def normalize_kind(kind: Optional[str]) -> TransactionKind:
    key = str(kind or "").strip().upper()
    return "WITHDRAWAL" if key == "WITHDRAWAL" else "DEPOSIT"


def make_operation(
    *,
    stake_units: Any,
    unit_value: float,
    odd: Any,
    status: str = "PENDING",
    category: Optional[str] = "",
    behavior_tag: Optional[str] = DEFAULT_BEHAVIOR_TAG,
    estimated_probability: Any = 0.0,
    note: str = "",
    timestamp: Optional[int] = None,
    id: Optional[str] = None,
) -> Operation:
    """Build an Operation from raw entry values, enforcing the P/L invariant."""
    units = parse_number(stake_units)
    odd_f = parse_number(odd)
    prob = parse_number(estimated_probability)
    st = normalize_status(status)
    stake_amount = units * float(unit_value)
    return Operation(
        id=id or new_id(),
        timestamp=int(timestamp if timestamp is not None else now_ms()),
        note=str(note or ""),
        status=st,
        stake_units=units,
        stake_amount=stake_amount,
        odd=odd_f,
        profit_loss=settle_profit_loss(st, stake_amount, odd_f),
        category=normalize_category(category),
        behavior_tag=normalize_behavior_tag(behavior_tag),
        estimated_probability=prob,
        is_positive_ev=is_positive_ev(odd_f, prob),
    )


def make_transaction(
    *,
    kind: str,
    amount: Any,
    note: str = "",
    timestamp: Optional[int] = None,
    id: Optional[str] = None,
) -> Transaction:
    return Transaction(
        id=id or new_id(),
        kind=normalize_kind(kind),
        amount=abs(parse_number(amount)),
        timestamp=int(timestamp if timestamp is not None else now_ms()),
        note=str(note or ""),
    )
