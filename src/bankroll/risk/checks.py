from __future__ import annotations

import json
import logging

logger = logging.getLogger(__name__)


class RiskCheckError(ValueError):
    """Raised when a ledger entry violates a pre-trade bankroll limit."""
    pass


def _deny(reason: str, **fields) -> None:
    payload = {"event": "risk_check_denied", "reason": reason}
    payload.update(fields)
    try:
        logger.warning(json.dumps(payload, separators=(",", ":")))
    except Exception:
        logger.warning("risk_check_denied", extra=payload)


def check_stake_within_balance(stake_amount: float, balance: float) -> None:
    """Reject a stake larger than a positive current balance.

    A non-positive balance is not checked: the unit floor already bounds sizing.
    """
    if balance > 0 and stake_amount > balance:
        _deny("stake_exceeds_balance", stake_amount=stake_amount, balance=balance)
        raise RiskCheckError("stake exceeds available balance")


def check_withdrawal_funds(amount: float, balance: float) -> None:
    if balance < amount:
        _deny("insufficient_funds", amount=amount, balance=balance)
        raise RiskCheckError("insufficient balance for withdrawal")
