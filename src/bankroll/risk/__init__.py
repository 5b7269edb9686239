"""Bankroll risk helpers: unit sizing, pre-trade checks, daily stop band."""

from .checks import RiskCheckError, check_stake_within_balance, check_withdrawal_funds
from .daily import DailyState, capital_alert, compute_daily_state
from .sizing import UNIT_VALUE_FLOOR, unit_value

__all__ = [
    "RiskCheckError",
    "check_stake_within_balance",
    "check_withdrawal_funds",
    "DailyState",
    "capital_alert",
    "compute_daily_state",
    "UNIT_VALUE_FLOOR",
    "unit_value",
]
