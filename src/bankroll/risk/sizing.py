from __future__ import annotations

# Minimum currency value of 1.0 unit. Applied whenever the balance-derived
# unit would be zero or negative (empty or busted bankroll), so stake sizing
# never collapses to a non-positive amount.
UNIT_VALUE_FLOOR = 1.0


def unit_value(balance: float, unit_risk_percent: float) -> float:
    """Currency amount of 1.0 stake unit: `balance * unit_risk_percent / 100`, floored."""
    value = float(balance) * float(unit_risk_percent) / 100.0
    if value <= 0:
        return UNIT_VALUE_FLOOR
    return value
