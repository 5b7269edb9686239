"""Leverage cycle simulator (compounding stake chains)."""

from .cycle import LeverageCycle, LeverageRow, generate_cycle

__all__ = ["LeverageCycle", "LeverageRow", "generate_cycle"]
