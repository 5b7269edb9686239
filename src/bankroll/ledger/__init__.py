"""Ledger package.

Public API:
- Ledger: immutable store of transactions, operations and bankroll settings.
- replay / Timeline: chronological running-balance and drawdown series.
"""

from .ledger import Ledger  # re-export
from .timeline import Timeline, TimelinePoint, replay  # re-export
