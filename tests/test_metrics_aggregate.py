from datetime import date

import pytest

from bankroll.ledger.ledger import Ledger
from bankroll.ledger.model import BEHAVIOR_TAGS, make_operation, make_transaction
from bankroll.metrics.aggregate import (
    best_and_worst,
    category_breakdown,
    compute_metrics,
    ev_rate_pct,
    win_rate_pct,
)

DAY = date(2020, 1, 1)


def _op(status, stake=10.0, odd=2.0, category="x", tag="NEUTRAL", prob=0.0, ts=1):
    return make_operation(
        stake_units=stake, unit_value=1.0, odd=odd, status=status,
        category=category, behavior_tag=tag, estimated_probability=prob, timestamp=ts,
    )


def _ledger(ops, initial=1000.0, txs=()):
    return Ledger(initial_balance=initial, operations=tuple(ops), transactions=tuple(txs))


@pytest.mark.parametrize("initial", [0.0, 250.0, 1000.0])
def test_empty_ledger_identities(initial):
    snap = compute_metrics(Ledger(initial_balance=initial), today=DAY)
    assert snap.current_balance == initial
    assert snap.max_drawdown_pct == 0.0
    assert snap.roi_pct == 0.0
    assert snap.win_rate_pct == 0.0
    assert snap.ev_rate_pct == 0.0
    assert snap.best_category is None and snap.worst_category is None
    assert snap.categories == ()
    assert snap.behavior_profit == {tag: 0.0 for tag in BEHAVIOR_TAGS}
    assert snap.daily.progress_pct == 0.0


def test_roi_excludes_pending():
    snap = compute_metrics(_ledger([_op("WIN", 10.0), _op("LOSS", 10.0), _op("PENDING", 50.0)]), today=DAY)
    # P/L +10 -10 over stake 20
    assert snap.roi_pct == 0.0
    snap2 = compute_metrics(_ledger([_op("WIN", 10.0, odd=3.0), _op("LOSS", 10.0), _op("PENDING", 50.0)]), today=DAY)
    assert snap2.roi_pct == pytest.approx(10.0 / 20.0 * 100.0)
    assert snap2.total_stake == pytest.approx(20.0)
    assert snap2.pending == 1


def test_win_rate_ignores_void_and_pending():
    ops = [_op("WIN"), _op("WIN"), _op("LOSS"), _op("VOID"), _op("PENDING")]
    assert win_rate_pct(ops) == pytest.approx(200.0 / 3.0)
    assert win_rate_pct([_op("VOID"), _op("PENDING")]) == 0.0


def test_ev_rate_counts_all_operations():
    ops = [_op("PENDING", odd=2.5, prob=45), _op("WIN", odd=1.5, prob=50), _op("LOSS", odd=3.0, prob=40), _op("VOID", odd=1.2, prob=10)]
    assert ev_rate_pct(ops) == pytest.approx(50.0)
    assert ev_rate_pct([]) == 0.0


def test_category_best_and_worst_selection():
    ops = [
        _op("WIN", 50.0, odd=2.0, category="A"),   # +50
        _op("LOSS", 20.0, category="B"),           # -20
        _op("LOSS", 5.0, category="C"),            # -5
    ]
    stats = category_breakdown(ops)
    assert [s.category for s in stats] == ["A", "C", "B"]
    best, worst = best_and_worst(stats)
    assert best.category == "A"
    assert worst.category == "B"


def test_worst_category_only_when_negative():
    stats = category_breakdown([_op("WIN", 10.0, category="A"), _op("VOID", 10.0, category="B")])
    best, worst = best_and_worst(stats)
    assert best.category == "A"
    assert worst is None


def test_category_grouping_is_case_insensitive_with_derived_rates():
    ops = [_op("WIN", 10.0, odd=2.0, category="tennis"), _op("LOSS", 10.0, category="Tennis"), _op("PENDING", 10.0, category="TENNIS")]
    (stat,) = category_breakdown(ops)
    assert stat.category == "TENNIS"
    assert stat.total == 3 and stat.wins == 1
    assert stat.profit == pytest.approx(0.0)
    assert stat.stake == pytest.approx(30.0)
    assert stat.win_rate_pct == pytest.approx(50.0)


def test_behavior_breakdown_reports_every_tag():
    snap = compute_metrics(_ledger([_op("LOSS", 10.0, tag="TILTED"), _op("WIN", 10.0, tag="DISCIPLINED")]), today=DAY)
    assert snap.behavior_profit["TILTED"] == pytest.approx(-10.0)
    assert snap.behavior_profit["DISCIPLINED"] == pytest.approx(10.0)
    assert snap.behavior_profit["ANXIOUS"] == 0.0
    assert set(snap.behavior_profit) == set(BEHAVIOR_TAGS)


def test_cash_flow_totals_and_capital_alert():
    txs = [
        make_transaction(kind="DEPOSIT", amount=500, timestamp=1),
        make_transaction(kind="WITHDRAWAL", amount=100, timestamp=2),
    ]
    snap = compute_metrics(_ledger([_op("LOSS", 400.0, ts=3)], initial=1000.0, txs=txs), today=DAY)
    assert snap.total_deposits == pytest.approx(1500.0)
    assert snap.total_withdrawals == pytest.approx(100.0)
    assert snap.net_investment == pytest.approx(1400.0)
    assert snap.current_balance == pytest.approx(1000.0)
    assert snap.yield_pct == pytest.approx(-400.0 / 1400.0 * 100.0)
    # 1000 < 0.8 * 1400
    assert snap.high_risk is True
    assert snap.capital_ratio_pct == pytest.approx(1000.0 / 1400.0 * 100.0)


def test_unit_value_floor_applies_to_snapshot():
    snap = compute_metrics(_ledger([_op("LOSS", 50.0)], initial=20.0), today=DAY)
    assert snap.current_balance == pytest.approx(-30.0)
    assert snap.unit_value == 1.0


def test_end_to_end_deposit_then_win():
    led = Ledger(initial_balance=1000.0)
    led = led.record_transaction(kind="DEPOSIT", amount=500, timestamp=1_000)
    led = led.open_operation(stake_units=1, odd=2.0, status="WIN", timestamp=2_000)
    profit = led.operations[0].profit_loss
    assert profit == pytest.approx(15.0)
    snap = compute_metrics(led, today=DAY)
    assert snap.current_balance == pytest.approx(1000.0 + 500.0 + profit)
    assert snap.max_drawdown_pct == 0.0
    assert snap.win_rate_pct == 100.0


def test_recompute_is_idempotent():
    led = _ledger([_op("WIN", 10.0, category="A"), _op("LOSS", 7.5, category="B", tag="ANXIOUS")])
    a = compute_metrics(led, today=DAY)
    b = compute_metrics(led, today=DAY)
    assert a == b
    assert a.timeline.points == b.timeline.points
