from dataclasses import replace

import pytest

from bankroll.ledger.ledger import Ledger
from bankroll.ledger.model import (
    is_positive_ev,
    make_operation,
    make_transaction,
    parse_number,
)
from bankroll.risk.checks import RiskCheckError


def test_operation_profit_loss_invariant_per_status():
    win = make_operation(stake_units=2, unit_value=10.0, odd=1.9, status="WIN", timestamp=1)
    loss = make_operation(stake_units=2, unit_value=10.0, odd=1.9, status="LOSS", timestamp=1)
    void = make_operation(stake_units=2, unit_value=10.0, odd=1.9, status="VOID", timestamp=1)
    pending = make_operation(stake_units=2, unit_value=10.0, odd=1.9, status="PENDING", timestamp=1)
    assert win.stake_amount == pytest.approx(20.0)
    assert win.profit_loss == pytest.approx(18.0)
    assert loss.profit_loss == pytest.approx(-20.0)
    assert void.profit_loss == 0.0
    assert pending.profit_loss == 0.0


def test_ev_classification_heuristic():
    # 2.5 * 45 - 100 = 12.5 > 0
    assert is_positive_ev(2.5, 45) is True
    # 1.5 * 50 - 100 = -25
    assert is_positive_ev(1.5, 50) is False
    op = make_operation(stake_units=1, unit_value=1.0, odd="2.5", estimated_probability="45", timestamp=1)
    assert op.is_positive_ev is True


def test_invalid_numeric_input_normalizes_to_zero():
    assert parse_number("abc") == 0.0
    assert parse_number("") == 0.0
    assert parse_number(None) == 0.0
    assert parse_number("1,5") == 1.5
    assert parse_number("1,000.50") == 1000.5
    assert parse_number(" 2,25 ") == 2.25
    assert parse_number(float("nan")) == 0.0
    op = make_operation(stake_units="x", unit_value=10.0, odd="??", status="WIN", timestamp=1)
    assert op.stake_amount == 0.0 and op.odd == 0.0 and op.profit_loss == 0.0


def test_category_and_tag_normalization():
    op = make_operation(stake_units=1, unit_value=1.0, odd=2.0, category=" futebol ", behavior_tag="tilted", timestamp=1)
    assert op.category == "FUTEBOL"
    assert op.behavior_tag == "TILTED"
    other = make_operation(stake_units=1, unit_value=1.0, odd=2.0, behavior_tag="sleepy", timestamp=1)
    assert other.behavior_tag == "NEUTRAL"


def test_open_operation_snapshots_stake_from_unit_value():
    led = Ledger(initial_balance=1000.0, unit_risk_percent=2.0)
    led2 = led.open_operation(stake_units=1.5, odd=2.0, status="PENDING", timestamp=10)
    op = led2.operations[-1]
    # unit = 1000 * 2% = 20 -> 1.5u = 30
    assert op.stake_amount == pytest.approx(30.0)
    # copy-on-write: the source ledger is untouched
    assert led.operations == ()
    # changing the risk percent later never rewrites the snapshot
    led3 = led2.with_config(unit_risk_percent=5.0)
    assert led3.operations[-1].stake_amount == pytest.approx(30.0)
    assert led3.unit_value == pytest.approx(50.0)


def test_settle_pending_recomputes_from_frozen_stake():
    led = Ledger(initial_balance=1000.0).open_operation(stake_units=1, odd=3.0, timestamp=10)
    op_id = led.operations[0].id
    led = led.with_config(unit_risk_percent=10.0)
    settled = led.settle_operation(op_id, "WIN")
    op = settled.operations[0]
    assert op.status == "WIN"
    assert op.stake_amount == pytest.approx(10.0)
    assert op.profit_loss == pytest.approx(20.0)
    assert settled.current_balance == pytest.approx(1020.0)
    lost = settled.settle_operation(op_id, "LOSS")
    assert lost.operations[0].profit_loss == pytest.approx(-10.0)


def test_replace_operation_by_id_enforces_invariant():
    led = Ledger(initial_balance=100.0).open_operation(stake_units=1, odd=2.0, timestamp=1)
    led = led.open_operation(stake_units=1, odd=2.0, timestamp=2)
    first = led.operations[0]
    # a caller passing an inconsistent P/L gets it corrected
    edited = replace(first, status="WIN", profit_loss=999.0)
    out = led.replace_operation(edited)
    assert len(out.operations) == 2
    assert out.operations[0].profit_loss == pytest.approx(first.stake_amount)
    with pytest.raises(KeyError):
        led.replace_operation(replace(first, id="missing"))


def test_remove_records_and_status_filter():
    led = Ledger(initial_balance=100.0)
    led = led.open_operation(stake_units=1, odd=2.0, status="WIN", timestamp=1)
    led = led.open_operation(stake_units=1, odd=2.0, status="LOSS", timestamp=2)
    led = led.record_transaction(kind="DEPOSIT", amount=50, timestamp=3)
    assert len(led.operations_with_status("WIN")) == 1
    assert len(led.operations_with_status(None)) == 2
    assert len(led.operations_with_status("ALL")) == 2
    led = led.remove_operation(led.operations[0].id)
    led = led.remove_transaction(led.transactions[0].id)
    assert len(led.operations) == 1 and led.transactions == ()


def test_stake_exceeding_balance_is_rejected():
    led = Ledger(initial_balance=100.0, unit_risk_percent=50.0)
    with pytest.raises(RiskCheckError):
        led.open_operation(stake_units=3, odd=2.0, timestamp=1)
    # limits can be bypassed explicitly
    out = led.open_operation(stake_units=3, odd=2.0, timestamp=1, enforce_limits=False)
    assert out.operations[0].stake_amount == pytest.approx(150.0)


def test_withdrawal_requires_funds():
    led = Ledger(initial_balance=100.0)
    with pytest.raises(RiskCheckError):
        led.record_transaction(kind="WITHDRAWAL", amount=150)
    ok = led.record_transaction(kind="withdrawal", amount=40, timestamp=5)
    assert ok.transactions[0].kind == "WITHDRAWAL"
    assert ok.current_balance == pytest.approx(60.0)


def test_transaction_signed_amount():
    dep = make_transaction(kind="DEPOSIT", amount="25.5", timestamp=1)
    wd = make_transaction(kind="WITHDRAWAL", amount=10, timestamp=2)
    assert dep.signed_amount == pytest.approx(25.5)
    assert wd.signed_amount == pytest.approx(-10.0)


def test_unit_value_floor_on_empty_bankroll():
    led = Ledger(initial_balance=0.0, unit_risk_percent=1.0)
    assert led.unit_value == 1.0
    op = led.open_operation(stake_units=2, odd=2.0, timestamp=1).operations[0]
    assert op.stake_amount == pytest.approx(2.0)
