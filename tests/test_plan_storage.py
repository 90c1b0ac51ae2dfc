from __future__ import annotations

import json
import logging
from datetime import date
from decimal import Decimal

import pytest

from cashflow_planner import plan_storage
from cashflow_planner.models import Entry, MonthPlan
from cashflow_planner.period import Period
from cashflow_planner.plan_storage import PlanStore, load_plan, save_plan

MARCH = Period(2025, 3)


def _plan():
    return MonthPlan(
        starting_balance=Decimal('1000.00'),
        incomes=(Entry('i1', 'Paycheck', Decimal('2500.00'), date(2025, 3, 15)),),
        expenses=(
            Entry('e1', 'Rent', Decimal('1800.00'), date(2025, 3, 1)),
            Entry('e2', 'Phone', Decimal('65.00'), date(2025, 3, 22)),
        ),
    )


def test_missing_file_loads_empty_plan(tmp_path) -> None:
    plan = PlanStore(tmp_path / 'plans.json').load(MARCH)
    assert plan == MonthPlan()
    assert plan.is_empty


def test_save_then_load(tmp_path) -> None:
    path = tmp_path / 'nested' / 'plans.json'
    store = PlanStore(path)
    store.save(MARCH, _plan())

    assert path.exists()
    assert store.load(MARCH) == _plan()
    assert store.load(MARCH.next()) == MonthPlan()


def test_file_layout_is_keyed_by_period(tmp_path) -> None:
    path = tmp_path / 'plans.json'
    PlanStore(path).save(MARCH, _plan())

    data = json.loads(path.read_text(encoding='utf-8'))
    assert list(data) == ['cashflow-2025-03']
    record = data['cashflow-2025-03']
    assert record['starting_balance'] == '1000.00'
    assert record['incomes'][0] == {
        'id': 'i1', 'name': 'Paycheck', 'amount': '2500.00', 'date': '2025-03-15',
    }
    assert [e['id'] for e in record['expenses']] == ['e1', 'e2']


def test_saving_one_month_keeps_others(tmp_path) -> None:
    store = PlanStore(tmp_path / 'plans.json')
    store.save(MARCH, _plan())
    store.save(MARCH.next(), MonthPlan(starting_balance=Decimal('5')))

    assert store.load(MARCH) == _plan()
    assert store.load(MARCH.next()).starting_balance == Decimal('5')
    assert store.periods() == [MARCH, MARCH.next()]


def test_delete(tmp_path) -> None:
    store = PlanStore(tmp_path / 'plans.json')
    store.save(MARCH, _plan())
    store.delete(MARCH)
    store.delete(MARCH)  # second delete is a no-op

    assert store.load(MARCH) == MonthPlan()
    assert store.periods() == []


def test_corrupt_file_loads_empty_plan(tmp_path, caplog) -> None:
    path = tmp_path / 'plans.json'
    path.write_text('{not json', encoding='utf-8')

    with caplog.at_level(logging.WARNING, logger='cashflow_planner.plan_storage'):
        assert PlanStore(path).load(MARCH) == MonthPlan()
    assert 'Could not read plan store' in caplog.text


def test_non_utf8_file_loads_empty_plan(tmp_path, caplog) -> None:
    path = tmp_path / 'plans.json'
    path.write_bytes(b'\xff\xfe{bad')

    with caplog.at_level(logging.WARNING, logger='cashflow_planner.plan_storage'):
        assert PlanStore(path).load(MARCH) == MonthPlan()
        assert PlanStore(path).periods() == []
    assert 'Could not read plan store' in caplog.text


def test_non_mapping_file_loads_empty_plan(tmp_path) -> None:
    path = tmp_path / 'plans.json'
    path.write_text('[1, 2, 3]', encoding='utf-8')
    assert PlanStore(path).load(MARCH) == MonthPlan()


def test_malformed_entries_are_skipped(tmp_path) -> None:
    path = tmp_path / 'plans.json'
    path.write_text(
        json.dumps(
            {
                'cashflow-2025-03': {
                    'starting_balance': '-40.5',
                    'incomes': [
                        {'id': 'ok', 'name': 'Paycheck', 'amount': '100', 'date': '2025-03-02'},
                        {'id': 'bad-amount', 'name': 'Oops', 'amount': 'lots', 'date': '2025-03-02'},
                        {'id': 'ok', 'name': 'Duplicate', 'amount': '1', 'date': '2025-03-03'},
                        {'id': 'numeric-name', 'name': 5, 'amount': '1', 'date': '2025-03-02'},
                        {'id': 'huge', 'name': 'Lottery', 'amount': '1e30', 'date': '2025-03-02'},
                    ],
                    'expenses': [
                        {'id': 'bad-date', 'name': 'Rent', 'amount': '10', 'date': 'tomorrow'},
                        'not an entry',
                        {'id': 'trailing', 'name': 'Gym', 'amount': '5', 'date': '2025-03-04garbage'},
                    ],
                },
                'unrelated-key': {},
            }
        ),
        encoding='utf-8',
    )
    store = PlanStore(path)
    plan = store.load(MARCH)

    assert plan.starting_balance == Decimal('-40.50')
    assert [e.id for e in plan.incomes] == ['ok']
    assert plan.expenses == ()
    assert store.periods() == [MARCH]


def test_invalid_starting_balance_falls_back_to_zero(tmp_path) -> None:
    path = tmp_path / 'plans.json'
    path.write_text(json.dumps({'cashflow-2025-03': {'starting_balance': 'NaN'}}), encoding='utf-8')
    assert PlanStore(path).load(MARCH).starting_balance == 0


def test_oversized_starting_balance_falls_back_to_zero(tmp_path) -> None:
    path = tmp_path / 'plans.json'
    path.write_text(json.dumps({'cashflow-2025-03': {'starting_balance': '1e30'}}), encoding='utf-8')
    assert PlanStore(path).load(MARCH).starting_balance == 0


def test_write_failure_raises_oserror_with_path(tmp_path, monkeypatch) -> None:
    store = PlanStore(tmp_path / 'plans.json')

    def fail_replace(src, dst):
        raise PermissionError('read-only')

    monkeypatch.setattr(plan_storage.os, 'replace', fail_replace)
    with pytest.raises(OSError, match='Failed to save plans to'):
        store.save(MARCH, _plan())
    assert list(tmp_path.iterdir()) == []


def test_default_path_comes_from_config(tmp_path, monkeypatch) -> None:
    target = tmp_path / 'configured.json'
    monkeypatch.setattr(plan_storage.config, 'PLAN_PATH', target)

    save_plan(MARCH, _plan())
    assert target.exists()
    assert load_plan(MARCH) == _plan()
    assert load_plan(MARCH, path=tmp_path / 'other.json') == MonthPlan()
