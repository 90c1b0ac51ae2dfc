"""Persistence for monthly plans.

All months live in one JSON document keyed by ``Period.key``::

    {
      "cashflow-2025-03": {
        "starting_balance": "1000.00",
        "incomes": [{"id": "...", "name": "Paycheck", "amount": "2500.00", "date": "2025-03-15"}],
        "expenses": [...]
      }
    }

Reads are forgiving: a missing or corrupt file, or a malformed entry, is
logged and skipped so the planner always opens.  Writes are not: a
failed write raises ``OSError`` naming the target file.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from . import config
from .entries import EntryValidationError, entry_from_dict, entry_to_dict, parse_amount
from .models import ZERO, Entry, MonthPlan
from .period import Period

logger = logging.getLogger(__name__)


def _parse_entries(raw: Any, key: str, collection: str) -> Tuple[Entry, ...]:
    if not isinstance(raw, list):
        return ()
    parsed: List[Entry] = []
    seen_ids = set()
    for item in raw:
        try:
            entry = entry_from_dict(item)
        except EntryValidationError as exc:
            logger.warning("Skipping malformed %s entry in %s: %s", collection, key, exc)
            continue
        if entry.id in seen_ids:
            logger.warning("Skipping duplicate %s entry id %s in %s", collection, entry.id, key)
            continue
        seen_ids.add(entry.id)
        parsed.append(entry)
    return tuple(parsed)


def plan_from_record(record: Any, key: str = '') -> MonthPlan:
    if not isinstance(record, dict):
        return MonthPlan()
    try:
        balance = parse_amount(record.get('starting_balance') or 0, allow_negative=True)
    except EntryValidationError as exc:
        logger.warning("Ignoring invalid starting balance in %s: %s", key, exc)
        balance = ZERO
    return MonthPlan(
        starting_balance=balance,
        incomes=_parse_entries(record.get('incomes'), key, 'income'),
        expenses=_parse_entries(record.get('expenses'), key, 'expense'),
    )


def plan_to_record(plan: MonthPlan) -> Dict[str, Any]:
    return {
        'starting_balance': str(plan.starting_balance),
        'incomes': [entry_to_dict(e) for e in plan.incomes],
        'expenses': [entry_to_dict(e) for e in plan.expenses],
    }


class PlanStore:
    """Key-value store of month plans backed by a single JSON file."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else config.PLAN_PATH

    def _read_all(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open('r', encoding='utf-8') as handle:
                data = json.load(handle)
        except (ValueError, OSError) as exc:
            logger.warning("Could not read plan store %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Plan store %s does not hold a mapping; ignoring it", self.path)
            return {}
        return data

    def _write_all(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix='.tmp', dir=str(self.path.parent)
            )
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as handle:
                    json.dump(data, handle, indent=2, sort_keys=True)
                os.replace(tmp_name, self.path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise OSError(f"Failed to save plans to {self.path}: {e}") from e

    def load(self, period: Period) -> MonthPlan:
        """Return the stored plan for ``period`` or an empty plan."""
        record = self._read_all().get(period.key)
        if record is None:
            return MonthPlan()
        plan = plan_from_record(record, period.key)
        logger.debug(
            "Loaded %s: %d income(s), %d expense(s)",
            period.key, len(plan.incomes), len(plan.expenses),
        )
        return plan

    def save(self, period: Period, plan: MonthPlan) -> None:
        data = self._read_all()
        data[period.key] = plan_to_record(plan)
        self._write_all(data)
        logger.info("Saved plan %s to %s", period.key, self.path)

    def delete(self, period: Period) -> None:
        data = self._read_all()
        if period.key not in data:
            return
        del data[period.key]
        self._write_all(data)
        logger.info("Deleted plan %s from %s", period.key, self.path)

    def periods(self) -> List[Period]:
        found: List[Period] = []
        for key in self._read_all():
            try:
                found.append(Period.from_key(key))
            except ValueError:
                logger.warning("Ignoring unknown key %r in %s", key, self.path)
        return sorted(found)


def load_plan(period: Period, path: Optional[Path] = None) -> MonthPlan:
    return PlanStore(path).load(period)


def save_plan(period: Period, plan: MonthPlan, path: Optional[Path] = None) -> None:
    PlanStore(path).save(period, plan)
