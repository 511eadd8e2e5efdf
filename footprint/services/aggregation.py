"""
Monthly aggregator: dated events -> chronologically ordered monthly buckets.

Month key
---------
Single-date event (start == end): its calendar month.
Range event: the majority month, i.e. the month holding the most days of
the inclusive range. Every month the range touches is counted; ties go to
the later month.

aggregate_by_month() is pure: it never reads or writes storage.
"""
from __future__ import annotations

import calendar
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Iterable, Iterator, Optional

from footprint.core.errors import InvalidInputError


@dataclass(frozen=True)
class DatedEmission:
    period_start: date
    period_end: date
    co2e_kg: Decimal

    @classmethod
    def from_record(cls, record: Any) -> "DatedEmission":
        return cls(
            period_start=record.period_start,
            period_end=record.period_end,
            co2e_kg=Decimal(record.co2e_kg or 0),
        )


@dataclass(frozen=True)
class MonthlyBucket:
    month: date            # first day of the month
    total_co2e_kg: Decimal

    @property
    def label(self) -> str:
        return self.month.strftime("%Y-%m")


# ---------------------------------------------------------------------------
# Calendar helpers
# ---------------------------------------------------------------------------

def utc_today() -> date:
    return datetime.now(tz=timezone.utc).date()


def month_start(day: date) -> date:
    return day.replace(day=1)


def month_end(day: date) -> date:
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


def add_months(month: date, count: int) -> date:
    index = month.year * 12 + (month.month - 1) + count
    return date(index // 12, index % 12 + 1, 1)


def iter_months(first: date, last: date) -> Iterator[date]:
    """Yield the first day of every month from `first` to `last` inclusive."""
    current, stop = month_start(first), month_start(last)
    while current <= stop:
        yield current
        current = add_months(current, 1)


def majority_month(start: date, end: date) -> date:
    if end < start:
        raise InvalidInputError(
            f"period_end {end} is before period_start {start}.", field="period_end"
        )
    best, best_days = month_start(start), -1
    for month in iter_months(start, end):
        days = (min(end, month_end(month)) - max(start, month)).days + 1
        if days >= best_days:
            best, best_days = month, days
    return best


def month_key(event: DatedEmission) -> date:
    return majority_month(event.period_start, event.period_end)


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

def aggregate_by_month(
    events: Iterable[DatedEmission | Any],
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> list[MonthlyBucket]:
    """
    Sum CO2e per month key and zero-fill every month in between.

    With `start`/`end` the series spans exactly that range and events whose
    month falls outside it are ignored. Without a range it spans the first
    to the last populated month; no events means an empty list. With only
    one bound and no events the series is that single month.
    """
    totals: dict[date, Decimal] = defaultdict(Decimal)
    for event in events:
        if not isinstance(event, DatedEmission):
            event = DatedEmission.from_record(event)
        totals[month_key(event)] += event.co2e_kg

    first = month_start(start) if start else (min(totals) if totals else None)
    last = month_start(end) if end else (max(totals) if totals else None)
    # a half-open range with no events spans the one known month
    first = first or last
    last = last or first
    if first is None or first > last:
        return []

    return [
        MonthlyBucket(month=month, total_co2e_kg=totals.get(month, Decimal("0")))
        for month in iter_months(first, last)
    ]
