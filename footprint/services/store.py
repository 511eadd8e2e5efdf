"""
Record store: the only module that talks to SQLAlchemy.

Every SQLAlchemy failure is rolled back and re-raised as StoreError so
callers never see a half-applied write. Missing rows raise the NotFoundError
variants so "absent" is distinguishable from "store unavailable".
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date
from decimal import Decimal
from typing import Any, Iterator, Optional, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from footprint.core.errors import EventNotFoundError, HouseholdNotFoundError, StoreError
from footprint.models import ConversionFactor, Household, HouseholdSummary
from footprint.services.units import ConversionFactorTable

logger = logging.getLogger(__name__)

Row = TypeVar("Row")


class RecordStore:
    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _guard(self, action: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Store failure while %s: %s", action, exc)
            raise StoreError(
                message=f"Record store failed while {action}.",
                details={"action": action},
            ) from exc

    # ------------------------------------------------------------------
    # Households
    # ------------------------------------------------------------------

    def get_household(self, household_id: int) -> Household:
        with self._guard("reading household"):
            household = self.db.get(Household, household_id)
        if household is None:
            raise HouseholdNotFoundError(household_id)
        return household

    def insert_household(self, **fields: Any) -> Household:
        return self.insert(Household(**fields))

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def get_event(self, model: type[Row], household_id: int, event_id: int, category: str) -> Row:
        with self._guard(f"reading {category} event"):
            row = self.db.execute(
                select(model).where(model.id == event_id, model.household_id == household_id)
            ).scalar_one_or_none()
        if row is None:
            raise EventNotFoundError(category, event_id)
        return row

    def filter_events(
        self,
        model: type[Row],
        household_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[Row]:
        """Rows whose [period_start, period_end] overlaps [start, end]."""
        stmt = select(model).where(model.household_id == household_id)
        if start is not None:
            stmt = stmt.where(model.period_end >= start)
        if end is not None:
            stmt = stmt.where(model.period_start <= end)
        stmt = stmt.order_by(model.period_start, model.id)
        with self._guard(f"querying {model.__tablename__}"):
            return list(self.db.execute(stmt).scalars().all())

    def insert(self, row: Row) -> Row:
        with self._guard(f"inserting into {row.__tablename__}"):
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
        return row

    def update(self, row: Row, fields: dict[str, Any]) -> Row:
        with self._guard(f"updating {row.__tablename__}"):
            for name, value in fields.items():
                setattr(row, name, value)
            self.db.commit()
            self.db.refresh(row)
        return row

    def delete(self, row: Any) -> None:
        with self._guard(f"deleting from {row.__tablename__}"):
            self.db.delete(row)
            self.db.commit()

    # ------------------------------------------------------------------
    # Household summary
    # ------------------------------------------------------------------

    def get_summary(self, household_id: int) -> Optional[HouseholdSummary]:
        with self._guard("reading household summary"):
            return self.db.execute(
                select(HouseholdSummary).where(HouseholdSummary.household_id == household_id)
            ).scalar_one_or_none()

    def upsert_summary(self, household_id: int, category: str, value: Decimal) -> HouseholdSummary:
        """Write one category column of the household's summary row (last write wins)."""
        summary = self.get_summary(household_id)
        with self._guard("upserting household summary"):
            if summary is None:
                summary = HouseholdSummary(household_id=household_id)
                self.db.add(summary)
            setattr(summary, category, value)
            self.db.commit()
            self.db.refresh(summary)
        return summary

    # ------------------------------------------------------------------
    # Reference data
    # ------------------------------------------------------------------

    def load_conversion_factors(self) -> ConversionFactorTable:
        with self._guard("loading conversion factors"):
            rows = self.db.execute(select(ConversionFactor)).scalars().all()
        if not rows:
            logger.warning("conversion_factors table is empty; using built-in factors")
            return ConversionFactorTable.defaults()
        return ConversionFactorTable.from_rows(rows)
