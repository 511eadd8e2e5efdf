"""
Shared router dependencies. Tests override these through
`app.dependency_overrides`.
"""
from fastapi import Depends
from sqlalchemy.orm import Session

from footprint.db.base import get_db
from footprint.services.store import RecordStore
from footprint.services.units import ConversionFactorTable


def get_store(db: Session = Depends(get_db)) -> RecordStore:
    return RecordStore(db)


def get_conversion_factors(store: RecordStore = Depends(get_store)) -> ConversionFactorTable:
    """Conversion factors are loaded per request; the table itself is read-only."""
    return store.load_conversion_factors()
