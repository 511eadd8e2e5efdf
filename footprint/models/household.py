from datetime import datetime
from sqlalchemy import Integer, String, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column

from footprint.db.base import Base


class Household(Base):
    """A household owns every consumption event and one summary row."""

    __tablename__ = "households"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    num_members: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    sq_ft: Mapped[int | None] = mapped_column(Integer, nullable=True)
    num_vehicles: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    zipcode: Mapped[str | None] = mapped_column(String(10), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
