# agenda/database/models/day_off_model.py
from __future__ import annotations
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Integer, String, Date, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship, Mapped, mapped_column
from datetime import date
from ..base import Base, TimestampMixin

if TYPE_CHECKING:
    from .store_model import Store

class DayOff(TimestampMixin, Base):
    """Data específica em que a loja não atende (feriado, férias)."""
    __tablename__ = 'days_off'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    store_id: Mapped[str] = mapped_column(String(36), ForeignKey('stores.id', ondelete='CASCADE'), nullable=False)
    data: Mapped[date] = mapped_column(Date, nullable=False)
    reason: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    __table_args__ = (
        UniqueConstraint('store_id', 'data', name='uc_day_off_store_date'),
    )

    store: Mapped["Store"] = relationship("Store", back_populates="days_off")

    def __repr__(self):
        return f"<DayOff(store={self.store_id}, data={self.data})>"
