# agenda/database/models/schedule_model.py
from __future__ import annotations
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Integer, String, Boolean, Time, ForeignKey, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import relationship, Mapped, mapped_column
from datetime import time
from ..base import Base, TimestampMixin

if TYPE_CHECKING:
    from .store_model import Store

class Schedule(TimestampMixin, Base):
    """
    Horário semanal persistido (uma linha por dia da semana e loja).
    is_continuous decide quais colunas valem; a conversão para
    ContinuousHours/SplitHours é feita no ScheduleRepository.
    """
    __tablename__ = 'schedules'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    store_id: Mapped[str] = mapped_column(String(36), ForeignKey('stores.id', ondelete='CASCADE'), nullable=False)

    # 0 = Segunda, 6 = Domingo
    day: Mapped[int] = mapped_column(Integer, nullable=False)
    enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_continuous: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    start_time: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    end_time: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    morning_start: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    morning_end: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    afternoon_start: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    afternoon_end: Mapped[Optional[time]] = mapped_column(Time, nullable=True)

    __table_args__ = (
        CheckConstraint('day BETWEEN 0 AND 6', name='chk_schedule_day'),
        UniqueConstraint('store_id', 'day', name='uc_schedule_store_day'),
    )

    store: Mapped["Store"] = relationship("Store", back_populates="schedules")

    def __repr__(self):
        return f"<Schedule(store={self.store_id}, dia={self.day}, ativo={self.enabled}, corrido={self.is_continuous})>"
