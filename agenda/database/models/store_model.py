# agenda/database/models/store_model.py
from __future__ import annotations
from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, Boolean, Integer, CheckConstraint
from sqlalchemy.orm import relationship, Mapped, mapped_column
from ..base import Base, TimestampMixin

if TYPE_CHECKING:
    from .schedule_model import Schedule
    from .day_off_model import DayOff

class Store(TimestampMixin, Base):
    __tablename__ = 'stores'

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(150), nullable=False)

    # Configuração de capacidade por horário
    allow_multiple_appointments: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    max_appointments_per_slot: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    timezone: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    temporarily_closed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    __table_args__ = (
        CheckConstraint('max_appointments_per_slot >= 1', name='chk_store_max_per_slot'),
    )

    schedules: Mapped[list["Schedule"]] = relationship("Schedule", back_populates="store")
    days_off: Mapped[list["DayOff"]] = relationship("DayOff", back_populates="store")

    def __repr__(self):
        return f"<Store(id={self.id}, nome='{self.name}', max_por_horario={self.max_appointments_per_slot})>"
