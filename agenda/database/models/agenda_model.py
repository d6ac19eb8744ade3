# agenda/database/models/agenda_model.py
from __future__ import annotations
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (BigInteger, Integer, Time, Date, DateTime, Boolean, ForeignKey,
    CheckConstraint, Index, String, Text, DECIMAL)
from sqlalchemy.orm import relationship, Mapped, mapped_column
from datetime import datetime, time, date
from decimal import Decimal
from ..base import Base, TimestampMixin

if TYPE_CHECKING:
    from .servico_model import Servico

class Agenda(TimestampMixin, Base):
    __tablename__ = 'agenda'

    agenda_id: Mapped[int] = mapped_column(BigInteger, primary_key=True)

    store_id: Mapped[str] = mapped_column(String(36), ForeignKey('stores.id', ondelete='CASCADE'), nullable=False)
    # Nulo = "turno geral", sem serviço associado
    servico_id: Mapped[Optional[int]] = mapped_column(BigInteger, ForeignKey('servicos.servico_id', ondelete='RESTRICT'), nullable=True)

    # Data civil e hora local da loja (sem fuso)
    data: Mapped[date] = mapped_column(Date, nullable=False)
    hora_inicio: Mapped[time] = mapped_column(Time, nullable=False)
    duracao_minutos: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default='pending', nullable=False)

    # Snapshot do serviço no momento da reserva
    service_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    service_price: Mapped[Optional[Decimal]] = mapped_column(DECIMAL(10, 2), nullable=True)

    client_name: Mapped[str] = mapped_column(String(200), nullable=False)
    client_email: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    client_phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    client_location: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    modified_by_client: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    client_modified_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'cancelled')"
            , name='check_agenda_status'),

        CheckConstraint('duracao_minutos > 0', name='chk_agenda_duracao'),

        # Consulta de ocupação por horário exato
        Index('ix_agenda_store_slot', 'store_id', 'data', 'hora_inicio'),
    )

    servico: Mapped[Optional["Servico"]] = relationship("Servico", back_populates="agendamentos")

    def __repr__(self):
        return f"<Agenda(id={self.agenda_id}, loja={self.store_id}, data={self.data} {self.hora_inicio}, status={self.status})>"
