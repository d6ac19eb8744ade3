# agenda/database/models/servico_model.py
from __future__ import annotations
from typing import TYPE_CHECKING, Optional

from sqlalchemy import BigInteger, String, Boolean, Text, Integer, DECIMAL, Date, JSON, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship, Mapped, mapped_column
from datetime import date
from decimal import Decimal
from ..base import Base, TimestampMixin

if TYPE_CHECKING:
    from .agenda_model import Agenda

class Servico(TimestampMixin, Base):
    __tablename__ = 'servicos'

    servico_id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    store_id: Mapped[str] = mapped_column(String(36), ForeignKey('stores.id', ondelete='CASCADE'), nullable=False)
    nome: Mapped[str] = mapped_column(String(100), nullable=False)
    descricao: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    preco: Mapped[Decimal] = mapped_column(DECIMAL(10, 2), nullable=False, default=0)
    duracao_minutos: Mapped[int] = mapped_column(Integer, nullable=False)

    # Dias da semana em que o serviço é oferecido (0 = Segunda ... 6 = Domingo)
    available_days: Mapped[list[int]] = mapped_column(JSON, nullable=False, default=lambda: [0, 1, 2, 3, 4, 5, 6])
    # Vigência (inclusive); nulo = sem limite
    start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    ativo: Mapped[bool] = mapped_column(Boolean, default=True)
    auto_confirm: Mapped[bool] = mapped_column(Boolean, default=False)

    __table_args__ = (
        CheckConstraint('duracao_minutos > 0', name='chk_servico_duracao'),
    )

    # Relacionamento Inverso
    agendamentos: Mapped[list["Agenda"]] = relationship("Agenda", back_populates="servico")

    def __repr__(self):
        return f"<Servico(id={self.servico_id}, nome='{self.nome}', duracao={self.duracao_minutos})>"
