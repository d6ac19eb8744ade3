# agenda/database/repositories/agenda_repo.py
from datetime import datetime, time, date
from decimal import Decimal
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.config.logger import setup_logger
from agenda.config.settings_loader import get_setting
from agenda.database.repositories.base_repo import BaseRepository
from agenda.database.models.agenda_model import Agenda
from agenda.schemas.schedule_schema import AppointmentSlot
from agenda.utils.constants import ACTIVE_STATUSES
from agenda.utils.date_parser import store_now
from agenda.utils.exceptions import NotFoundError
from agenda.utils.system_message import MESSAGES

logger = setup_logger(__name__)

def to_appointment_slot(agendamento: Agenda) -> AppointmentSlot:
    return AppointmentSlot(
        appointment_id=agendamento.agenda_id,
        date=agendamento.data,
        time=agendamento.hora_inicio,
        duration_minutes=agendamento.duracao_minutos,
        status=agendamento.status,
    )

class AgendaRepository(BaseRepository[Agenda]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, Agenda)

    async def get_agendamento(self, agenda_id: int) -> Agenda:
        agendamento = await self.get_by_id(agenda_id)
        if agendamento is None:
            raise NotFoundError(MESSAGES['NOT_FOUND_APPOINTMENT'].format(appointment_id=agenda_id))
        return agendamento

    async def list_active(self, store_id: str, start: date, end: Optional[date] = None) -> list[AppointmentSlot]:
        """Turnos ativos (pending/confirmed) da loja entre start e end (inclusive)."""
        end = end or start
        stmt = select(Agenda).where(
            Agenda.store_id == store_id,
            Agenda.data >= start,
            Agenda.data <= end,
            Agenda.status.in_(sorted(ACTIVE_STATUSES))
        ).order_by(Agenda.data, Agenda.hora_inicio)

        rows = (await self.session.scalars(stmt)).all()
        return [to_appointment_slot(row) for row in rows]

    async def count_at_slot(self, store_id: str, data: date, hora: time, exclude_id: Optional[int] = None) -> int:
        """Quantidade de turnos ativos no horário exato (data, hora), ignorando exclude_id."""
        stmt = select(func.count()).select_from(Agenda).where(
            Agenda.store_id == store_id,
            Agenda.data == data,
            Agenda.hora_inicio == hora,
            Agenda.status.in_(sorted(ACTIVE_STATUSES))
        )
        if exclude_id is not None:
            stmt = stmt.where(Agenda.agenda_id != exclude_id)

        return int((await self.session.scalar(stmt)) or 0)

    async def create(self,
                     store_id: str,
                     data: date,
                     hora: time,
                     duracao_minutos: int,
                     status: str,
                     client_name: str,
                     servico_id: Optional[int] = None,
                     service_name: Optional[str] = None,
                     service_price: Optional[Decimal] = None,
                     client_email: Optional[str] = None,
                     client_phone: Optional[str] = None,
                     client_location: Optional[str] = None,
                     notes: Optional[str] = None) -> Agenda:
        """Insere um novo turno (sem commit; a transação é do serviço)."""
        novo_agendamento = Agenda(
            store_id=store_id
            , servico_id=servico_id
            , data=data
            , hora_inicio=hora
            , duracao_minutos=duracao_minutos
            , status=status
            , service_name=service_name
            , service_price=service_price
            , client_name=client_name
            , client_email=client_email
            , client_phone=client_phone
            , client_location=client_location
            , notes=notes
        )
        return await self.add(novo_agendamento)

    async def update_slot(self,
                          agenda_id: int,
                          data: date,
                          hora: time,
                          by_client: bool = False,
                          modified_at: Optional[datetime] = None) -> Agenda:
        """
        Move o turno para outro (data, hora).
        modified_at: "agora" no relógio local da loja, gravado quando a alteração vem do cliente.
        """
        agendamento = await self.get_agendamento(agenda_id)
        agendamento.data = data
        agendamento.hora_inicio = hora
        if by_client:
            agendamento.modified_by_client = True
            agendamento.client_modified_at = modified_at or store_now(get_setting("DEFAULT_STORE_TIMEZONE"))

        await self.session.flush()
        return agendamento

    async def update_status(self, agenda_id: int, status: str, by_client: bool = False) -> Agenda:
        agendamento = await self.get_agendamento(agenda_id)
        agendamento.status = status
        if by_client:
            agendamento.modified_by_client = True

        await self.session.flush()
        return agendamento
