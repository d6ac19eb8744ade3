# agenda/services/scheduler_service.py
"""
Fachada de leitura usada pelas telas (widget de reserva, modal de novo/editar
turno, página pública de reagendamento).

Cada chamada abre a própria sessão e recalcula tudo: a ocupação nunca é
guardada entre requisições.
"""
from datetime import date, datetime, time
from typing import Callable, Optional, Union

from sqlalchemy.ext.asyncio import async_sessionmaker, AsyncSession

from agenda.config.logger import setup_logger
from agenda.config.settings_loader import get_setting
from agenda.database.repositories import AgendaRepository, ServicoRepository, StoreRepository
from agenda.schemas.booking_schema import Conflict, Reserved, SlotAvailability
from agenda.schemas.schedule_schema import ServiceRules, StoreRules
from agenda.services import availability_calculator
from agenda.services.appointment_validator import AppointmentValidator
from agenda.services.conflict_resolver import ConflictResolver
from agenda.utils.date_parser import format_hhmm, store_now
from agenda.utils.exceptions import BookingValidationError, NotFoundError

logger = setup_logger(__name__)

class SchedulerService:
    def __init__(self,
                 session_maker: async_sessionmaker[AsyncSession],
                 validator: Optional[AppointmentValidator] = None,
                 clock: Callable[[Optional[str]], datetime] = store_now):
        self._session_maker = session_maker
        self.validator = validator or AppointmentValidator()
        self._clock = clock

    def _get_session(self) -> AsyncSession:
        """Retorna uma nova sessão assíncrona"""
        return self._session_maker()

    def _get_repos(self, session: AsyncSession) -> dict:
        """Centraliza a criação dos repositórios para a sessão atual."""
        return {
            "store_repo": StoreRepository(session)
            , "servico_repo": ServicoRepository(session)
            , "agenda_repo": AgendaRepository(session)
        }

    def _now(self, store: StoreRules) -> datetime:
        return self._clock(store.timezone or get_setting("DEFAULT_STORE_TIMEZONE"))

    async def _load_rules(self, repositories: dict, store_id: str, service_id: int) -> tuple[StoreRules, ServiceRules]:
        store = await repositories["store_repo"].get_rules(store_id)
        service = await repositories["servico_repo"].get_service(service_id, store_id)
        return store, service

    # =========================================================
    # LISTAGEM DE HORÁRIOS
    # =========================================================
    async def describe_slots(self,
                             store_id: str,
                             service_id: int,
                             data: Union[str, date],
                             exclude_appointment_id: Optional[int] = None) -> list[SlotAvailability]:
        """Grade completa do dia (horários lotados incluídos), com ocupação e vagas restantes."""
        target_date = self.validator.parse_date(data)

        async with self._get_session() as session:
            repositories = self._get_repos(session)
            try:
                store, service = await self._load_rules(repositories, store_id, service_id)
                existing = await repositories["agenda_repo"].list_active(store_id, target_date)
            except NotFoundError as e:
                logger.error(f"Referência inexistente ao listar horários: {e.message}")
                raise

        return availability_calculator.describe_slots(
            store, service, target_date, existing,
            exclude_appointment_id=exclude_appointment_id,
            now=self._now(store),
        )

    async def get_available_slots(self,
                                  store_id: str,
                                  service_id: int,
                                  data: Union[str, date],
                                  exclude_appointment_id: Optional[int] = None) -> list[str]:
        """Horários livres ("HH:MM") do serviço na data. Lista vazia quando não há vaga."""
        slots = await self.describe_slots(store_id, service_id, data, exclude_appointment_id)
        horarios = [format_hhmm(slot.time) for slot in slots if slot.available]
        logger.debug(f"Loja {store_id} serviço {service_id} em {data}: {len(horarios)} horário(s) livre(s)")
        return horarios

    async def get_available_slots_for_range(self,
                                            store_id: str,
                                            service_id: int,
                                            inicio: Union[str, date],
                                            fim: Union[str, date],
                                            exclude_appointment_id: Optional[int] = None) -> dict[str, list[str]]:
        """Horários livres por data ISO em [inicio, fim]. Datas sem vaga são omitidas."""
        start, end = self.validator.parse_range(inicio, fim)

        async with self._get_session() as session:
            repositories = self._get_repos(session)
            try:
                store, service = await self._load_rules(repositories, store_id, service_id)
                existing = await repositories["agenda_repo"].list_active(store_id, start, end)
            except NotFoundError as e:
                logger.error(f"Referência inexistente ao listar horários: {e.message}")
                raise

        por_data = availability_calculator.get_available_slots_for_range(
            store, service, start, end, existing,
            exclude_appointment_id=exclude_appointment_id,
            now=self._now(store),
        )
        return {
            dia.isoformat(): [format_hhmm(hora) for hora in horarios]
            for dia, horarios in por_data.items()
        }

    # =========================================================
    # VERIFICAÇÃO DE RESERVA (sem escrita)
    # =========================================================
    async def reserve_slot(self,
                           store_id: str,
                           service_id: int,
                           data: Union[str, date],
                           hora: Union[str, time],
                           exclude_appointment_id: Optional[int] = None) -> Union[Reserved, Conflict]:
        """
        Revalida o horário escolhido contra a ocupação atual.
        Não grava nada: para reservar de fato use AppointmentService.
        """
        try:
            target_date = self.validator.parse_date(data)
            target_time = self.validator.parse_time(hora)
        except BookingValidationError as e:
            return Conflict(reason=e.reason, message=e.message)

        async with self._get_session() as session:
            repositories = self._get_repos(session)
            try:
                store, service = await self._load_rules(repositories, store_id, service_id)
                resolver = ConflictResolver(repositories["agenda_repo"], self.validator)
                return await resolver.reserve(
                    store, service, target_date, target_time,
                    exclude_appointment_id=exclude_appointment_id,
                    now=self._now(store),
                )
            except NotFoundError as e:
                logger.error(f"Referência inexistente ao validar reserva: {e.message}")
                raise
