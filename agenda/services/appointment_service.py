# agenda/services/appointment_service.py
"""
Fachada de escrita: criar, reagendar e mudar status de turnos.

Criação e reagendamento rodam em uma única transação:
    1. SELECT ... FOR UPDATE na loja (serializa escritores da mesma loja)
    2. ConflictResolver relê a ocupação do horário
    3. grava só se o resultado for Reserved
Se a tarefa for cancelada ou qualquer etapa falhar, session.begin() faz o
ROLLBACK; nunca fica um turno gravado sem a revalidação de capacidade.
"""
from datetime import date, datetime, time
from typing import Callable, Optional, Union

from sqlalchemy.ext.asyncio import async_sessionmaker, AsyncSession

from agenda.config.logger import setup_logger
from agenda.config.settings_loader import get_setting
from agenda.database.models.agenda_model import Agenda
from agenda.database.repositories import AgendaRepository, ServicoRepository, StoreRepository
from agenda.database.repositories.agenda_repo import to_appointment_slot
from agenda.database.repositories.servico_repo import to_service_rules
from agenda.schemas.booking_schema import BookingResult, ClientData, Conflict, Reserved
from agenda.schemas.schedule_schema import AppointmentSlot, ServiceRules, StoreRules
from agenda.services.appointment_validator import AppointmentValidator
from agenda.services.conflict_resolver import ConflictResolver
from agenda.utils.constants import STATUS_CANCELLED, STATUS_CONFIRMED, STATUS_PENDING
from agenda.utils.date_parser import format_hhmm, store_now
from agenda.utils.exceptions import BookingValidationError, NotFoundError
from agenda.utils.system_message import MESSAGES

logger = setup_logger(__name__)


class AppointmentService:
    """Lógica de negócio para criação e alteração de turnos."""

    def __init__(self,
                 session_maker: async_sessionmaker[AsyncSession],
                 validator: Optional[AppointmentValidator] = None,
                 clock: Callable[[Optional[str]], datetime] = store_now):
        self._session_maker = session_maker
        self.validator = validator or AppointmentValidator()
        self._clock = clock

    def _get_session(self) -> AsyncSession:
        return self._session_maker()

    def _get_repos(self, session: AsyncSession) -> dict:
        return {
            "store_repo": StoreRepository(session)
            , "servico_repo": ServicoRepository(session)
            , "agenda_repo": AgendaRepository(session)
        }

    def _now(self, store: StoreRules) -> datetime:
        return self._clock(store.timezone or get_setting("DEFAULT_STORE_TIMEZONE"))

    async def _rules_for(self, repositories: dict, agendamento: Agenda) -> ServiceRules:
        """Regras do serviço do turno; turno geral (sem serviço) usa só a duração gravada."""
        if agendamento.servico_id is None:
            return ServiceRules(service_id=0, duration_minutes=agendamento.duracao_minutos)
        servico = await repositories["servico_repo"].get_servico(agendamento.servico_id)
        return to_service_rules(servico)

    # =========================================================
    # CRIAÇÃO
    # =========================================================
    async def book_appointment(self,
                               store_id: str,
                               service_id: int,
                               data: Union[str, date],
                               hora: Union[str, time],
                               client: ClientData) -> BookingResult:
        """
        Reserva o horário e grava o turno na mesma transação.
        Retorna BookingResult com Conflict (nada gravado) ou Reserved + id do turno.
        """
        try:
            target_date = self.validator.parse_date(data)
            target_time = self.validator.parse_time(hora)
        except BookingValidationError as e:
            return BookingResult(outcome=Conflict(reason=e.reason, message=e.message))

        async with self._get_session() as session:
            async with session.begin():
                try:
                    repositories = self._get_repos(session)
                    store_repo = repositories["store_repo"]

                    await store_repo.lock(store_id)
                    store = await store_repo.get_rules(store_id)
                    servico = await repositories["servico_repo"].get_servico(service_id, store_id)
                    service = to_service_rules(servico)

                    resolver = ConflictResolver(repositories["agenda_repo"], self.validator)
                    outcome = await resolver.reserve(
                        store, service, target_date, target_time, now=self._now(store)
                    )
                    if isinstance(outcome, Conflict):
                        return BookingResult(outcome=outcome)

                    status = STATUS_CONFIRMED if service.auto_confirm else STATUS_PENDING
                    agendamento = await repositories["agenda_repo"].create(
                        store_id=store_id
                        , data=target_date
                        , hora=target_time
                        , duracao_minutos=service.duration_minutes
                        , status=status
                        , client_name=client.name
                        , servico_id=servico.servico_id
                        , service_name=servico.nome
                        , service_price=service.price_snapshot
                        , client_email=client.email
                        , client_phone=client.phone
                        , client_location=client.location
                        , notes=client.notes
                    )

                    logger.info(
                        f"Turno {agendamento.agenda_id} criado ({status}) loja={store_id} "
                        f"data={target_date} hora={format_hhmm(target_time)}"
                    )
                    return BookingResult(outcome=outcome, appointment_id=agendamento.agenda_id, status=status)
                except NotFoundError as e:
                    logger.error(f"Referência inexistente ao criar turno: {e.message}")
                    raise
                except Exception as e:
                    logger.error(f"Erro transacional ao criar turno: {e}")
                    # Re-lança para que o bloco session.begin() faça o ROLLBACK.
                    raise

    # =========================================================
    # REAGENDAMENTO
    # =========================================================
    async def reschedule_appointment(self,
                                     appointment_id: int,
                                     data: Union[str, date],
                                     hora: Union[str, time],
                                     by_client: bool = False) -> BookingResult:
        """
        Move o turno para (data, hora). O próprio turno não conta na ocupação
        do novo horário, então manter o mesmo horário sempre é aceito.
        """
        try:
            target_date = self.validator.parse_date(data)
            target_time = self.validator.parse_time(hora)
        except BookingValidationError as e:
            return BookingResult(outcome=Conflict(reason=e.reason, message=e.message))

        async with self._get_session() as session:
            async with session.begin():
                try:
                    repositories = self._get_repos(session)
                    agenda_repo = repositories["agenda_repo"]
                    store_repo = repositories["store_repo"]

                    agendamento = await agenda_repo.get_agendamento(appointment_id)
                    await store_repo.lock(agendamento.store_id)
                    # Relê depois do lock: status/horário podem ter mudado enquanto esperava
                    await session.refresh(agendamento)

                    if agendamento.status == STATUS_CANCELLED:
                        return BookingResult(
                            outcome=Conflict(
                                reason='invalid_request',
                                message=MESSAGES['VALIDATION_CANCELLED_RESCHEDULE'],
                            ),
                            appointment_id=agendamento.agenda_id,
                            status=agendamento.status,
                        )

                    store = await store_repo.get_rules(agendamento.store_id)
                    service = await self._rules_for(repositories, agendamento)

                    now = self._now(store)
                    resolver = ConflictResolver(agenda_repo, self.validator)
                    outcome = await resolver.reserve(
                        store, service, target_date, target_time,
                        exclude_appointment_id=agendamento.agenda_id,
                        now=now,
                    )
                    if isinstance(outcome, Reserved):
                        await agenda_repo.update_slot(
                            agendamento.agenda_id, target_date, target_time,
                            by_client=by_client, modified_at=now,
                        )
                        logger.info(
                            f"Turno {agendamento.agenda_id} reagendado para {target_date} "
                            f"{format_hhmm(target_time)} (cliente={by_client})"
                        )

                    return BookingResult(
                        outcome=outcome,
                        appointment_id=agendamento.agenda_id,
                        status=agendamento.status,
                    )
                except NotFoundError as e:
                    logger.error(f"Referência inexistente ao reagendar turno: {e.message}")
                    raise
                except Exception as e:
                    logger.error(f"Erro transacional ao reagendar turno: {e}")
                    raise

    # =========================================================
    # STATUS
    # =========================================================
    async def change_status(self, appointment_id: int, status: str, by_client: bool = False) -> AppointmentSlot:
        """
        Mudança pura de status (sem mudar data/hora): não revalida capacidade.
        Levanta InvalidStatusTransitionError para transições proibidas.
        """
        async with self._get_session() as session:
            async with session.begin():
                try:
                    agenda_repo = self._get_repos(session)["agenda_repo"]
                    agendamento = await agenda_repo.get_agendamento(appointment_id)

                    self.validator.validate_transition(agendamento.status, status)
                    if agendamento.status != status:
                        agendamento = await agenda_repo.update_status(
                            appointment_id, status, by_client=by_client
                        )
                        logger.info(f"Turno {appointment_id} agora está '{status}'")

                    return to_appointment_slot(agendamento)
                except NotFoundError as e:
                    logger.error(f"Referência inexistente ao mudar status: {e.message}")
                    raise
                except BookingValidationError:
                    raise
                except Exception as e:
                    logger.error(f"Erro transacional ao mudar status: {e}")
                    raise

    async def confirm(self, appointment_id: int) -> AppointmentSlot:
        return await self.change_status(appointment_id, STATUS_CONFIRMED)

    async def cancel(self, appointment_id: int, by_client: bool = False) -> AppointmentSlot:
        return await self.change_status(appointment_id, STATUS_CANCELLED, by_client=by_client)
