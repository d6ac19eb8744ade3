# agenda/services/conflict_resolver.py
"""
Guarda de escrita: revalida um horário imediatamente antes de gravar.

A ocupação é relida do banco no momento da chamada (nunca a contagem
usada para montar a grade de horários). Sozinho, `reserve` não impede que
duas chamadas simultâneas vejam vaga: o AppointmentService chama este
método e faz a escrita na mesma transação, com a linha da loja travada.
"""
from datetime import date, datetime, time
from typing import Optional, Union

from agenda.config.logger import setup_logger
from agenda.config.settings_loader import get_setting
from agenda.schemas.booking_schema import Conflict, Reserved
from agenda.schemas.schedule_schema import ServiceRules, StoreRules
from agenda.services import capacity_policy
from agenda.services.appointment_validator import AppointmentValidator
from agenda.services.availability_calculator import (
    candidate_starts, check_service_available, check_store_open,
)
from agenda.services.recurrence_expander import covers, expand
from agenda.utils.constants import WEEKDAY_MAP
from agenda.utils.date_parser import format_hhmm, store_now, to_minutes
from agenda.utils.exceptions import (
    CapacityExceededError, NotFoundError, ScheduleClosedError, SchedulingError,
)
from agenda.utils.system_message import MESSAGES

logger = setup_logger(__name__)

class ConflictResolver:
    def __init__(self, agenda_repo, validator: Optional[AppointmentValidator] = None):
        self.agenda_repo = agenda_repo
        self.validator = validator or AppointmentValidator()

    def _check_open_at(self, store: StoreRules, service: ServiceRules, target_date: date, target_time: time) -> None:
        check_store_open(store, target_date)

        intervals = expand(store.schedule, target_date)
        dia = WEEKDAY_MAP[target_date.weekday()].capitalize()
        if not intervals:
            raise ScheduleClosedError(MESSAGES['STORE_CLOSED_WEEKDAY'].format(dia=dia))

        # O turno inteiro precisa caber em um único bloco (não atravessa a pausa)
        if not covers(intervals, target_time, service.duration_minutes):
            raise ScheduleClosedError(
                MESSAGES['OUTSIDE_BUSINESS_HOURS'].format(hora=format_hhmm(target_time), dia=dia)
            )

        # Só inícios da grade (passo = duração do serviço a partir do início de cada bloco)
        if to_minutes(target_time) not in candidate_starts(intervals, service.duration_minutes):
            raise ScheduleClosedError(
                MESSAGES['SLOT_OFF_GRID'].format(hora=format_hhmm(target_time))
            )

    async def _check_capacity(
        self, store: StoreRules, target_date: date, target_time: time, exclude_appointment_id: Optional[int]
    ) -> Reserved:
        occupied = await self.agenda_repo.count_at_slot(
            store.store_id, target_date, target_time, exclude_id=exclude_appointment_id
        )
        capacity = capacity_policy.effective_capacity(store.capacity)

        if not capacity_policy.has_room(store.capacity, occupied):
            if capacity > 1:
                message = MESSAGES['SLOT_FULL'].format(ocupados=occupied, capacidade=capacity)
            else:
                message = MESSAGES['SLOT_NOT_AVAILABLE']
            raise CapacityExceededError(message)

        return Reserved(date=target_date, time=target_time, occupied=occupied, capacity=capacity)

    async def reserve(
        self,
        store: StoreRules,
        service: ServiceRules,
        target_date: date,
        target_time: time,
        exclude_appointment_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> Union[Reserved, Conflict]:
        """
        Revalida (store, date, time) e retorna Reserved ou Conflict(reason).

        Em Conflict o chamador não deve gravar. NotFoundError é propagado.
        """
        if now is None:
            now = store_now(store.timezone or get_setting("DEFAULT_STORE_TIMEZONE"))

        try:
            self.validator.validate_duration(service.duration_minutes)
            self.validator.validate_not_past(target_date, target_time, now)
            check_service_available(service, target_date)
            self._check_open_at(store, service, target_date, target_time)
            outcome = await self._check_capacity(store, target_date, target_time, exclude_appointment_id)
        except NotFoundError:
            raise
        except SchedulingError as e:
            logger.info(
                f"Reserva rejeitada ({e.reason}) loja={store.store_id} "
                f"data={target_date} hora={format_hhmm(target_time)}: {e.message}"
            )
            return Conflict(reason=e.reason, message=e.message)

        logger.debug(
            f"Horário livre loja={store.store_id} data={target_date} hora={format_hhmm(target_time)} "
            f"({outcome.occupied}/{outcome.capacity})"
        )
        return outcome
