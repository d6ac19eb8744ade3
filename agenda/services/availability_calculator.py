# agenda/services/availability_calculator.py
"""
Cálculo dos horários reserváveis de um serviço em uma data.

Combina o horário semanal da loja (RecurrenceExpander), as regras do
serviço e os turnos já existentes. Tudo aqui é função pura sobre os
argumentos recebidos: a ocupação é passada pelo chamador a cada pedido e
nunca fica guardada entre chamadas.

Algoritmo:
    1. Serviço inativo, fora da vigência ou em dia da semana não atendido -> vazio.
       Loja temporariamente fechada ou em dia de folga -> vazio.
    2. Expandir o horário da loja na data em intervalos abertos.
    3. Gerar candidatos a cada `duration_minutes` a partir do início de cada
       intervalo, descartando os que não cabem inteiros no intervalo.
    4. Indexar a ocupação por (data, hora) exata, só com turnos ativos e
       ignorando o turno em edição (exclude_appointment_id).
    5. Manter os candidatos com capacidade livre (CapacityPolicy).
    6. Devolver em ordem cronológica.
"""
from collections import Counter
from datetime import date, datetime, time
from typing import Iterable, Optional

from agenda.schemas.booking_schema import SlotAvailability
from agenda.schemas.schedule_schema import AppointmentSlot, OpenInterval, ServiceRules, StoreRules
from agenda.services import capacity_policy
from agenda.services.recurrence_expander import expand
from agenda.utils.constants import WEEKDAY_MAP
from agenda.utils.date_parser import from_minutes, iter_dates, to_minutes
from agenda.utils.exceptions import ScheduleClosedError, ServiceUnavailableError
from agenda.utils.system_message import MESSAGES


# =========================================================
# REGRAS DE BLOQUEIO (compartilhadas com o ConflictResolver)
# =========================================================
def check_service_available(service: ServiceRules, target_date: date) -> None:
    """Levanta ServiceUnavailableError se o serviço não pode ser reservado na data."""
    if not service.active:
        raise ServiceUnavailableError(MESSAGES['SERVICE_INACTIVE'])

    if not service.is_valid_on(target_date):
        raise ServiceUnavailableError(
            MESSAGES['SERVICE_OUT_OF_WINDOW'].format(data=target_date.isoformat())
        )

    weekday = target_date.weekday()
    if weekday not in service.available_weekdays:
        raise ServiceUnavailableError(
            MESSAGES['SERVICE_WEEKDAY_UNAVAILABLE'].format(dia=WEEKDAY_MAP[weekday].capitalize())
        )


def check_store_open(store: StoreRules, target_date: date) -> None:
    """Levanta ScheduleClosedError se a loja não atende na data."""
    if store.temporarily_closed:
        raise ScheduleClosedError(MESSAGES['STORE_TEMPORARILY_CLOSED'])
    if target_date in store.days_off:
        raise ScheduleClosedError(MESSAGES['STORE_DAY_OFF'].format(data=target_date.isoformat()))


def _bookable(store: StoreRules, service: ServiceRules, target_date: date) -> bool:
    try:
        check_service_available(service, target_date)
        check_store_open(store, target_date)
    except (ServiceUnavailableError, ScheduleClosedError):
        return False
    return True


# =========================================================
# CANDIDATOS E OCUPAÇÃO
# =========================================================
def candidate_starts(intervals: Iterable[OpenInterval], duration_minutes: int) -> list[int]:
    """
    Inícios candidatos (minutos do dia), com passo igual à duração do serviço.

    Um candidato só entra se [início, início + duração) cabe inteiro no
    intervalo; a sobra final menor que a duração não gera turno parcial.
    """
    starts = []
    for interval in intervals:
        current = interval.start_minutes
        while interval.fits(current, duration_minutes):
            starts.append(current)
            current += duration_minutes
    return sorted(starts)


def build_occupancy_index(
    existing: Iterable[AppointmentSlot],
    exclude_appointment_id: Optional[int] = None,
) -> Counter:
    """Conta turnos ativos por (data, hora) exata. Cancelados nunca ocupam."""
    index = Counter()
    for appointment in existing:
        if not appointment.is_active:
            continue
        if exclude_appointment_id is not None and appointment.appointment_id == exclude_appointment_id:
            continue
        index[(appointment.date, appointment.time)] += 1
    return index


def _drop_elapsed(starts: list[int], target_date: date, now: Optional[datetime]) -> list[int]:
    """Remove horários que já passaram no relógio local da loja."""
    if now is None:
        return starts
    today = now.date()
    if target_date < today:
        return []
    if target_date > today:
        return starts
    now_minutes = to_minutes(now.time())
    return [start for start in starts if start > now_minutes]


# =========================================================
# API PÚBLICA
# =========================================================
def describe_slots(
    store: StoreRules,
    service: ServiceRules,
    target_date: date,
    existing: Iterable[AppointmentSlot],
    exclude_appointment_id: Optional[int] = None,
    now: Optional[datetime] = None,
) -> list[SlotAvailability]:
    """Todos os horários compatíveis com a duração, lotados ou não, com a contagem de ocupação."""
    if not _bookable(store, service, target_date):
        return []

    intervals = expand(store.schedule, target_date)
    starts = candidate_starts(intervals, service.duration_minutes)
    starts = _drop_elapsed(starts, target_date, now)
    if not starts:
        return []

    occupancy = build_occupancy_index(existing, exclude_appointment_id)
    capacity = capacity_policy.effective_capacity(store.capacity)

    slots = []
    for start in starts:
        slot_time = from_minutes(start)
        occupied = occupancy.get((target_date, slot_time), 0)
        slots.append(SlotAvailability(
            time=slot_time,
            occupied=occupied,
            capacity=capacity,
            remaining=capacity_policy.remaining(store.capacity, occupied),
            available=capacity_policy.has_room(store.capacity, occupied),
        ))
    return slots


def get_available_slots(
    store: StoreRules,
    service: ServiceRules,
    target_date: date,
    existing: Iterable[AppointmentSlot],
    exclude_appointment_id: Optional[int] = None,
    now: Optional[datetime] = None,
) -> list[time]:
    """Horários de início reserváveis, em ordem cronológica. Vazio quando não há horários."""
    return [
        slot.time
        for slot in describe_slots(store, service, target_date, existing, exclude_appointment_id, now)
        if slot.available
    ]


def get_available_slots_for_range(
    store: StoreRules,
    service: ServiceRules,
    start: date,
    end: date,
    existing: Iterable[AppointmentSlot],
    exclude_appointment_id: Optional[int] = None,
    now: Optional[datetime] = None,
) -> dict[date, list[time]]:
    """Horários por data em [start, end]. Datas sem horário livre são omitidas."""
    existing = tuple(existing)
    result = {}
    for current in iter_dates(start, end):
        slots = get_available_slots(store, service, current, existing, exclude_appointment_id, now)
        if slots:
            result[current] = slots
    return result
