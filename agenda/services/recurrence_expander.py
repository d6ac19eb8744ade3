# agenda/services/recurrence_expander.py
"""
Expansão do horário semanal recorrente em intervalos abertos de uma data.

Funções puras: não acessam banco nem estado global, podem ser chamadas
em paralelo quantas vezes for preciso.
"""
from datetime import date, time
from typing import Iterable, Optional

from agenda.schemas.schedule_schema import ContinuousHours, OpenInterval, ScheduleDay
from agenda.utils.date_parser import iter_dates, to_minutes


def find_day(schedule: Iterable[ScheduleDay], weekday: int) -> Optional[ScheduleDay]:
    """Retorna a entrada do dia da semana, ou None se a loja não definiu esse dia."""
    for day in schedule:
        if day.weekday == weekday:
            return day
    return None


def expand(schedule: Iterable[ScheduleDay], target_date: date) -> list[OpenInterval]:
    """
    Intervalos abertos [start, end) da loja em target_date, em ordem cronológica.

    Dia ausente ou desabilitado significa fechado (lista vazia), nunca um
    horário padrão implícito.
    """
    day = find_day(schedule, target_date.weekday())
    if day is None or not day.enabled:
        return []

    hours = day.hours
    if isinstance(hours, ContinuousHours):
        return [OpenInterval(start=hours.start, end=hours.end)]

    # Horário com intervalo: dois blocos disjuntos, nenhum turno atravessa a pausa
    return [
        OpenInterval(start=hours.morning_start, end=hours.morning_end),
        OpenInterval(start=hours.afternoon_start, end=hours.afternoon_end),
    ]


def expand_range(schedule: Iterable[ScheduleDay], start: date, end: date) -> dict[date, list[OpenInterval]]:
    """Expande um intervalo de datas (inclusive). Datas fechadas são omitidas."""
    schedule = tuple(schedule)
    result = {}
    for current in iter_dates(start, end):
        intervals = expand(schedule, current)
        if intervals:
            result[current] = intervals
    return result


def covers(intervals: Iterable[OpenInterval], start_time: time, duration_minutes: int) -> bool:
    """True se [start_time, start_time + duração) cabe inteiro em um único intervalo."""
    start_minutes = to_minutes(start_time)
    return any(interval.fits(start_minutes, duration_minutes) for interval in intervals)
