# agenda/utils/date_parser.py

import logging
from datetime import date, time, datetime, timedelta
from typing import Iterator, Optional, Union
import re

import pytz

from agenda.utils.constants import MINUTES_PER_DAY

logger = logging.getLogger(__name__)

# Formatos aceitos para datas vindas da interface
DATE_FORMATS = ('%Y-%m-%d', '%d/%m/%Y', '%d-%m-%Y')

# "14:30", "14:30:00", "14h", "14h30", "9H". Depois de ":" os minutos são obrigatórios.
_TIME_RE = re.compile(r'^\s*(\d{1,2})\s*(?::\s*(\d{2})(?::([0-5]\d))?|[hH]\s*(\d{2})?)\s*$')


def parse_date_value(value: Union[str, date, None]) -> Optional[date]:
    """Converte uma string (ISO ou padrão brasileiro) em date. Retorna None se não reconhecer."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    texto = str(value).strip()
    # Postgres/ISO com hora ("2025-10-21T00:00:00")
    if 'T' in texto and len(texto) > 10:
        texto = texto.split('T')[0]

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(texto, fmt).date()
        except ValueError:
            continue

    logger.debug(f"Data não reconhecida: '{value}'")
    return None


def parse_time_value(value: Union[str, time, None]) -> Optional[time]:
    """Converte "HH:MM" (e variações) em time com resolução de minuto."""
    if value is None:
        return None
    if isinstance(value, datetime):
        value = value.time()
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0, tzinfo=None)

    match = _TIME_RE.match(str(value))
    if not match:
        logger.debug(f"Hora não reconhecida: '{value}'")
        return None

    hh = int(match.group(1))
    mm = int(match.group(2) or match.group(4) or 0)
    if hh > 23 or mm > 59:
        return None
    return time(hh, mm)


def to_minutes(value: time) -> int:
    """Minutos desde a meia-noite."""
    return value.hour * 60 + value.minute


def from_minutes(minutes: int) -> time:
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValueError(f"Minutos fora do dia: {minutes}")
    return time(minutes // 60, minutes % 60)


def format_hhmm(value: time) -> str:
    return value.strftime('%H:%M')


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Itera de start até end (inclusive)."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def get_timezone(tz_name: Optional[str]) -> pytz.BaseTzInfo:
    try:
        return pytz.timezone(tz_name or "UTC")
    except pytz.UnknownTimeZoneError:
        logger.error(f"Timezone inválido '{tz_name}', usando UTC")
        return pytz.UTC


def store_now(tz_name: Optional[str]) -> datetime:
    """
    "Agora" no fuso da loja, como datetime ingênuo (sem tzinfo).

    As datas e horas dos turnos são civis (sem fuso), então a comparação é
    feita com o relógio local da loja.
    """
    return datetime.now(get_timezone(tz_name)).replace(tzinfo=None)
