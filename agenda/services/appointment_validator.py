# agenda/services/appointment_validator.py
from datetime import datetime, time, date
from typing import Union

from agenda.config.logger import setup_logger
from agenda.utils.constants import APPOINTMENT_STATUSES, MAX_RANGE_DAYS, STATUS_TRANSITIONS
from agenda.utils.date_parser import parse_date_value, parse_time_value
from agenda.utils.exceptions import BookingValidationError, InvalidStatusTransitionError
from agenda.utils.system_message import MESSAGES

logger = setup_logger(__name__)

class AppointmentValidator:
    """Validações de entrada e de regras de negócio para turnos."""

    # =========================================================
    # MÉTODOS DE NORMALIZAÇÃO
    # =========================================================
    def parse_date(self, value: Union[str, date]) -> date:
        """Aceita date, 'AAAA-MM-DD', 'DD/MM/AAAA' ou 'DD-MM-AAAA'."""
        parsed = parse_date_value(value)
        if parsed is None:
            raise BookingValidationError(MESSAGES['VALIDATION_FORMAT_ERROR_DATE'].format(valor=value))
        return parsed

    def parse_time(self, value: Union[str, time]) -> time:
        """Aceita time, 'HH:MM', 'HH:MM:SS', '14h' ou '14h30'."""
        parsed = parse_time_value(value)
        if parsed is None:
            raise BookingValidationError(MESSAGES['VALIDATION_FORMAT_ERROR_TIME'].format(valor=value))
        return parsed

    def parse_range(self, start: Union[str, date], end: Union[str, date],
                    max_days: int = MAX_RANGE_DAYS) -> tuple[date, date]:
        start_date = self.parse_date(start)
        end_date = self.parse_date(end)
        if end_date < start_date:
            raise BookingValidationError(MESSAGES['VALIDATION_INVALID_RANGE'].format(
                inicio=start_date.isoformat(), fim=end_date.isoformat()
            ))
        if (end_date - start_date).days + 1 > max_days:
            raise BookingValidationError(MESSAGES['VALIDATION_RANGE_TOO_LONG'].format(
                inicio=start_date.isoformat(), fim=end_date.isoformat(), max_dias=max_days
            ))
        return start_date, end_date

    # =========================================================
    # REGRAS
    # =========================================================
    def validate_duration(self, duration_minutes: int) -> None:
        if duration_minutes is None or duration_minutes <= 0:
            raise BookingValidationError(MESSAGES['VALIDATION_INVALID_DURATION'])

    def validate_not_past(self, target_date: date, target_time: time, now: datetime) -> None:
        """O turno precisa começar depois de "agora" (relógio local da loja)."""
        if datetime.combine(target_date, target_time) <= now:
            raise BookingValidationError(MESSAGES['VALIDATION_PAST_DATE'])

    def validate_status(self, status: str) -> str:
        if status not in APPOINTMENT_STATUSES:
            raise BookingValidationError(MESSAGES['VALIDATION_INVALID_STATUS'].format(status=status))
        return status

    def validate_transition(self, current: str, target: str) -> None:
        """
        pending -> confirmed; pending|confirmed -> cancelled; cancelled é terminal.
        Manter o mesmo status é aceito (no-op).
        """
        self.validate_status(target)
        if current == target:
            return
        if target not in STATUS_TRANSITIONS.get(current, frozenset()):
            logger.info(f"Transição de status rejeitada: {current} -> {target}")
            raise InvalidStatusTransitionError(
                MESSAGES['VALIDATION_STATUS_TRANSITION'].format(atual=current, novo=target)
            )
