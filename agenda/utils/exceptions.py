# agenda/utils/exceptions.py
"""
Erros do núcleo de agendamento.

Cada erro carrega um ``reason`` estável que as fachadas convertem em
``Conflict(reason=...)`` para a interface. ``NotFoundError`` indica bug do
chamador (id obsoleto) e é propagado.
"""
from typing import Optional


class SchedulingError(Exception):
    """Erro base do agendamento."""

    reason: str = "invalid_request"

    def __init__(self, message: str, reason: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if reason is not None:
            self.reason = reason


class BookingValidationError(SchedulingError):
    """Data/hora malformada, duração inválida ou data no passado."""

    reason = "invalid_request"


class InvalidStatusTransitionError(BookingValidationError):
    pass


class ServiceUnavailableError(SchedulingError):
    """Serviço inativo, fora da vigência ou dia da semana não atendido."""

    reason = "service_unavailable"


class ScheduleClosedError(SchedulingError):
    """A loja não tem intervalo aberto que cubra o dia/hora pedido."""

    reason = "schedule_closed"


class CapacityExceededError(SchedulingError):
    """O horário atingiu a capacidade configurada no momento da escrita."""

    reason = "capacity_exceeded"


class NotFoundError(SchedulingError):
    reason = "not_found"
