# agenda/services/capacity_policy.py
from agenda.schemas.schedule_schema import CapacityConfig


def effective_capacity(config: CapacityConfig) -> int:
    """Sem múltiplos turnos por horário a capacidade é sempre 1, seja qual for max_per_slot."""
    if not config.allow_multiple:
        return 1
    return max(1, config.max_per_slot)


def has_room(config: CapacityConfig, occupied_count: int) -> bool:
    """Cabe mais um turno no horário?"""
    if not config.allow_multiple:
        return occupied_count == 0
    return occupied_count < max(1, config.max_per_slot)


def remaining(config: CapacityConfig, occupied_count: int) -> int:
    return max(0, effective_capacity(config) - occupied_count)
