from .store_repo import StoreRepository
from .schedule_repo import ScheduleRepository
from .servico_repo import ServicoRepository
from .agenda_repo import AgendaRepository

__all__ = [
    "StoreRepository"
    , "ScheduleRepository"
    , "ServicoRepository"
    , "AgendaRepository"
    ,
]
