# Importa todos os modelos para que eles sejam registrados no Base do SQLAlchemy
from .store_model import Store
from .schedule_model import Schedule
from .day_off_model import DayOff
from .servico_model import Servico
from .agenda_model import Agenda

__all__ = [
    "Store"
    , "Schedule"
    , "DayOff"
    , "Servico"
    , "Agenda"
    ,
]
