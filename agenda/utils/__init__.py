from .system_message import MESSAGES
from .constants import WEEKDAY_MAP, ACTIVE_STATUSES

__all__ = [
    "MESSAGES"
    , "WEEKDAY_MAP"
    , "ACTIVE_STATUSES"
    ,
]
