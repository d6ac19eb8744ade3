from .schedule_schema import (
    ContinuousHours, SplitHours, WorkingHours, ScheduleDay, OpenInterval,
    ServiceRules, CapacityConfig, StoreRules, AppointmentSlot,
)
from .booking_schema import (
    Reserved, Conflict, ReservationOutcome, SlotAvailability, BookingResult, ClientData,
)

__all__ = [
    "ContinuousHours"
    , "SplitHours"
    , "WorkingHours"
    , "ScheduleDay"
    , "OpenInterval"
    , "ServiceRules"
    , "CapacityConfig"
    , "StoreRules"
    , "AppointmentSlot"
    , "Reserved"
    , "Conflict"
    , "ReservationOutcome"
    , "SlotAvailability"
    , "BookingResult"
    , "ClientData"
    ,
]
