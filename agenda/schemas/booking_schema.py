# agenda/schemas/booking_schema.py
from datetime import date, time
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

ConflictReason = Literal[
    'capacity_exceeded',    # horário lotado no momento da escrita
    'service_unavailable',  # serviço inativo, fora da vigência ou do dia
    'schedule_closed',      # loja fechada / fora do horário de atendimento
    'invalid_request',      # data/hora malformada, passada ou transição inválida
]


class Reserved(BaseModel):
    kind: Literal['reserved'] = 'reserved'
    date: date
    time: time
    occupied: int = Field(ge=0, description="Turnos ativos no horário antes desta reserva.")
    capacity: int = Field(ge=1)

    model_config = ConfigDict(frozen=True)


class Conflict(BaseModel):
    kind: Literal['conflict'] = 'conflict'
    reason: ConflictReason
    message: str

    model_config = ConfigDict(frozen=True)


ReservationOutcome = Annotated[Union[Reserved, Conflict], Field(discriminator='kind')]


class SlotAvailability(BaseModel):
    """Detalhe por horário, usado pela grade do widget (inclui horários lotados)."""

    time: time
    occupied: int
    capacity: int
    remaining: int
    available: bool

    model_config = ConfigDict(frozen=True)


class ClientData(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None


class BookingResult(BaseModel):
    outcome: ReservationOutcome
    appointment_id: Optional[int] = None
    status: Optional[str] = None

    @property
    def reserved(self) -> bool:
        return isinstance(self.outcome, Reserved)
