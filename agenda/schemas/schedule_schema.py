# agenda/schemas/schedule_schema.py
from datetime import date, time
from decimal import Decimal
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from agenda.utils.constants import ACTIVE_STATUSES, ALL_WEEKDAYS, APPOINTMENT_STATUSES
from agenda.utils.date_parser import to_minutes

_FROZEN = ConfigDict(extra="forbid", frozen=True)


def _strip_seconds(value: time) -> time:
    # Resolução de minuto
    return value.replace(second=0, microsecond=0, tzinfo=None)


class ContinuousHours(BaseModel):
    """Horário corrido: um único intervalo [start, end)."""

    mode: Literal["continuous"] = "continuous"
    start: time
    end: time

    model_config = _FROZEN

    @field_validator("start", "end")
    @classmethod
    def minute_resolution(cls, value: time) -> time:
        return _strip_seconds(value)

    @model_validator(mode="after")
    def check_order(self):
        if self.start >= self.end:
            raise ValueError(f"start ({self.start}) deve ser anterior a end ({self.end})")
        return self


class SplitHours(BaseModel):
    """Horário com intervalo: manhã [morning_start, morning_end) e tarde [afternoon_start, afternoon_end)."""

    mode: Literal["split"] = "split"
    morning_start: time
    morning_end: time
    afternoon_start: time
    afternoon_end: time

    model_config = _FROZEN

    @field_validator("morning_start", "morning_end", "afternoon_start", "afternoon_end")
    @classmethod
    def minute_resolution(cls, value: time) -> time:
        return _strip_seconds(value)

    @model_validator(mode="after")
    def check_order(self):
        if self.morning_start >= self.morning_end:
            raise ValueError("morning_start deve ser anterior a morning_end")
        if self.afternoon_start >= self.afternoon_end:
            raise ValueError("afternoon_start deve ser anterior a afternoon_end")
        if self.morning_end > self.afternoon_start:
            raise ValueError("morning_end não pode ser posterior a afternoon_start")
        return self


WorkingHours = Annotated[Union[ContinuousHours, SplitHours], Field(discriminator="mode")]


class ScheduleDay(BaseModel):
    """Horário de atendimento de um dia da semana (0 = segunda, 6 = domingo)."""

    weekday: int = Field(ge=0, le=6)
    enabled: bool = True
    hours: WorkingHours

    model_config = _FROZEN


class OpenInterval(BaseModel):
    """Intervalo aberto [start, end) em minutos do dia."""

    start: time
    end: time

    model_config = _FROZEN

    @model_validator(mode="after")
    def check_order(self):
        if self.start >= self.end:
            raise ValueError("Intervalo vazio ou invertido")
        return self

    @property
    def start_minutes(self) -> int:
        return to_minutes(self.start)

    @property
    def end_minutes(self) -> int:
        return to_minutes(self.end)

    def fits(self, start_minutes: int, duration_minutes: int) -> bool:
        """True se [start, start + duração) cabe inteiro neste intervalo (fim pode coincidir)."""
        return (
            self.start_minutes <= start_minutes
            and start_minutes + duration_minutes <= self.end_minutes
        )


class ServiceRules(BaseModel):
    """Regras do serviço que afetam a disponibilidade."""

    service_id: int
    duration_minutes: int = Field(gt=0)
    price_snapshot: Decimal = Decimal("0")
    available_weekdays: frozenset[int] = ALL_WEEKDAYS
    valid_from: Optional[date] = None
    valid_until: Optional[date] = None
    active: bool = True
    auto_confirm: bool = False

    model_config = _FROZEN

    @field_validator("available_weekdays")
    @classmethod
    def check_weekdays(cls, value: frozenset[int]) -> frozenset[int]:
        if not value:
            raise ValueError("available_weekdays não pode ser vazio")
        invalid = [d for d in value if d not in ALL_WEEKDAYS]
        if invalid:
            raise ValueError(f"Dias da semana inválidos: {sorted(invalid)}")
        return value

    def is_valid_on(self, day: date) -> bool:
        if self.valid_from and day < self.valid_from:
            return False
        if self.valid_until and day > self.valid_until:
            return False
        return True


class CapacityConfig(BaseModel):
    allow_multiple: bool = False
    max_per_slot: int = Field(default=1, ge=1)

    model_config = _FROZEN


class StoreRules(BaseModel):
    """Agregado com tudo que a loja define para a disponibilidade."""

    store_id: str
    capacity: CapacityConfig = CapacityConfig()
    schedule: tuple[ScheduleDay, ...] = ()
    timezone: Optional[str] = None
    temporarily_closed: bool = False
    days_off: frozenset[date] = frozenset()

    model_config = _FROZEN


class AppointmentSlot(BaseModel):
    """Projeção de um turno com os campos lidos pelo núcleo."""

    appointment_id: Optional[int] = None
    date: date
    time: time
    duration_minutes: int = Field(gt=0)
    status: str = "pending"

    model_config = _FROZEN

    @field_validator("time")
    @classmethod
    def minute_resolution(cls, value: time) -> time:
        return _strip_seconds(value)

    @field_validator("status")
    @classmethod
    def check_status(cls, value: str) -> str:
        if value not in APPOINTMENT_STATUSES:
            raise ValueError(f"Status inválido: {value}")
        return value

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES
