# tests/conftest.py
from datetime import date, time
from unittest.mock import AsyncMock

import pytest

from agenda.schemas.schedule_schema import (
    CapacityConfig, ContinuousHours, ScheduleDay, ServiceRules, SplitHours, StoreRules,
    AppointmentSlot,
)

# 2030-01-01 é uma terça-feira
TUESDAY = date(2030, 1, 1)
SATURDAY = date(2030, 1, 5)
SUNDAY = date(2030, 1, 6)
MONDAY = date(2030, 1, 7)


def continuous_week(start=time(9, 0), end=time(13, 0), weekdays=range(7)):
    return tuple(
        ScheduleDay(weekday=d, hours=ContinuousHours(start=start, end=end))
        for d in weekdays
    )


def split_week(weekdays=range(7)):
    return tuple(
        ScheduleDay(
            weekday=d,
            hours=SplitHours(
                morning_start=time(8, 0), morning_end=time(13, 0),
                afternoon_start=time(16, 0), afternoon_end=time(20, 0),
            ),
        )
        for d in weekdays
    )


def make_store(schedule=None, allow_multiple=False, max_per_slot=1, **kwargs) -> StoreRules:
    return StoreRules(
        store_id="loja-1",
        capacity=CapacityConfig(allow_multiple=allow_multiple, max_per_slot=max_per_slot),
        schedule=schedule if schedule is not None else continuous_week(),
        **kwargs,
    )


def make_service(duration=30, **kwargs) -> ServiceRules:
    return ServiceRules(service_id=7, duration_minutes=duration, **kwargs)


def appointment(hora, status="confirmed", appointment_id=None, data=TUESDAY, duration=30) -> AppointmentSlot:
    return AppointmentSlot(
        appointment_id=appointment_id, date=data, time=hora, duration_minutes=duration, status=status
    )


# -----------------------------
# Sessão assíncrona falsa (async with session / session.begin())
# -----------------------------
class FakeTransaction:
    def __init__(self, session):
        self.session = session

    async def __aenter__(self):
        return self.session

    async def __aexit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.session.committed = True
        else:
            self.session.rolled_back = True
        return False


class FakeSession:
    def __init__(self):
        self.committed = False
        self.rolled_back = False
        self.refresh = AsyncMock()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    def begin(self):
        return FakeTransaction(self)


@pytest.fixture
def fake_session():
    return FakeSession()
