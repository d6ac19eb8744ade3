from datetime import date, datetime, time
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from agenda.database.repositories import AgendaRepository, ServicoRepository, StoreRepository
from agenda.database.repositories.servico_repo import to_service_rules
from agenda.schemas.schedule_schema import ContinuousHours, ScheduleDay
from agenda.utils.constants import ALL_WEEKDAYS
from agenda.utils.exceptions import NotFoundError


@pytest.fixture
def mock_session():
    session = MagicMock()
    session.get = AsyncMock(return_value=None)
    session.scalar = AsyncMock(return_value=0)
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    return session


def test_to_service_rules_empty_days_means_every_day():
    servico = SimpleNamespace(
        servico_id=3, duracao_minutos=45, preco=None, available_days=[],
        start_date=None, end_date=date(2030, 12, 31), ativo=1, auto_confirm=None,
    )
    rules = to_service_rules(servico)
    assert rules.available_weekdays == ALL_WEEKDAYS
    assert rules.price_snapshot == Decimal("0")
    assert rules.active is True
    assert rules.auto_confirm is False
    assert rules.valid_until == date(2030, 12, 31)


@pytest.mark.asyncio
async def test_count_at_slot_returns_int(mock_session):
    mock_session.scalar.return_value = 2
    repo = AgendaRepository(mock_session)

    assert await repo.count_at_slot("loja-1", date(2030, 1, 1), time(10, 0), exclude_id=5) == 2
    mock_session.scalar.assert_awaited_once()


@pytest.mark.asyncio
async def test_count_at_slot_handles_null(mock_session):
    mock_session.scalar.return_value = None
    repo = AgendaRepository(mock_session)
    assert await repo.count_at_slot("loja-1", date(2030, 1, 1), time(10, 0)) == 0


@pytest.mark.asyncio
async def test_missing_references_raise_not_found(mock_session):
    with pytest.raises(NotFoundError):
        await StoreRepository(mock_session).get_store("loja-x")
    with pytest.raises(NotFoundError):
        await ServicoRepository(mock_session).get_servico(99)


@pytest.mark.asyncio
async def test_servico_from_other_store_is_not_found(mock_session):
    mock_session.get.return_value = SimpleNamespace(servico_id=1, store_id="outra-loja")
    with pytest.raises(NotFoundError):
        await ServicoRepository(mock_session).get_servico(1, "loja-1")


@pytest.mark.asyncio
async def test_get_rules_builds_store_aggregate(mock_session):
    mock_session.get.return_value = SimpleNamespace(
        id="loja-1", allow_multiple_appointments=False, max_appointments_per_slot=4,
        timezone="America/Sao_Paulo", temporarily_closed=False,
    )
    monday = ScheduleDay(weekday=0, hours=ContinuousHours(start=time(9, 0), end=time(18, 0)))

    with patch("agenda.database.repositories.store_repo.ScheduleRepository") as mock_schedule_repo:
        schedule_repo = mock_schedule_repo.return_value
        schedule_repo.get_weekly_schedule = AsyncMock(return_value=[monday])
        schedule_repo.get_days_off = AsyncMock(return_value={date(2030, 1, 1)})

        rules = await StoreRepository(mock_session).get_rules("loja-1")

    assert rules.schedule == (monday,)
    assert rules.days_off == frozenset({date(2030, 1, 1)})
    assert rules.capacity.allow_multiple is False
    assert rules.capacity.max_per_slot == 4
    assert rules.timezone == "America/Sao_Paulo"


@pytest.mark.asyncio
async def test_update_slot_marks_client_change(mock_session):
    agendamento = SimpleNamespace(agenda_id=5, data=date(2030, 1, 1), hora_inicio=time(10, 0),
                                  modified_by_client=False, client_modified_at=None)
    repo = AgendaRepository(mock_session)
    repo.get_agendamento = AsyncMock(return_value=agendamento)

    modified_at = datetime(2030, 1, 1, 9, 15)
    await repo.update_slot(5, date(2030, 1, 2), time(11, 0), by_client=True, modified_at=modified_at)

    assert agendamento.data == date(2030, 1, 2)
    assert agendamento.hora_inicio == time(11, 0)
    assert agendamento.modified_by_client is True
    assert agendamento.client_modified_at == modified_at
    mock_session.flush.assert_awaited_once()


@pytest.mark.asyncio
async def test_update_slot_by_staff_keeps_client_audit(mock_session):
    agendamento = SimpleNamespace(agenda_id=5, data=date(2030, 1, 1), hora_inicio=time(10, 0),
                                  modified_by_client=False, client_modified_at=None)
    repo = AgendaRepository(mock_session)
    repo.get_agendamento = AsyncMock(return_value=agendamento)

    await repo.update_slot(5, date(2030, 1, 2), time(11, 0), modified_at=datetime(2030, 1, 1, 9, 15))

    assert agendamento.modified_by_client is False
    assert agendamento.client_modified_at is None
