from datetime import date, datetime, time
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from agenda.schemas.booking_schema import ClientData, Conflict, Reserved
from agenda.services.appointment_service import AppointmentService
from agenda.utils.exceptions import InvalidStatusTransitionError, NotFoundError

from conftest import FakeSession, TUESDAY, make_store

FIXED_NOW = datetime(2029, 12, 31, 12, 0)


def fake_servico(**overrides):
    servico = dict(
        servico_id=7, store_id="loja-1", nome="Corte", descricao=None, preco=Decimal("50.00"),
        duracao_minutos=30, available_days=[0, 1, 2, 3, 4], start_date=None, end_date=None,
        ativo=True, auto_confirm=False,
    )
    servico.update(overrides)
    return SimpleNamespace(**servico)


def fake_agendamento(**overrides):
    agendamento = dict(
        agenda_id=5, store_id="loja-1", servico_id=7, data=TUESDAY, hora_inicio=time(10, 0),
        duracao_minutos=30, status="pending",
    )
    agendamento.update(overrides)
    return SimpleNamespace(**agendamento)


# -----------------------------
# Fixture do AppointmentService com repositórios mockados
# -----------------------------
@pytest.fixture
def mocked_service():
    with patch("agenda.services.appointment_service.StoreRepository") as mock_store_repo, \
         patch("agenda.services.appointment_service.ServicoRepository") as mock_servico_repo, \
         patch("agenda.services.appointment_service.AgendaRepository") as mock_agenda_repo:

        session = FakeSession()

        store_repo = mock_store_repo.return_value
        store_repo.lock = AsyncMock()
        store_repo.get_rules = AsyncMock(return_value=make_store())

        servico_repo = mock_servico_repo.return_value
        servico_repo.get_servico = AsyncMock(return_value=fake_servico())

        agenda_repo = mock_agenda_repo.return_value
        agenda_repo.count_at_slot = AsyncMock(return_value=0)
        agenda_repo.create = AsyncMock(return_value=SimpleNamespace(agenda_id=99))
        agenda_repo.get_agendamento = AsyncMock(return_value=fake_agendamento())
        agenda_repo.update_slot = AsyncMock()
        agenda_repo.update_status = AsyncMock()

        service = AppointmentService(MagicMock(return_value=session), clock=lambda tz: FIXED_NOW)
        yield service, session, store_repo, servico_repo, agenda_repo


# -----------------------------
# Criação
# -----------------------------
@pytest.mark.asyncio
async def test_book_appointment_locks_and_creates(mocked_service):
    service, session, store_repo, _, agenda_repo = mocked_service

    result = await service.book_appointment("loja-1", 7, "2030-01-01", "10:00", ClientData(name="Ana"))

    assert result.reserved
    assert result.appointment_id == 99
    assert result.status == "pending"
    store_repo.lock.assert_awaited_once_with("loja-1")
    kwargs = agenda_repo.create.await_args.kwargs
    assert kwargs["data"] == TUESDAY
    assert kwargs["hora"] == time(10, 0)
    assert kwargs["duracao_minutos"] == 30
    assert kwargs["service_price"] == Decimal("50.00")
    assert kwargs["client_name"] == "Ana"
    assert session.committed


@pytest.mark.asyncio
async def test_book_appointment_auto_confirm(mocked_service):
    service, _, _, servico_repo, agenda_repo = mocked_service
    servico_repo.get_servico.return_value = fake_servico(auto_confirm=True)

    result = await service.book_appointment("loja-1", 7, "2030-01-01", "10:00", ClientData(name="Ana"))

    assert result.status == "confirmed"
    assert agenda_repo.create.await_args.kwargs["status"] == "confirmed"


@pytest.mark.asyncio
async def test_book_appointment_full_slot_writes_nothing(mocked_service):
    service, _, _, _, agenda_repo = mocked_service
    agenda_repo.count_at_slot.return_value = 1

    result = await service.book_appointment("loja-1", 7, "2030-01-01", "10:00", ClientData(name="Ana"))

    assert not result.reserved
    assert result.outcome.reason == "capacity_exceeded"
    agenda_repo.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_book_appointment_malformed_date(mocked_service):
    service, _, store_repo, _, _ = mocked_service

    result = await service.book_appointment("loja-1", 7, "amanhã", "10:00", ClientData(name="Ana"))

    assert isinstance(result.outcome, Conflict)
    assert result.outcome.reason == "invalid_request"
    store_repo.lock.assert_not_awaited()


@pytest.mark.asyncio
async def test_book_appointment_rolls_back_on_error(mocked_service):
    service, session, _, _, agenda_repo = mocked_service
    agenda_repo.create.side_effect = RuntimeError("conexão perdida")

    with pytest.raises(RuntimeError):
        await service.book_appointment("loja-1", 7, "2030-01-01", "10:00", ClientData(name="Ana"))
    assert session.rolled_back


@pytest.mark.asyncio
async def test_book_appointment_unknown_service(mocked_service):
    service, _, _, servico_repo, _ = mocked_service
    servico_repo.get_servico.side_effect = NotFoundError("Serviço não encontrado")

    with pytest.raises(NotFoundError):
        await service.book_appointment("loja-1", 123, "2030-01-01", "10:00", ClientData(name="Ana"))


# -----------------------------
# Reagendamento
# -----------------------------
@pytest.mark.asyncio
async def test_reschedule_to_same_slot_excludes_itself(mocked_service):
    service, session, store_repo, _, agenda_repo = mocked_service

    result = await service.reschedule_appointment(5, "2030-01-01", "10:00", by_client=True)

    assert isinstance(result.outcome, Reserved)
    agenda_repo.count_at_slot.assert_awaited_once_with("loja-1", TUESDAY, time(10, 0), exclude_id=5)
    agenda_repo.update_slot.assert_awaited_once_with(
        5, TUESDAY, time(10, 0), by_client=True, modified_at=FIXED_NOW
    )
    store_repo.lock.assert_awaited_once_with("loja-1")
    session.refresh.assert_awaited_once()


@pytest.mark.asyncio
async def test_reschedule_to_full_slot_keeps_original(mocked_service):
    service, _, _, _, agenda_repo = mocked_service
    agenda_repo.count_at_slot.return_value = 1

    result = await service.reschedule_appointment(5, "2030-01-02", "11:00")

    assert result.outcome.reason == "capacity_exceeded"
    agenda_repo.update_slot.assert_not_awaited()


@pytest.mark.asyncio
async def test_reschedule_cancelled_is_rejected(mocked_service):
    service, _, _, _, agenda_repo = mocked_service
    agenda_repo.get_agendamento.return_value = fake_agendamento(status="cancelled")

    result = await service.reschedule_appointment(5, "2030-01-02", "11:00")

    assert result.outcome.reason == "invalid_request"
    agenda_repo.count_at_slot.assert_not_awaited()


@pytest.mark.asyncio
async def test_reschedule_general_appointment_uses_stored_duration(mocked_service):
    service, _, _, servico_repo, agenda_repo = mocked_service
    agenda_repo.get_agendamento.return_value = fake_agendamento(servico_id=None, duracao_minutos=240)

    # 09:00 + 240min termina 13:00, fim do expediente
    ok = await service.reschedule_appointment(5, "2030-01-02", "09:00")
    assert isinstance(ok.outcome, Reserved)

    late = await service.reschedule_appointment(5, "2030-01-02", "09:30")
    assert late.outcome.reason == "schedule_closed"
    servico_repo.get_servico.assert_not_awaited()


# -----------------------------
# Status
# -----------------------------
@pytest.mark.asyncio
async def test_confirm_pending(mocked_service):
    service, _, _, _, agenda_repo = mocked_service
    agenda_repo.update_status.return_value = fake_agendamento(status="confirmed")

    slot = await service.confirm(5)

    assert slot.status == "confirmed"
    agenda_repo.update_status.assert_awaited_once_with(5, "confirmed", by_client=False)


@pytest.mark.asyncio
async def test_cancel_by_client(mocked_service):
    service, _, _, _, agenda_repo = mocked_service
    agenda_repo.update_status.return_value = fake_agendamento(status="cancelled")

    slot = await service.cancel(5, by_client=True)

    assert not slot.is_active
    agenda_repo.update_status.assert_awaited_once_with(5, "cancelled", by_client=True)


@pytest.mark.asyncio
async def test_same_status_is_noop(mocked_service):
    service, _, _, _, agenda_repo = mocked_service

    slot = await service.change_status(5, "pending")

    assert slot.status == "pending"
    agenda_repo.update_status.assert_not_awaited()


@pytest.mark.asyncio
async def test_cancelled_is_terminal(mocked_service):
    service, _, _, _, agenda_repo = mocked_service
    agenda_repo.get_agendamento.return_value = fake_agendamento(status="cancelled")

    with pytest.raises(InvalidStatusTransitionError):
        await service.change_status(5, "confirmed")
    agenda_repo.update_status.assert_not_awaited()
