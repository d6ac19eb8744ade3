# agenda/database/repositories/schedule_repo.py
from datetime import date
from typing import Optional

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.config.logger import setup_logger
from agenda.database.repositories.base_repo import BaseRepository
from agenda.database.models.schedule_model import Schedule
from agenda.database.models.day_off_model import DayOff
from agenda.schemas.schedule_schema import ContinuousHours, ScheduleDay, SplitHours

logger = setup_logger(__name__)

def to_schedule_day(row: Schedule) -> Optional[ScheduleDay]:
    """
    Converte a linha (flag is_continuous + campos anuláveis) na variante
    ContinuousHours | SplitHours. Combinação inválida (ex.: horário com
    intervalo sem o bloco da tarde) é registrada e o dia fica fechado.
    """
    try:
        if row.is_continuous:
            hours = ContinuousHours(start=row.start_time, end=row.end_time)
        else:
            hours = SplitHours(
                morning_start=row.morning_start,
                morning_end=row.morning_end,
                afternoon_start=row.afternoon_start,
                afternoon_end=row.afternoon_end,
            )
        return ScheduleDay(weekday=row.day, enabled=row.enabled, hours=hours)
    except ValidationError as e:
        logger.error(
            f"Horário inválido para loja {row.store_id} dia {row.day} "
            f"(corrido={row.is_continuous}); dia tratado como fechado: {e.errors()}"
        )
        return None

class ScheduleRepository(BaseRepository[Schedule]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, Schedule)

    async def get_weekly_schedule(self, store_id: str) -> list[ScheduleDay]:
        """Horário semanal da loja, só com os dias habilitados e válidos."""
        stmt = select(Schedule).where(
            Schedule.store_id == store_id,
            Schedule.enabled.is_(True)
        ).order_by(Schedule.day)

        rows = (await self.session.scalars(stmt)).all()
        days = [to_schedule_day(row) for row in rows]
        return [day for day in days if day is not None]

    async def get_days_off(self, store_id: str, start: Optional[date] = None, end: Optional[date] = None) -> set[date]:
        stmt = select(DayOff.data).where(DayOff.store_id == store_id)
        if start is not None:
            stmt = stmt.where(DayOff.data >= start)
        if end is not None:
            stmt = stmt.where(DayOff.data <= end)
        return set((await self.session.scalars(stmt)).all())
