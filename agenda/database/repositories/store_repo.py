# agenda/database/repositories/store_repo.py
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.config.logger import setup_logger
from agenda.database.repositories.base_repo import BaseRepository
from agenda.database.repositories.schedule_repo import ScheduleRepository
from agenda.database.models.store_model import Store
from agenda.schemas.schedule_schema import CapacityConfig, StoreRules
from agenda.utils.exceptions import NotFoundError
from agenda.utils.system_message import MESSAGES

logger = setup_logger(__name__)

class StoreRepository(BaseRepository[Store]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, Store)

    async def get_store(self, store_id: str) -> Store:
        store = await self.session.get(Store, store_id)
        if store is None:
            raise NotFoundError(MESSAGES['NOT_FOUND_STORE'].format(store_id=store_id))
        return store

    async def lock(self, store_id: str) -> Store:
        """
        SELECT ... FOR UPDATE na linha da loja.

        Serializa as escritas de turnos da mesma loja até o fim da transação:
        "contar ocupação, depois gravar" vira atômico entre requisições.
        """
        stmt = select(Store).where(Store.id == store_id).with_for_update()
        store = (await self.session.scalars(stmt)).one_or_none()
        if store is None:
            raise NotFoundError(MESSAGES['NOT_FOUND_STORE'].format(store_id=store_id))
        return store

    async def get_rules(self, store_id: str) -> StoreRules:
        """Monta o agregado StoreRules (capacidade, horário semanal e folgas)."""
        store = await self.get_store(store_id)
        schedule_repo = ScheduleRepository(self.session)

        return StoreRules(
            store_id=store.id,
            capacity=CapacityConfig(
                allow_multiple=bool(store.allow_multiple_appointments),
                max_per_slot=max(1, store.max_appointments_per_slot or 1),
            ),
            schedule=tuple(await schedule_repo.get_weekly_schedule(store.id)),
            timezone=store.timezone,
            temporarily_closed=bool(store.temporarily_closed),
            days_off=frozenset(await schedule_repo.get_days_off(store.id)),
        )
