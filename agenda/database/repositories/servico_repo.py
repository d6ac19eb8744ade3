# agenda/database/repositories/servico_repo.py
from decimal import Decimal
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from agenda.database.repositories.base_repo import BaseRepository
from agenda.database.models.servico_model import Servico
from agenda.schemas.schedule_schema import ServiceRules
from agenda.utils.constants import ALL_WEEKDAYS
from agenda.utils.exceptions import NotFoundError
from agenda.utils.system_message import MESSAGES

def to_service_rules(servico: Servico) -> ServiceRules:
    return ServiceRules(
        service_id=servico.servico_id,
        duration_minutes=servico.duracao_minutos,
        price_snapshot=Decimal(servico.preco or 0),
        # Lista vazia/nula no banco = todos os dias
        available_weekdays=frozenset(servico.available_days or ALL_WEEKDAYS),
        valid_from=servico.start_date,
        valid_until=servico.end_date,
        active=bool(servico.ativo),
        auto_confirm=bool(servico.auto_confirm),
    )

class ServicoRepository(BaseRepository[Servico]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, Servico)

    async def get_by_id(self, servico_id: int) -> Optional[Servico]:
        return await self.session.get(Servico, servico_id)

    async def get_servico(self, servico_id: int, store_id: Optional[str] = None) -> Servico:
        servico = await self.get_by_id(servico_id)
        if servico is None or (store_id is not None and servico.store_id != store_id):
            raise NotFoundError(MESSAGES['NOT_FOUND_SERVICE'].format(service_id=servico_id))
        return servico

    async def get_service(self, servico_id: int, store_id: Optional[str] = None) -> ServiceRules:
        """Regras do serviço usadas no cálculo de disponibilidade."""
        return to_service_rules(await self.get_servico(servico_id, store_id))
