# agenda/database/repositories/base_repo.py

from typing import TypeVar, Generic, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from agenda.database.base import Base

# Tipo genérico para os modelos (Store, Agenda, etc.)
ModelType = TypeVar("ModelType", bound=Base)

class BaseRepository(Generic[ModelType]):
    """
    Repositório base genérico para operações assíncronas.

    Não faz commit: quem abre a transação (async with session.begin()) é o
    serviço, para que leitura da ocupação e escrita fiquem na mesma transação.
    """
    def __init__(self, session: AsyncSession, model: type[ModelType]):
        self.session = session
        self.model = model

        # Coluna PK, para montar consultas WHERE dinamicamente
        self._pk_column = self.model.__mapper__.primary_key[0]

    async def get_by_id(self, item_id) -> Optional[ModelType]:
        """Obtém um item pelo ID."""
        stmt = select(self.model).where(self._pk_column == item_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def add(self, item: ModelType) -> ModelType:
        """Adiciona o item à sessão e faz flush para obter a PK."""
        self.session.add(item)
        await self.session.flush()
        await self.session.refresh(item)
        return item
