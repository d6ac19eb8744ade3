# agenda/database/base.py
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy import DateTime
from datetime import datetime

from agenda.config.logger import setup_logger

logger = setup_logger(__name__)

# ----------------------------------------------------------------------
# Classe Base para os Modelos

class Base(DeclarativeBase):
    """Classe base declarativa."""


class TimestampMixin:
    # Colunas de auditoria
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now, onupdate=datetime.now)

# ----------------------------------------------------------------------
# Função de Inicialização Assíncrona do Banco de Dados

async def init_db(engine: AsyncEngine):
    """
    Cria todas as tabelas no banco de dados.
    Deve ser chamada uma vez na inicialização da aplicação.
    """
    # Importar os modelos para que a Base.metadata os conheça
    import agenda.database.models  # noqa: F401

    async with engine.begin() as conn:
        # DDL é síncrono: roda via run_sync dentro do contexto assíncrono
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Tabelas do banco de dados sincronizadas com sucesso.")
