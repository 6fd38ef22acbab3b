import logging
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

from atelier.config import settings

logger = logging.getLogger(__name__)

try:
    # Créer le moteur de base de données asynchrone
    engine = create_async_engine(
        settings.DATABASE_URL,
        echo=settings.DB_ECHO_LOG,
        future=True # Utilise l'API 2.0 de SQLAlchemy
    )

    # Créer une classe de session asynchrone
    AsyncSessionLocal = sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False # Empêche les objets d'expirer après commit
    )
    logger.info("Moteur et Session Factory SQLAlchemy Async configurés.")

except Exception as e:
    logger.critical(f"Erreur lors de la configuration de SQLAlchemy Async: {e}", exc_info=True)
    engine = None
    AsyncSessionLocal = None


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that provides an async database session."""
    if AsyncSessionLocal is None:
        logger.error("La factory de session SQLAlchemy n'est pas initialisée.")
        raise RuntimeError("Database session factory is not initialized.")

    async with AsyncSessionLocal() as session:
        try:
            yield session
            # Les commits sont faits par les repositories, opération par opération.
        except Exception as e:
            logger.error(f"Erreur durant la session DB, rollback: {e}", exc_info=True)
            await session.rollback()
            raise
        finally:
            await session.close()
            logger.debug("Session DB fermée.")


async def get_optional_db_session() -> AsyncGenerator[Optional[AsyncSession], None]:
    """Fournit une session uniquement si le stockage SQL est activé."""
    if settings.STORAGE_BACKEND != "sql":
        yield None
        return
    async for session in get_db_session():
        yield session


def _import_orm_models() -> None:
    # Les tables doivent être enregistrées dans SQLModel.metadata avant create_all
    from atelier.catalog.infrastructure import orm_models as _catalog_models  # noqa: F401
    from atelier.sales.infrastructure import orm_models as _sales_models  # noqa: F401


async def create_tables() -> None:
    """Crée toutes les tables SQLModel."""
    _import_orm_models()
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

