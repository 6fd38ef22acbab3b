import logging
from functools import lru_cache
from typing import Annotated, Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from atelier.core.database import get_optional_db_session

# Domain
from atelier.catalog.domain.repositories import AbstractCatalogRepository, AbstractReferenceDataRepository

# Infrastructure
from atelier.catalog.infrastructure.memory import InMemoryCatalogRepository, InMemoryReferenceDataRepository
from atelier.catalog.infrastructure.persistence import SQLAlchemyCatalogRepository, SQLAlchemyReferenceDataRepository

# Application
from atelier.catalog.application.services import CatalogService
from atelier.stock.service import StockService

logger = logging.getLogger(__name__)

# --- Repositories en mémoire (un seul catalogue par processus) ---

@lru_cache()
def get_memory_catalog_repository() -> InMemoryCatalogRepository:
    logger.info("Initialisation du catalogue en mémoire (données de démonstration).")
    return InMemoryCatalogRepository.seeded()

@lru_cache()
def get_memory_reference_repository() -> InMemoryReferenceDataRepository:
    return InMemoryReferenceDataRepository.seeded()

# --- Repository Dependencies ---

def get_catalog_repository(
    session: Optional[AsyncSession] = Depends(get_optional_db_session)
) -> AbstractCatalogRepository:
    """Fournit le repository SQL si une session est ouverte, sinon le catalogue en mémoire."""
    if session is not None:
        return SQLAlchemyCatalogRepository(session=session)
    return get_memory_catalog_repository()

def get_reference_repository(
    session: Optional[AsyncSession] = Depends(get_optional_db_session)
) -> AbstractReferenceDataRepository:
    if session is not None:
        return SQLAlchemyReferenceDataRepository(session=session)
    return get_memory_reference_repository()

CatalogRepositoryDep = Annotated[AbstractCatalogRepository, Depends(get_catalog_repository)]
ReferenceRepositoryDep = Annotated[AbstractReferenceDataRepository, Depends(get_reference_repository)]

# --- Service Dependencies ---

def get_stock_service() -> StockService:
    return StockService()

StockServiceDep = Annotated[StockService, Depends(get_stock_service)]

def get_catalog_service(
    catalog_repo: CatalogRepositoryDep,
    reference_repo: ReferenceRepositoryDep,
) -> CatalogService:
    return CatalogService(catalog_repo=catalog_repo, reference_repo=reference_repo)

CatalogServiceDep = Annotated[CatalogService, Depends(get_catalog_service)]
