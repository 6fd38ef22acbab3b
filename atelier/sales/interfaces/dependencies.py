from functools import lru_cache
from typing import Annotated, Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from atelier.core.database import get_optional_db_session

# Domain
from atelier.sales.domain.repositories import AbstractSaleRepository

# Infrastructure
from atelier.sales.infrastructure.memory import InMemorySaleRepository
from atelier.sales.infrastructure.persistence import SQLAlchemySaleRepository

# Application
from atelier.sales.application.services import CheckoutService, SalesService
from atelier.catalog.interfaces.dependencies import CatalogRepositoryDep, ReferenceRepositoryDep, StockServiceDep

# --- Repository Dependencies ---

@lru_cache()
def get_memory_sale_repository() -> InMemorySaleRepository:
    return InMemorySaleRepository()

def get_sale_repository(
    session: Optional[AsyncSession] = Depends(get_optional_db_session)
) -> AbstractSaleRepository:
    """Fournit le journal des ventes SQL si une session est ouverte, sinon celui en mémoire."""
    if session is not None:
        return SQLAlchemySaleRepository(session=session)
    return get_memory_sale_repository()

SaleRepositoryDep = Annotated[AbstractSaleRepository, Depends(get_sale_repository)]

# --- Service Dependencies ---

def get_checkout_service(
    catalog_repo: CatalogRepositoryDep,
    sale_repo: SaleRepositoryDep,
    stock_service: StockServiceDep,
) -> CheckoutService:
    return CheckoutService(catalog_repo=catalog_repo, sale_repo=sale_repo, stock_service=stock_service)

def get_sales_service(
    sale_repo: SaleRepositoryDep,
    reference_repo: ReferenceRepositoryDep,
) -> SalesService:
    return SalesService(sale_repo=sale_repo, reference_repo=reference_repo)

CheckoutServiceDep = Annotated[CheckoutService, Depends(get_checkout_service)]
SalesServiceDep = Annotated[SalesService, Depends(get_sales_service)]
