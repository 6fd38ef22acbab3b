from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from atelier.catalog.interfaces.dependencies import CatalogRepositoryDep, ReferenceRepositoryDep, StockServiceDep
from atelier.cart.application.services import CartService
from atelier.cart.infrastructure.store import InMemoryCartStore

@lru_cache()
def get_cart_store() -> InMemoryCartStore:
    """Magasin de paniers unique pour le processus."""
    return InMemoryCartStore()

CartStoreDep = Annotated[InMemoryCartStore, Depends(get_cart_store)]

def get_cart_service(
    catalog_repo: CatalogRepositoryDep,
    reference_repo: ReferenceRepositoryDep,
    stock_service: StockServiceDep,
) -> CartService:
    return CartService(
        catalog_repo=catalog_repo,
        reference_repo=reference_repo,
        stock_service=stock_service,
    )

CartServiceDep = Annotated[CartService, Depends(get_cart_service)]
