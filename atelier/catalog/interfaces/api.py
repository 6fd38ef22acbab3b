import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, status

from atelier.config import settings

# Schemas & Entities
from atelier.catalog.application.schemas import BarcodeLookupResponse, LowStockItem, SkuSuggestion
from atelier.catalog.domain.entities import Article, Color, Customer, Size, Variant

# Dependencies
from atelier.catalog.interfaces.dependencies import CatalogServiceDep

# Exceptions
from atelier.core.exceptions import NotFoundException, ValidationException

logger = logging.getLogger(__name__)

catalog_router = APIRouter(
    prefix="/catalog",
    tags=["Catalog"],
)

@catalog_router.get("/articles", response_model=List[Article])
async def list_articles_endpoint(
    service: CatalogServiceDep,
    active_only: bool = Query(default=False),
):
    """Liste les articles du catalogue avec leurs déclinaisons."""
    try:
        return await service.list_articles(active_only=active_only)
    except Exception as e:
        logger.exception(f"Erreur listage articles: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=settings.GENERIC_ERROR_MSG)

@catalog_router.get("/articles/{article_id}", response_model=Article)
async def get_article_endpoint(article_id: str, service: CatalogServiceDep):
    try:
        return await service.get_article(article_id)
    except NotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.exception(f"Erreur récupération article {article_id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=settings.GENERIC_ERROR_MSG)

@catalog_router.get("/articles/{article_id}/variants/available", response_model=List[Variant])
async def list_available_variants_endpoint(article_id: str, service: CatalogServiceDep):
    """Déclinaisons actives et en stock, proposées dans le sélecteur taille/couleur."""
    try:
        return await service.list_available_variants(article_id)
    except NotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.exception(f"Erreur déclinaisons disponibles article {article_id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=settings.GENERIC_ERROR_MSG)

@catalog_router.get("/articles/{article_id}/sku", response_model=SkuSuggestion)
async def suggest_sku_endpoint(
    article_id: str,
    service: CatalogServiceDep,
    size_id: Optional[str] = Query(default=None),
    color_id: Optional[str] = Query(default=None),
):
    """Propose le SKU d'une nouvelle déclinaison (taille/couleur) de l'article."""
    try:
        return await service.suggest_sku(article_id, size_id=size_id, color_id=color_id)
    except NotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.exception(f"Erreur proposition SKU article {article_id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=settings.GENERIC_ERROR_MSG)

@catalog_router.get("/barcodes/{code}", response_model=BarcodeLookupResponse)
async def lookup_barcode_endpoint(code: str, service: CatalogServiceDep):
    """Résout un code-barres en article (et déclinaison)."""
    try:
        match = await service.find_variant_by_barcode(code)
        requires_selection = match.variant is None and match.article.has_variants
        available = await service.list_available_variants(match.article.id) if requires_selection else []
        return BarcodeLookupResponse(
            article=match.article,
            variant=match.variant,
            unit_price=match.article.price_for(match.variant),
            requires_variant_selection=requires_selection,
            available_variants=available,
        )
    except ValidationException as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except NotFoundException as e:
        logger.debug(f"Code-barres {code} non reconnu.")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.exception(f"Erreur lecture code-barres {code}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=settings.GENERIC_ERROR_MSG)

@catalog_router.get("/search", response_model=List[Article])
async def search_articles_endpoint(
    service: CatalogServiceDep,
    q: str = Query(default="", description="Nom, code-barres ou SKU"),
):
    try:
        return await service.search_articles(q)
    except Exception as e:
        logger.exception(f"Erreur recherche articles '{q}': {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=settings.GENERIC_ERROR_MSG)

@catalog_router.get("/low-stock", response_model=List[LowStockItem])
async def list_low_stock_endpoint(service: CatalogServiceDep):
    """Déclinaisons à réapprovisionner (stock au seuil minimum ou en dessous)."""
    try:
        return await service.list_low_stock()
    except Exception as e:
        logger.exception(f"Erreur alertes de stock: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=settings.GENERIC_ERROR_MSG)

@catalog_router.get("/sizes", response_model=List[Size])
async def list_sizes_endpoint(service: CatalogServiceDep):
    try:
        return await service.list_sizes()
    except Exception as e:
        logger.exception(f"Erreur listage tailles: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=settings.GENERIC_ERROR_MSG)

@catalog_router.get("/colors", response_model=List[Color])
async def list_colors_endpoint(service: CatalogServiceDep):
    try:
        return await service.list_colors()
    except Exception as e:
        logger.exception(f"Erreur listage couleurs: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=settings.GENERIC_ERROR_MSG)

@catalog_router.get("/customers", response_model=List[Customer])
async def list_customers_endpoint(service: CatalogServiceDep):
    try:
        return await service.list_customers()
    except Exception as e:
        logger.exception(f"Erreur listage clients: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=settings.GENERIC_ERROR_MSG)
