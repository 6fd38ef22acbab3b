import logging
from typing import Dict, List, Optional

from atelier.catalog.domain.entities import Article, Color, Customer, Size, StockRequest
from atelier.catalog.domain.exceptions import ArticleNotFoundException, VariantNotFoundException
from atelier.catalog.domain.repositories import AbstractCatalogRepository, AbstractReferenceDataRepository
from atelier.core.exceptions import StockUnavailableException

from .seed import default_articles, default_colors, default_customers, default_sizes

logger = logging.getLogger(__name__)


class InMemoryCatalogRepository(AbstractCatalogRepository):
    """Implémentation en mémoire du repository du catalogue.

    Les lectures renvoient des copies : modifier un article reçu ne touche pas au catalogue.
    """

    def __init__(self, articles: Optional[List[Article]] = None):
        self._articles: Dict[str, Article] = {}
        for article in articles or []:
            self._articles[article.id] = article.model_copy(deep=True)

    @classmethod
    def seeded(cls) -> "InMemoryCatalogRepository":
        return cls(default_articles())

    async def list_articles(self) -> List[Article]:
        return [a.model_copy(deep=True) for a in self._articles.values()]

    async def get_article(self, article_id: str) -> Optional[Article]:
        article = self._articles.get(article_id)
        if article is None:
            logger.debug(f"Article ID {article_id} non trouvé dans get_article().")
            return None
        return article.model_copy(deep=True)

    def _resolve(self, request: StockRequest):
        article = self._articles.get(request.article_id)
        if article is None:
            raise ArticleNotFoundException(request.article_id)
        if request.variant_id is None:
            return article, None
        variant = article.get_variant(request.variant_id)
        if variant is None:
            raise VariantNotFoundException(request.variant_id, article_id=article.id)
        return article, variant

    async def decrement_stock(self, requests: List[StockRequest]) -> None:
        # Vérifier toutes les lignes avant de toucher au moindre stock
        resolved = [(self._resolve(r), r.quantity) for r in requests]
        for (article, variant), quantity in resolved:
            available = variant.stock if variant else (article.stock or 0)
            if quantity > available:
                raise StockUnavailableException(
                    article_id=article.id,
                    variant_id=variant.id if variant else None,
                    requested=quantity,
                    available=available,
                    label=variant.sku if variant else article.name,
                )
        for (article, variant), quantity in resolved:
            if variant is not None:
                variant.stock -= quantity
            else:
                article.stock = (article.stock or 0) - quantity
        logger.info(f"Stock décrémenté pour {len(requests)} ligne(s).")

    async def increment_stock(self, requests: List[StockRequest]) -> None:
        resolved = [(self._resolve(r), r.quantity) for r in requests]
        for (article, variant), quantity in resolved:
            if variant is not None:
                variant.stock += quantity
            else:
                article.stock = (article.stock or 0) + quantity
        logger.info(f"Stock réincrémenté pour {len(requests)} ligne(s).")


class InMemoryReferenceDataRepository(AbstractReferenceDataRepository):
    """Clients, tailles et couleurs en mémoire."""

    def __init__(
        self,
        customers: Optional[List[Customer]] = None,
        sizes: Optional[List[Size]] = None,
        colors: Optional[List[Color]] = None,
    ):
        self._customers = list(customers or [])
        self._sizes = list(sizes or [])
        self._colors = list(colors or [])

    @classmethod
    def seeded(cls) -> "InMemoryReferenceDataRepository":
        return cls(default_customers(), default_sizes(), default_colors())

    async def list_customers(self) -> List[Customer]:
        return list(self._customers)

    async def get_customer(self, customer_id: str) -> Optional[Customer]:
        return next((c for c in self._customers if c.id == customer_id), None)

    async def list_sizes(self) -> List[Size]:
        return sorted(self._sizes, key=lambda s: s.order)

    async def list_colors(self) -> List[Color]:
        return list(self._colors)
