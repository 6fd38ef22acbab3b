import logging
from typing import Optional

from atelier.catalog.domain.entities import Article, Variant
from atelier.core.exceptions import StockUnavailableException

logger = logging.getLogger(__name__)


def available_quantity(article: Article, variant: Optional[Variant] = None) -> int:
    """Stock disponible pour une déclinaison, ou pour l'article entier."""
    if variant is not None:
        return variant.stock
    return article.total_stock


class StockService:
    """Contrôle de stock consultatif, appelé avant un ajout au panier et à l'encaissement.

    Ne réserve rien et ne modifie aucun stock.
    """

    def has_stock(self, article: Article, variant: Optional[Variant], requested_qty: int) -> bool:
        """True si ``requested_qty`` ne dépasse pas le stock disponible. Ne lève jamais."""
        available = available_quantity(article, variant)
        ok = requested_qty <= available
        if not ok:
            logger.debug(
                f"[StockService] Stock insuffisant article {article.id} "
                f"(variante: {variant.id if variant else None}) demandé: {requested_qty}, dispo: {available}"
            )
        return ok

    def ensure_stock(self, article: Article, variant: Optional[Variant], requested_qty: int) -> None:
        """Comme has_stock, mais lève StockUnavailableException en cas de manque."""
        if not self.has_stock(article, variant, requested_qty):
            raise StockUnavailableException(
                article_id=article.id,
                variant_id=variant.id if variant else None,
                requested=requested_qty,
                available=available_quantity(article, variant),
                label=variant.sku if variant else article.name,
            )
