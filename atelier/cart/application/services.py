import logging
from typing import Optional, Tuple

from atelier.catalog.domain.entities import Article, Variant
from atelier.catalog.domain.exceptions import (
    ArticleNotFoundException, CustomerNotFoundException, VariantNotFoundException
)
from atelier.catalog.domain.repositories import AbstractCatalogRepository, AbstractReferenceDataRepository
from atelier.config import Settings, settings as default_settings
from atelier.catalog.application.services import CatalogService
from atelier.cart.domain.entities import Cart, CartLine
from atelier.cart.domain.pricing import DiscountPolicy, NoDiscount, Totals, compute_totals
from atelier.core.exceptions import AtelierDomainException
from atelier.stock.service import StockService

logger = logging.getLogger(__name__)


class CartService:
    """Service applicatif du panier : résolution catalogue, contrôle de stock, puis mutation du panier.

    Le stock est seulement vérifié, jamais réservé. Toute erreur laisse le panier inchangé.
    """

    def __init__(
        self,
        catalog_repo: AbstractCatalogRepository,
        reference_repo: Optional[AbstractReferenceDataRepository] = None,
        stock_service: Optional[StockService] = None,
        discount_policy: Optional[DiscountPolicy] = None,
        settings: Optional[Settings] = None,
    ):
        self.catalog_repo = catalog_repo
        self.reference_repo = reference_repo
        self.settings = settings or default_settings
        self.catalog_service = CatalogService(catalog_repo, reference_repo)
        self.stock_service = stock_service or StockService()
        self.discount_policy = discount_policy or NoDiscount()

    async def _resolve(self, article_id: str, variant_id: Optional[str]) -> Tuple[Article, Optional[Variant]]:
        article = await self.catalog_repo.get_article(article_id)
        if not article:
            raise ArticleNotFoundException(article_id)
        variant = None
        if variant_id is not None:
            variant = article.get_variant(variant_id)
            if variant is None:
                raise VariantNotFoundException(variant_id, article_id=article_id)
        return article, variant

    async def _labels(self, variant: Optional[Variant]) -> Tuple[Optional[str], Optional[str]]:
        """Libellés taille/couleur affichés sur la ligne et le reçu."""
        if variant is None or self.reference_repo is None:
            return None, None
        size_label = color_label = None
        if variant.size_id:
            sizes = await self.reference_repo.list_sizes()
            size_label = next((s.code for s in sizes if s.id == variant.size_id), None)
        if variant.color_id:
            colors = await self.reference_repo.list_colors()
            color_label = next((c.name for c in colors if c.id == variant.color_id), None)
        return size_label, color_label

    def add_resolved(
        self,
        cart: Cart,
        article: Article,
        variant: Optional[Variant] = None,
        quantity: int = 1,
        size_label: Optional[str] = None,
        color_label: Optional[str] = None,
    ) -> CartLine:
        """Ajoute un article déjà chargé : validation, contrôle de stock sur la quantité fusionnée, ajout."""
        cart.validate_addition(article, variant, quantity)
        self.stock_service.ensure_stock(article, variant, cart.quantity_after_add(article, variant, quantity))
        return cart.add(article, variant, quantity, size_label=size_label, color_label=color_label)

    async def add_to_cart(
        self,
        cart: Cart,
        article_id: str,
        variant_id: Optional[str] = None,
        quantity: int = 1,
    ) -> CartLine:
        logger.debug(f"[CartService] Ajout panier {cart.id}: article {article_id}, variante {variant_id}, qté {quantity}")
        try:
            article, variant = await self._resolve(article_id, variant_id)
            size_label, color_label = await self._labels(variant)
            line = self.add_resolved(cart, article, variant, quantity, size_label, color_label)
        except AtelierDomainException as e:
            logger.warning(f"[CartService] Ajout refusé panier {cart.id}: {e}")
            raise
        logger.info(f"[CartService] Panier {cart.id}: {line.article_name} qté {line.quantity}.")
        return line

    async def scan(self, cart: Cart, code: str, quantity: int = 1) -> CartLine:
        """Lit un code-barres et ajoute l'article correspondant au panier."""
        match = await self.catalog_service.find_variant_by_barcode(code)
        size_label, color_label = await self._labels(match.variant)
        try:
            return self.add_resolved(cart, match.article, match.variant, quantity, size_label, color_label)
        except AtelierDomainException as e:
            logger.warning(f"[CartService] Scan refusé panier {cart.id} (code {code}): {e}")
            raise

    async def update_quantity(self, cart: Cart, line_id: str, quantity: int) -> Optional[CartLine]:
        """Modifie la quantité d'une ligne ; zéro ou moins retire la ligne."""
        line = cart.get_line(line_id)
        if isinstance(quantity, int) and not isinstance(quantity, bool) and quantity > line.quantity:
            article, variant = await self._resolve(line.article_id, line.variant_id)
            self.stock_service.ensure_stock(article, variant, quantity)
        updated = cart.update_quantity(line_id, quantity)
        if updated is None:
            logger.info(f"[CartService] Ligne {line_id} retirée du panier {cart.id}.")
        return updated

    def remove_line(self, cart: Cart, line_id: str) -> CartLine:
        line = cart.remove_line(line_id)
        logger.info(f"[CartService] Ligne {line_id} ({line.article_name}) supprimée du panier {cart.id}.")
        return line

    async def select_customer(self, cart: Cart, customer_id: str) -> None:
        if self.reference_repo is not None and not await self.reference_repo.get_customer(customer_id):
            raise CustomerNotFoundException(customer_id)
        cart.select_customer(customer_id)

    def clear_customer(self, cart: Cart) -> None:
        cart.select_customer(None)

    def compute_totals(self, cart: Cart, discount_policy: Optional[DiscountPolicy] = None) -> Totals:
        return compute_totals(cart, discount_policy or self.discount_policy, self.settings.CURRENCY_QUANTUM)
