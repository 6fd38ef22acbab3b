import logging
import time
from typing import Optional, List

from atelier.catalog.domain.entities import Article, BarcodeMatch, Color, Customer, Size, Variant
from atelier.catalog.domain.exceptions import (
    ArticleNotFoundException, BarcodeNotFoundException, InvalidBarcodeException, ReferenceDataNotFoundException
)
from atelier.catalog.domain.repositories import AbstractCatalogRepository, AbstractReferenceDataRepository

from .schemas import LowStockItem, SkuSuggestion

logger = logging.getLogger(__name__)


def generate_sku(
    article_name: str,
    size_code: Optional[str] = None,
    color_name: Optional[str] = None,
    sequence: Optional[int] = None,
) -> str:
    """Génère un SKU ``ART-TAILLE-COU-NNN``.

    Sans séquence fournie, les trois derniers chiffres de l'horodatage en millisecondes sont utilisés.
    """
    article_code = article_name.strip()[:3].upper()
    size = size_code or "UNI"
    color = color_name.strip()[:3].upper() if color_name else "UNI"
    if sequence is None:
        suffix = str(int(time.time() * 1000))[-3:]
    else:
        suffix = f"{sequence:03d}"
    return f"{article_code}-{size}-{color}-{suffix}"


class CatalogService:
    """Service applicatif de lecture du catalogue (résolution des déclinaisons)."""

    def __init__(
        self,
        catalog_repo: AbstractCatalogRepository,
        reference_repo: Optional[AbstractReferenceDataRepository] = None,
    ):
        self.catalog_repo = catalog_repo
        self.reference_repo = reference_repo

    async def list_articles(self, active_only: bool = False) -> List[Article]:
        articles = await self.catalog_repo.list_articles()
        if active_only:
            articles = [a for a in articles if a.active]
        return articles

    async def get_article(self, article_id: str) -> Article:
        """Récupère un article ou lève ArticleNotFoundException."""
        article = await self.catalog_repo.get_article(article_id)
        if not article:
            logger.warning(f"[CatalogService] Article ID {article_id} non trouvé.")
            raise ArticleNotFoundException(article_id)
        return article

    async def find_variant_by_barcode(self, code: str) -> BarcodeMatch:
        """Trouve l'article (et la déclinaison) portant ce code-barres.

        Le premier article dont le code-barres correspond est renvoyé sans déclinaison ;
        sinon la première déclinaison correspondante est renvoyée avec son article.
        """
        code = (code or "").strip()
        if not code:
            raise InvalidBarcodeException()
        logger.debug(f"[CatalogService] Recherche code-barres: {code}")
        for article in await self.catalog_repo.list_articles():
            if article.barcode == code:
                return BarcodeMatch(article=article)
            variant = next((v for v in article.variants if v.barcode == code), None)
            if variant:
                return BarcodeMatch(article=article, variant=variant)
        logger.info(f"[CatalogService] Code-barres non reconnu: {code}")
        raise BarcodeNotFoundException(code)

    async def list_available_variants(self, article_id: str) -> List[Variant]:
        """Déclinaisons actives avec du stock."""
        article = await self.get_article(article_id)
        return [v for v in article.variants if v.active and v.stock > 0]

    async def search_articles(self, term: str) -> List[Article]:
        """Recherche par nom (insensible à la casse), code-barres ou SKU."""
        term = (term or "").strip()
        articles = await self.catalog_repo.list_articles()
        if not term:
            return articles
        lowered = term.lower()
        return [
            a for a in articles
            if lowered in a.name.lower()
            or (a.barcode and term in a.barcode)
            or any((v.barcode and term in v.barcode) or term in v.sku for v in a.variants)
        ]

    async def list_low_stock(self) -> List[LowStockItem]:
        """Déclinaisons actives dont le stock est au niveau du seuil minimum ou en dessous."""
        items = []
        for article in await self.catalog_repo.list_articles():
            for variant in article.variants:
                if variant.active and variant.stock <= variant.min_stock:
                    items.append(LowStockItem(
                        article_id=article.id,
                        article_name=article.name,
                        variant_id=variant.id,
                        sku=variant.sku,
                        stock=variant.stock,
                        min_stock=variant.min_stock,
                    ))
        return items

    async def suggest_sku(
        self,
        article_id: str,
        size_id: Optional[str] = None,
        color_id: Optional[str] = None,
    ) -> SkuSuggestion:
        """Propose le SKU d'une nouvelle déclinaison ; la séquence suit les SKU déjà pris pour ce préfixe."""
        article = await self.get_article(article_id)
        size_code = color_name = None
        if size_id:
            size = next((s for s in await self.list_sizes() if s.id == size_id), None)
            if size is None:
                raise ReferenceDataNotFoundException("Taille", size_id)
            size_code = size.code
        if color_id:
            color = next((c for c in await self.list_colors() if c.id == color_id), None)
            if color is None:
                raise ReferenceDataNotFoundException("Couleur", color_id)
            color_name = color.name

        taken = {v.sku for other in await self.catalog_repo.list_articles() for v in other.variants}
        sequence = 1
        sku = generate_sku(article.name, size_code, color_name, sequence=sequence)
        while sku in taken:
            sequence += 1
            sku = generate_sku(article.name, size_code, color_name, sequence=sequence)
        logger.debug(f"[CatalogService] SKU proposé pour l'article {article_id}: {sku}")
        return SkuSuggestion(article_id=article_id, size_id=size_id, color_id=color_id, sku=sku)

    # --- Données de référence ---

    def _require_reference_repo(self) -> AbstractReferenceDataRepository:
        if self.reference_repo is None:
            raise RuntimeError("Aucun repository de données de référence configuré.")
        return self.reference_repo

    async def list_sizes(self) -> List[Size]:
        return await self._require_reference_repo().list_sizes()

    async def list_colors(self) -> List[Color]:
        return await self._require_reference_repo().list_colors()

    async def list_customers(self) -> List[Customer]:
        return await self._require_reference_repo().list_customers()
