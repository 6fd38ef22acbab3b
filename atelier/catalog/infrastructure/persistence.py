import logging
from typing import Optional, List

from sqlalchemy import func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from atelier.catalog.domain.entities import Article, Color, Customer, Size, StockRequest
from atelier.catalog.domain.exceptions import ArticleNotFoundException, VariantNotFoundException
from atelier.catalog.domain.repositories import AbstractCatalogRepository, AbstractReferenceDataRepository
from atelier.core.exceptions import StockUnavailableException

from .orm_models import ArticleDB, ColorDB, CustomerDB, SizeDB, VariantDB

logger = logging.getLogger(__name__)


class SQLAlchemyCatalogRepository(AbstractCatalogRepository):
    """Implémentation SQLAlchemy du repository du catalogue."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_articles(self) -> List[Article]:
        stmt = (
            select(ArticleDB)
            .options(selectinload(ArticleDB.variants))
            .order_by(ArticleDB.position, ArticleDB.id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return [Article.model_validate(a_db) for a_db in result.scalars().all()]

    async def get_article(self, article_id: str) -> Optional[Article]:
        stmt = (
            select(ArticleDB)
            .where(ArticleDB.id == article_id)
            .options(selectinload(ArticleDB.variants))
            .execution_options(populate_existing=True) # Toujours relire le stock courant
        )
        result = await self.session.execute(stmt)
        article_db = result.scalar_one_or_none()
        if not article_db:
            logger.debug(f"Article ID {article_id} non trouvé dans get_article().")
            return None
        return Article.model_validate(article_db)

    async def _available(self, request: StockRequest) -> int:
        if request.variant_id is not None:
            stmt = select(VariantDB.stock).where(
                VariantDB.id == request.variant_id, VariantDB.article_id == request.article_id
            )
        else:
            stmt = select(ArticleDB.stock).where(ArticleDB.id == request.article_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() or 0

    async def _apply(self, request: StockRequest, delta: int):
        if request.variant_id is not None:
            stmt = update(VariantDB).where(
                VariantDB.id == request.variant_id, VariantDB.article_id == request.article_id
            )
            column = VariantDB.stock
        else:
            stmt = update(ArticleDB).where(ArticleDB.id == request.article_id)
            column = ArticleDB.stock
        if delta < 0:
            # Mise à jour conditionnelle : rejet si un autre poste a vendu entre-temps
            stmt = stmt.where(column >= -delta)
        stmt = stmt.values({column.key: func.coalesce(column, 0) + delta}).execution_options(synchronize_session=False)
        result = await self.session.execute(stmt)
        return result.rowcount

    async def _ensure_exists(self, request: StockRequest) -> None:
        if request.variant_id is not None:
            variant_db = await self.session.get(VariantDB, request.variant_id)
            if not variant_db or variant_db.article_id != request.article_id:
                raise VariantNotFoundException(request.variant_id, article_id=request.article_id)
        elif not await self.session.get(ArticleDB, request.article_id):
            raise ArticleNotFoundException(request.article_id)

    async def decrement_stock(self, requests: List[StockRequest]) -> None:
        try:
            for request in requests:
                await self._ensure_exists(request)
                updated = await self._apply(request, -request.quantity)
                if updated == 0:
                    available = await self._available(request)
                    raise StockUnavailableException(
                        article_id=request.article_id,
                        variant_id=request.variant_id,
                        requested=request.quantity,
                        available=available,
                    )
            await self.session.commit()
            logger.info(f"Stock décrémenté pour {len(requests)} ligne(s).")
        except Exception:
            await self.session.rollback()
            raise

    async def increment_stock(self, requests: List[StockRequest]) -> None:
        try:
            for request in requests:
                await self._ensure_exists(request)
                await self._apply(request, request.quantity)
            await self.session.commit()
            logger.info(f"Stock réincrémenté pour {len(requests)} ligne(s).")
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Erreur réincrémentation stock: {e}", exc_info=True)
            raise


class SQLAlchemyReferenceDataRepository(AbstractReferenceDataRepository):
    """Implémentation SQLAlchemy des données de référence."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_customers(self) -> List[Customer]:
        result = await self.session.execute(select(CustomerDB).order_by(CustomerDB.last_name))
        return [Customer.model_validate(c) for c in result.scalars().all()]

    async def get_customer(self, customer_id: str) -> Optional[Customer]:
        customer_db = await self.session.get(CustomerDB, customer_id)
        return Customer.model_validate(customer_db) if customer_db else None

    async def list_sizes(self) -> List[Size]:
        result = await self.session.execute(select(SizeDB).order_by(SizeDB.order))
        return [Size.model_validate(s) for s in result.scalars().all()]

    async def list_colors(self) -> List[Color]:
        result = await self.session.execute(select(ColorDB).order_by(ColorDB.id))
        return [Color.model_validate(c) for c in result.scalars().all()]


async def seed_catalog(
    session: AsyncSession,
    articles: List[Article],
    sizes: List[Size],
    colors: List[Color],
    customers: List[Customer],
) -> bool:
    """Remplit une base vide avec les données fournies. Retourne False si des articles existent déjà."""
    count = (await session.execute(select(func.count()).select_from(ArticleDB))).scalar_one()
    if count:
        logger.info(f"Catalogue SQL déjà initialisé ({count} articles).")
        return False

    for position, article in enumerate(articles):
        article_db = ArticleDB(**article.model_dump(exclude={"variants"}), position=position)
        article_db.variants = [
            VariantDB(**variant.model_dump(), position=v_pos)
            for v_pos, variant in enumerate(article.variants)
        ]
        session.add(article_db)
    session.add_all([SizeDB(**s.model_dump()) for s in sizes])
    session.add_all([ColorDB(**c.model_dump()) for c in colors])
    session.add_all([CustomerDB(**c.model_dump()) for c in customers])
    await session.commit()
    logger.info(f"Catalogue SQL initialisé avec {len(articles)} articles.")
    return True
