"""
Tests du repository SQL du catalogue (SQLite en mémoire).
"""
import pytest

from atelier.catalog.domain.entities import StockRequest
from atelier.catalog.domain.exceptions import VariantNotFoundException
from atelier.catalog.infrastructure.persistence import (
    SQLAlchemyCatalogRepository, SQLAlchemyReferenceDataRepository, seed_catalog
)
from atelier.catalog.infrastructure.seed import default_articles, default_colors, default_customers, default_sizes
from atelier.core.exceptions import StockUnavailableException

pytestmark = pytest.mark.asyncio


async def test_seed_is_idempotent(db_session):
    assert await seed_catalog(db_session, default_articles(), default_sizes(), default_colors(), default_customers())
    assert not await seed_catalog(db_session, default_articles(), default_sizes(), default_colors(), default_customers())

async def test_list_articles_keeps_catalogue_order(seeded_db_session):
    repo = SQLAlchemyCatalogRepository(seeded_db_session)
    articles = await repo.list_articles()
    assert [a.id for a in articles] == [f"art{i}" for i in range(1, 9)]
    assert [v.id for v in articles[0].variants] == ["d1", "d2"]
    assert articles[6].stock == 5
    assert not articles[6].has_variants

async def test_get_article_missing_returns_none(seeded_db_session):
    repo = SQLAlchemyCatalogRepository(seeded_db_session)
    assert await repo.get_article("inconnu") is None

async def test_decrement_stock_updates_variant_and_flat_stock(seeded_db_session):
    repo = SQLAlchemyCatalogRepository(seeded_db_session)
    await repo.decrement_stock([
        StockRequest(article_id="art1", variant_id="d1", quantity=3),
        StockRequest(article_id="art7", quantity=2),
    ])
    kaftan = await repo.get_article("art1")
    sac = await repo.get_article("art7")
    assert kaftan.get_variant("d1").stock == 5
    assert sac.stock == 3

async def test_decrement_stock_is_all_or_nothing(seeded_db_session):
    repo = SQLAlchemyCatalogRepository(seeded_db_session)
    with pytest.raises(StockUnavailableException) as exc_info:
        await repo.decrement_stock([
            StockRequest(article_id="art1", variant_id="d1", quantity=2),
            StockRequest(article_id="art1", variant_id="d2", quantity=6),
        ])
    assert exc_info.value.available == 5
    kaftan = await repo.get_article("art1")
    assert kaftan.get_variant("d1").stock == 8
    assert kaftan.get_variant("d2").stock == 5

async def test_decrement_unknown_variant(seeded_db_session):
    repo = SQLAlchemyCatalogRepository(seeded_db_session)
    with pytest.raises(VariantNotFoundException):
        await repo.decrement_stock([StockRequest(article_id="art1", variant_id="d3", quantity=1)])

async def test_increment_stock(seeded_db_session):
    repo = SQLAlchemyCatalogRepository(seeded_db_session)
    await repo.increment_stock([StockRequest(article_id="art1", variant_id="d2", quantity=4)])
    assert (await repo.get_article("art1")).get_variant("d2").stock == 9

async def test_reference_data_repository(seeded_db_session):
    repo = SQLAlchemyReferenceDataRepository(seeded_db_session)
    assert [s.code for s in await repo.list_sizes()][:2] == ["XS", "S"]
    assert len(await repo.list_colors()) == 8
    customer = await repo.get_customer("2")
    assert customer.full_name == "Aminata Traoré"
    assert await repo.get_customer("99") is None
