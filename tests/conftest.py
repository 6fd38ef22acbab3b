# Standard Library
from datetime import datetime, timezone
from typing import AsyncGenerator, Optional

# Third-Party Libraries
import pytest
import pytest_asyncio

from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, AsyncEngine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

# First-Party Libraries (Your project)
from atelier.main import app
from atelier.config import Settings
from atelier.core.database import get_optional_db_session
from atelier.catalog.application.services import CatalogService
from atelier.catalog.infrastructure import orm_models as _catalog_models  # noqa: F401
from atelier.catalog.infrastructure.memory import InMemoryCatalogRepository, InMemoryReferenceDataRepository
from atelier.catalog.infrastructure.persistence import seed_catalog
from atelier.catalog.infrastructure.seed import default_articles, default_colors, default_customers, default_sizes
from atelier.catalog.interfaces.dependencies import get_catalog_repository, get_reference_repository
from atelier.cart.application.services import CartService
from atelier.cart.domain.entities import Cart
from atelier.cart.infrastructure.store import InMemoryCartStore
from atelier.cart.interfaces.dependencies import get_cart_store
from atelier.pdf.domain.exceptions import ReceiptGenerationException
from atelier.pdf.domain.generator import AbstractReceiptPDFGenerator
from atelier.pdf.interfaces.dependencies import get_receipt_pdf_generator
from atelier.sales.application.services import CheckoutService, SalesService
from atelier.sales.domain.entities import Sale
from atelier.sales.infrastructure import orm_models as _sales_models  # noqa: F401
from atelier.sales.infrastructure.memory import InMemorySaleRepository
from atelier.sales.interfaces.dependencies import get_sale_repository
from atelier.stock.service import StockService

# URL de base pour la DB en mémoire
TEST_DATABASE_BASE_URL = "sqlite+aiosqlite:///:memory:"

FIXED_NOW = datetime(2026, 3, 14, 10, 30, tzinfo=timezone.utc)

# --- Fixtures de Base ---

@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        STORE_NAME="WOOMAAN",
        STORE_TAGLINE="BY YOLANDA DIVA",
        CURRENCY="FCFA",
        SELLER_NAME="Vendeur CISS",
        POS_INVOICE_PREFIX="FAC",
        BOUTIQUE_ORDER_PREFIX="CMD",
        INVOICE_SEQUENCE_WIDTH=3,
        DECREMENT_STOCK_ON_SALE=True,
    )

@pytest.fixture
def catalog_repo() -> InMemoryCatalogRepository:
    return InMemoryCatalogRepository.seeded()

@pytest.fixture
def reference_repo() -> InMemoryReferenceDataRepository:
    return InMemoryReferenceDataRepository.seeded()

@pytest.fixture
def sale_repo() -> InMemorySaleRepository:
    return InMemorySaleRepository()

@pytest.fixture
def stock_service() -> StockService:
    return StockService()

@pytest.fixture
def catalog_service(catalog_repo, reference_repo) -> CatalogService:
    return CatalogService(catalog_repo=catalog_repo, reference_repo=reference_repo)

@pytest.fixture
def cart_service(catalog_repo, reference_repo, stock_service) -> CartService:
    return CartService(catalog_repo=catalog_repo, reference_repo=reference_repo, stock_service=stock_service)

@pytest.fixture
def checkout_service(catalog_repo, sale_repo, stock_service, test_settings) -> CheckoutService:
    return CheckoutService(
        catalog_repo=catalog_repo,
        sale_repo=sale_repo,
        stock_service=stock_service,
        settings=test_settings,
        clock=lambda: FIXED_NOW,
    )

@pytest.fixture
def sales_service(sale_repo, reference_repo, test_settings) -> SalesService:
    return SalesService(sale_repo=sale_repo, reference_repo=reference_repo, settings=test_settings, clock=lambda: FIXED_NOW)

@pytest.fixture
def cart() -> Cart:
    return Cart()

# --- Fixtures SQL ---

@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Crée un engine, des tables, et fournit une session DB en mémoire pour chaque test."""
    engine: AsyncEngine = create_async_engine(TEST_DATABASE_BASE_URL, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with TestingSessionLocal() as session:
        yield session

    await engine.dispose()

@pytest_asyncio.fixture(scope="function")
async def seeded_db_session(db_session: AsyncSession) -> AsyncSession:
    """Session sur une base contenant le catalogue de démonstration."""
    await seed_catalog(db_session, default_articles(), default_sizes(), default_colors(), default_customers())
    return db_session

# --- Fixtures API ---

@pytest_asyncio.fixture(scope="function")
async def test_client(catalog_repo, reference_repo, sale_repo) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient httpx sur des repositories en mémoire isolés pour chaque test."""
    app.dependency_overrides[get_catalog_repository] = lambda: catalog_repo
    app.dependency_overrides[get_reference_repository] = lambda: reference_repo
    app.dependency_overrides[get_sale_repository] = lambda: sale_repo
    cart_store = InMemoryCartStore()
    app.dependency_overrides[get_cart_store] = lambda: cart_store

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()

@pytest_asyncio.fixture(scope="function")
async def sql_test_client(seeded_db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient httpx qui utilise la session DB de test pour tous les repositories."""
    async def override_get_optional_db_session() -> AsyncGenerator[Optional[AsyncSession], None]:
        yield seeded_db_session

    app.dependency_overrides[get_optional_db_session] = override_get_optional_db_session
    cart_store = InMemoryCartStore()
    app.dependency_overrides[get_cart_store] = lambda: cart_store

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()

# --- Fixtures PDF ---

class MockReceiptPDFGenerator(AbstractReceiptPDFGenerator):
    """Un générateur PDF simulé pour les tests."""

    async def generate_receipt_pdf(
        self,
        sale: Sale,
        customer_name: Optional[str] = None,
        output_path: Optional[str] = None
    ) -> bytes:
        if sale.total == 0:
            raise ReceiptGenerationException("Mock receipt generation failed intentionally.")
        return f"%PDF-mock {sale.invoice_number}".encode("utf-8")

@pytest_asyncio.fixture(scope="function")
async def test_client_with_mock_pdf(test_client: AsyncClient) -> AsyncGenerator[AsyncClient, None]:
    """Comme test_client, avec un générateur PDF mocké."""
    app.dependency_overrides[get_receipt_pdf_generator] = lambda: MockReceiptPDFGenerator()
    yield test_client
