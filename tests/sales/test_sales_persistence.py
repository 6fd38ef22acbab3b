"""
Tests du journal des ventes SQL et d'un encaissement complet sur SQLite.
"""
import pytest
from datetime import datetime
from decimal import Decimal

from atelier.catalog.infrastructure.persistence import SQLAlchemyCatalogRepository
from atelier.cart.application.services import CartService
from atelier.cart.domain.entities import Cart
from atelier.catalog.infrastructure.persistence import SQLAlchemyReferenceDataRepository
from atelier.sales.application.services import CheckoutService
from atelier.cart.domain.pricing import PercentageDiscount
from atelier.sales.domain.entities import CustomerInfo, PaymentMethod, Sale, SaleChannel, SaleLine
from atelier.sales.domain.exceptions import InvoiceNumberConflictException
from atelier.sales.infrastructure.persistence import SQLAlchemySaleRepository

pytestmark = pytest.mark.asyncio

CREATED_AT = datetime(2026, 3, 14, 10, 30)


def _sale(number: str, created_at: datetime = CREATED_AT, customer=None) -> Sale:
    lines = (
        SaleLine(article_id="art1", variant_id="d1", article_name="Kaftan Traditionnel Homme", sku="KAF-M-RED-001",
                 size="M", color="Rouge", quantity=2, unit_price=Decimal("35000")),
        SaleLine(article_id="art7", article_name="Sac à Main Signature", quantity=1, unit_price=Decimal("32000")),
    )
    return Sale(
        invoice_number=number, lines=lines, subtotal=Decimal("102000"), total=Decimal("102000"),
        payment_method=PaymentMethod.CARTE, created_at=created_at, customer=customer,
        channel=SaleChannel.BOUTIQUE if customer else SaleChannel.POS,
    )


async def test_save_and_reload_sale(db_session):
    repo = SQLAlchemySaleRepository(db_session)
    customer = CustomerInfo(last_name="Koné", email="awa@email.com", phone="0102030405", city="Abidjan")
    await repo.save(_sale("CMD260314001", customer=customer))

    loaded = await repo.get_by_invoice_number("CMD260314001")
    assert loaded is not None
    assert loaded.channel == SaleChannel.BOUTIQUE
    assert loaded.customer == customer
    assert [line.article_id for line in loaded.lines] == ["art1", "art7"]
    assert loaded.lines[0].line_total == Decimal("70000")
    assert loaded.total == Decimal("102000")

async def test_missing_sale_returns_none(db_session):
    assert await SQLAlchemySaleRepository(db_session).get_by_invoice_number("FAC-2026-001") is None

async def test_next_invoice_sequence_and_listing(db_session):
    repo = SQLAlchemySaleRepository(db_session)
    assert await repo.next_invoice_sequence("FAC-2026-") == 1
    await repo.save(_sale("FAC-2026-001", datetime(2026, 3, 14, 9, 0)))
    await repo.save(_sale("FAC-2026-002", datetime(2026, 3, 14, 11, 0)))
    assert await repo.next_invoice_sequence("FAC-2026-") == 3
    assert await repo.next_invoice_sequence("CMD") == 1

    sales, total = await repo.list_sales(limit=10, offset=0)
    assert total == 2
    assert [s.invoice_number for s in sales] == ["FAC-2026-002", "FAC-2026-001"]

async def test_duplicate_invoice_number_is_rejected(db_session):
    repo = SQLAlchemySaleRepository(db_session)
    await repo.save(_sale("FAC-2026-001"))
    with pytest.raises(InvoiceNumberConflictException):
        await repo.save(_sale("FAC-2026-001"))
    assert await repo.next_invoice_sequence("FAC-2026-") == 2

async def test_checkout_on_sql_storage(seeded_db_session, test_settings):
    catalog_repo = SQLAlchemyCatalogRepository(seeded_db_session)
    sale_repo = SQLAlchemySaleRepository(seeded_db_session)
    cart_service = CartService(catalog_repo, SQLAlchemyReferenceDataRepository(seeded_db_session))
    checkout_service = CheckoutService(catalog_repo, sale_repo, settings=test_settings, clock=lambda: CREATED_AT)

    cart = Cart()
    await cart_service.add_to_cart(cart, "art1", "d1", 3)
    sale = await checkout_service.checkout(cart, PaymentMethod.ESPECES)

    assert sale.invoice_number == "FAC-2026-001"
    assert sale.total == Decimal("105000")
    assert cart.is_empty
    assert (await catalog_repo.get_article("art1")).get_variant("d1").stock == 5
    assert (await sale_repo.get_by_invoice_number("FAC-2026-001")).lines[0].size == "M"

def _sql_services(session, test_settings):
    catalog_repo = SQLAlchemyCatalogRepository(session)
    sale_repo = SQLAlchemySaleRepository(session)
    cart_service = CartService(catalog_repo, SQLAlchemyReferenceDataRepository(session))
    checkout_service = CheckoutService(catalog_repo, sale_repo, settings=test_settings, clock=lambda: CREATED_AT)
    return catalog_repo, sale_repo, cart_service, checkout_service

async def test_rounded_discount_is_stored_as_computed(seeded_db_session, test_settings):
    _, sale_repo, cart_service, checkout_service = _sql_services(seeded_db_session, test_settings)
    cart = Cart()
    await cart_service.add_to_cart(cart, "art1", "d1", 3)
    sale = await checkout_service.checkout(cart, PaymentMethod.ESPECES, discount_policy=PercentageDiscount(Decimal("0.0333")))

    seeded_db_session.expunge_all()
    stored = await sale_repo.get_by_invoice_number(sale.invoice_number)

    assert stored.discount == sale.discount == Decimal("35")
    assert stored.total == sale.total == Decimal("104965")
    assert stored.subtotal - stored.discount == stored.total

async def test_invoice_number_conflict_restores_stock(seeded_db_session, test_settings, mocker):
    catalog_repo, sale_repo, cart_service, checkout_service = _sql_services(seeded_db_session, test_settings)
    first = Cart()
    await cart_service.add_to_cart(first, "art7")
    await checkout_service.checkout(first, PaymentMethod.CARTE)

    second = Cart()
    await cart_service.add_to_cart(second, "art1", "d1", 2)
    mocker.patch.object(sale_repo, "next_invoice_sequence", return_value=1)
    with pytest.raises(InvoiceNumberConflictException):
        await checkout_service.checkout(second, PaymentMethod.ESPECES)

    assert second.item_count == 2
    assert (await catalog_repo.get_article("art1")).get_variant("d1").stock == 8
    _, total = await sale_repo.list_sales()
    assert total == 1
