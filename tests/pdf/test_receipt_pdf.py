"""
Tests du générateur de reçus PDF (ReportLab) et du service associé.
"""
import pytest
from datetime import datetime, timezone
from decimal import Decimal

from atelier.pdf.application.services import ReceiptPDFService
from atelier.pdf.domain.exceptions import ReceiptGenerationException
from atelier.pdf.infrastructure.reportlab_generator import ReportLabReceiptGenerator
from atelier.sales.domain.entities import CustomerInfo, PaymentMethod, Sale, SaleChannel, SaleLine

pytestmark = pytest.mark.asyncio


@pytest.fixture
def sale() -> Sale:
    lines = (
        SaleLine(article_id="art1", variant_id="d1", article_name="Kaftan Traditionnel Homme", sku="KAF-M-RED-001",
                 size="M", color="Rouge", quantity=3, unit_price=Decimal("35000")),
        SaleLine(article_id="art8", article_name="Boucles d'oreilles <Plume> & Or", quantity=1, unit_price=Decimal("12000")),
    )
    return Sale(
        invoice_number="FAC-2026-001", lines=lines, subtotal=Decimal("117000"), discount=Decimal("7000"),
        total=Decimal("110000"), payment_method=PaymentMethod.ESPECES,
        created_at=datetime(2026, 3, 14, 10, 30, tzinfo=timezone.utc), seller_name="Vendeur CISS",
    )


async def test_generate_receipt_pdf_returns_pdf_bytes(sale, test_settings):
    pdf_bytes = await ReportLabReceiptGenerator(settings=test_settings).generate_receipt_pdf(sale, customer_name="Jean Kouassi")
    assert pdf_bytes.startswith(b"%PDF")
    assert len(pdf_bytes) > 500

async def test_generate_boutique_order_and_save_to_file(sale, test_settings, tmp_path):
    order = sale.model_copy(update={
        "channel": SaleChannel.BOUTIQUE,
        "invoice_number": "CMD260314001",
        "customer": CustomerInfo(last_name="Koné", first_name="Awa", email="awa@email.com", phone="0102030405"),
    })
    output = tmp_path / "recus" / "CMD260314001.pdf"
    pdf_bytes = await ReportLabReceiptGenerator(settings=test_settings).generate_receipt_pdf(order, output_path=str(output))
    assert output.read_bytes() == pdf_bytes

async def test_service_wraps_unexpected_errors(sale, mocker):
    generator = mocker.AsyncMock()
    generator.generate_receipt_pdf.side_effect = RuntimeError("police introuvable")
    service = ReceiptPDFService(pdf_generator=generator)
    with pytest.raises(ReceiptGenerationException) as exc_info:
        await service.generate_receipt_pdf(sale)
    assert "police introuvable" in str(exc_info.value)

async def test_service_propagates_generation_errors(sale, mocker):
    generator = mocker.AsyncMock()
    generator.generate_receipt_pdf.side_effect = ReceiptGenerationException("build KO")
    service = ReceiptPDFService(pdf_generator=generator)
    with pytest.raises(ReceiptGenerationException, match="build KO"):
        await service.generate_receipt_pdf(sale)
