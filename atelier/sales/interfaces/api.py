import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, Response, status
from fastapi.responses import PlainTextResponse

from atelier.config import settings

# Schemas
from atelier.sales.application.schemas import CheckoutRequest, CheckoutResponse, SalesStatistics
from atelier.sales.application.receipts import render_text_receipt
from atelier.sales.domain.entities import Sale
from atelier.cart.domain.exceptions import InvalidDiscountException
from atelier.cart.domain.pricing import DiscountPolicy, FixedAmountDiscount, LineDiscount, PercentageDiscount

# Services & Dependencies
from atelier.cart.interfaces.dependencies import CartStoreDep
from atelier.sales.interfaces.dependencies import CheckoutServiceDep, SalesServiceDep
from atelier.pdf.interfaces.dependencies import ReceiptPDFServiceDep

# Exceptions
from atelier.core.exceptions import ConflictException, NotFoundException, ValidationException
from atelier.pdf.domain.exceptions import ReceiptGenerationException

logger = logging.getLogger(__name__)

checkout_router = APIRouter(
    prefix="/carts",
    tags=["Checkout"],
)

sales_router = APIRouter(
    prefix="/sales",
    tags=["Sales"],
)

def _check_max_percent(percent) -> None:
    if percent > settings.MAX_DISCOUNT_PERCENT:
        raise InvalidDiscountException(
            f"Remise de {percent}% supérieure au maximum autorisé ({settings.MAX_DISCOUNT_PERCENT}%)."
        )

def _discount_policy(request: CheckoutRequest) -> Optional[DiscountPolicy]:
    if request.discount_percent is not None:
        _check_max_percent(request.discount_percent)
        return PercentageDiscount(request.discount_percent)
    if request.line_discounts is not None:
        for percent in request.line_discounts.values():
            _check_max_percent(percent)
        return LineDiscount(request.line_discounts)
    if request.discount_amount is not None:
        return FixedAmountDiscount(request.discount_amount)
    return None

@checkout_router.post("/{cart_id}/checkout", response_model=CheckoutResponse, status_code=status.HTTP_201_CREATED)
async def checkout_endpoint(
    cart_id: str,
    request: CheckoutRequest,
    store: CartStoreDep,
    service: CheckoutServiceDep,
):
    """Encaisse le panier : crée la vente, décrémente le stock et vide le panier."""
    try:
        cart = store.get(cart_id)
        sale = await service.checkout(
            cart,
            request.payment_method,
            customer=request.customer,
            channel=request.channel,
            discount_policy=_discount_policy(request),
        )
        logger.info(f"Vente {sale.invoice_number} créée depuis le panier {cart_id}.")
        return CheckoutResponse(sale=sale, receipt=render_text_receipt(sale))
    except ValidationException as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except NotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ConflictException as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception as e:
        logger.exception(f"Erreur inattendue encaissement panier {cart_id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=settings.GENERIC_ERROR_MSG)

@sales_router.get("/", response_model=List[Sale])
async def list_sales_endpoint(
    response: Response,
    service: SalesServiceDep,
    limit: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    offset: int = Query(default=0, ge=0)
):
    """Liste les ventes, de la plus récente à la plus ancienne."""
    try:
        sales, total_count = await service.list_sales(limit=limit, offset=offset)
        end_range = offset + len(sales) - 1 if sales else offset
        response.headers["Content-Range"] = f"sales {offset}-{end_range}/{total_count}"
        return sales
    except Exception as e:
        logger.exception(f"Erreur listage ventes: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=settings.GENERIC_ERROR_MSG)

@sales_router.get("/statistics", response_model=SalesStatistics)
async def sales_statistics_endpoint(service: SalesServiceDep):
    try:
        return await service.get_statistics()
    except Exception as e:
        logger.exception(f"Erreur statistiques ventes: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=settings.GENERIC_ERROR_MSG)

@sales_router.get("/{invoice_number}", response_model=Sale)
async def get_sale_endpoint(invoice_number: str, service: SalesServiceDep):
    try:
        return await service.get_sale(invoice_number)
    except NotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.exception(f"Erreur récupération vente {invoice_number}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=settings.GENERIC_ERROR_MSG)

@sales_router.get("/{invoice_number}/receipt", response_class=PlainTextResponse)
async def get_text_receipt_endpoint(invoice_number: str, service: SalesServiceDep):
    """Reçu texte, prêt pour l'imprimante ticket."""
    try:
        return PlainTextResponse(await service.render_receipt(invoice_number))
    except NotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.exception(f"Erreur reçu texte vente {invoice_number}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=settings.GENERIC_ERROR_MSG)

@sales_router.get("/{invoice_number}/receipt.pdf")
async def get_pdf_receipt_endpoint(
    invoice_number: str,
    service: SalesServiceDep,
    pdf_service: ReceiptPDFServiceDep,
):
    try:
        sale = await service.get_sale(invoice_number)
        pdf_bytes = await pdf_service.generate_receipt_pdf(sale, customer_name=await service.customer_name_for(sale))
        return Response(
            content=pdf_bytes,
            media_type="application/pdf",
            headers={"Content-Disposition": f'inline; filename="recu-{invoice_number}.pdf"'},
        )
    except NotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ReceiptGenerationException as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    except Exception as e:
        logger.exception(f"Erreur reçu PDF vente {invoice_number}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=settings.GENERIC_ERROR_MSG)
