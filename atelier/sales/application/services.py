import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, List, Optional, Tuple, Union

from atelier.config import Settings, settings as default_settings
from atelier.catalog.domain.entities import StockRequest
from atelier.catalog.domain.exceptions import ArticleNotFoundException, VariantNotFoundException
from atelier.catalog.domain.repositories import AbstractCatalogRepository, AbstractReferenceDataRepository
from atelier.cart.domain.entities import Cart
from atelier.cart.domain.pricing import DiscountPolicy, NoDiscount, compute_totals
from atelier.stock.service import StockService

from atelier.sales.domain.checkout import CheckoutAttempt, CheckoutState
from atelier.sales.domain.entities import (
    REQUIRED_CUSTOMER_FIELDS, CustomerInfo, PaymentMethod, Sale, SaleChannel, SaleLine, SaleStatus
)
from atelier.sales.domain.exceptions import (
    EmptyCartException, InvalidPaymentMethodException, InvoiceNumberConflictException, MissingCustomerInfoException,
    SaleNotFoundException,
)
from atelier.sales.domain.repositories import AbstractSaleRepository

from .invoice import format_invoice_number, invoice_prefix
from .receipts import render_text_receipt
from .schemas import SalesStatistics

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CheckoutService:
    """Transforme un panier en vente validée.

    Ordre des contrôles : panier non vide, coordonnées client (boutique), puis
    re-vérification du stock de chaque ligne. En cas de succès le stock est décrémenté
    (toutes les lignes ou aucune), la vente enregistrée, puis le panier vidé.
    """

    def __init__(
        self,
        catalog_repo: AbstractCatalogRepository,
        sale_repo: AbstractSaleRepository,
        stock_service: Optional[StockService] = None,
        discount_policy: Optional[DiscountPolicy] = None,
        settings: Optional[Settings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.catalog_repo = catalog_repo
        self.sale_repo = sale_repo
        self.stock_service = stock_service or StockService()
        self.discount_policy = discount_policy or NoDiscount()
        self.settings = settings or default_settings
        self.clock = clock or _utcnow

    @staticmethod
    def _coerce_payment_method(payment_method: Union[PaymentMethod, str]) -> PaymentMethod:
        try:
            return PaymentMethod(payment_method)
        except ValueError:
            raise InvalidPaymentMethodException(payment_method)

    def _check_customer(self, channel: SaleChannel, customer: Optional[CustomerInfo]) -> None:
        if channel != SaleChannel.BOUTIQUE:
            return
        missing = list(REQUIRED_CUSTOMER_FIELDS) if customer is None else customer.missing_required_fields()
        if missing:
            raise MissingCustomerInfoException(missing)

    async def _recheck_stock(self, cart: Cart) -> None:
        """Relit le catalogue et vérifie chaque ligne : le stock a pu bouger depuis l'ajout."""
        for line in cart.lines:
            article = await self.catalog_repo.get_article(line.article_id)
            if article is None:
                raise ArticleNotFoundException(line.article_id)
            variant = None
            if line.variant_id is not None:
                variant = article.get_variant(line.variant_id)
                if variant is None:
                    raise VariantNotFoundException(line.variant_id, article_id=article.id)
            self.stock_service.ensure_stock(article, variant, line.quantity)

    async def _next_invoice_number(self, channel: SaleChannel, now: datetime) -> str:
        prefix = invoice_prefix(channel, now, self.settings)
        sequence = await self.sale_repo.next_invoice_sequence(prefix)
        return format_invoice_number(prefix, sequence, self.settings.INVOICE_SEQUENCE_WIDTH)

    async def _restore_stock(self, requests: List[StockRequest], invoice_number: str, decremented: bool) -> None:
        """Compense le décrément de stock quand la vente n'a pas pu être enregistrée."""
        if not decremented:
            return
        try:
            await self.catalog_repo.increment_stock(requests)
            logger.info(f"[CheckoutService] Stock rétabli après échec de la vente {invoice_number}.")
        except Exception as comp_err:
            logger.critical(
                f"[CheckoutService] Impossible de rétablir le stock pour {invoice_number}: {comp_err}",
                exc_info=True,
            )

    async def _finalize(
        self,
        cart: Cart,
        payment_method: PaymentMethod,
        customer: Optional[CustomerInfo],
        channel: SaleChannel,
        discount_policy: DiscountPolicy,
    ) -> Sale:
        if cart.is_empty:
            raise EmptyCartException()
        self._check_customer(channel, customer)
        await self._recheck_stock(cart)

        totals = compute_totals(cart, discount_policy, self.settings.CURRENCY_QUANTUM)
        now = self.clock()
        sale = Sale(
            invoice_number=await self._next_invoice_number(channel, now),
            channel=channel,
            # Copie profonde : la vente ne partage rien avec le panier
            lines=tuple(SaleLine(**line.model_dump(exclude={"id", "line_total"})) for line in cart.lines),
            subtotal=totals.subtotal,
            discount=totals.discount,
            total=totals.total,
            payment_method=payment_method,
            created_at=now,
            customer_id=cart.customer_id,
            customer=customer,
            seller_name=self.settings.SELLER_NAME if channel == SaleChannel.POS else None,
            status=SaleStatus.VALIDEE,
        )

        requests = [
            StockRequest(article_id=line.article_id, variant_id=line.variant_id, quantity=line.quantity)
            for line in sale.lines
        ]
        decremented = False
        if self.settings.DECREMENT_STOCK_ON_SALE:
            await self.catalog_repo.decrement_stock(requests)
            decremented = True

        try:
            saved = await self.sale_repo.save(sale)
        except InvoiceNumberConflictException:
            logger.warning(f"[CheckoutService] Numéro {sale.invoice_number} pris entre-temps par un autre encaissement.")
            await self._restore_stock(requests, sale.invoice_number, decremented)
            raise
        except Exception as save_err:
            logger.error(f"[CheckoutService] Échec enregistrement vente {sale.invoice_number}: {save_err}", exc_info=True)
            await self._restore_stock(requests, sale.invoice_number, decremented)
            raise

        cart.clear()
        return saved

    async def checkout(
        self,
        cart: Cart,
        payment_method: Union[PaymentMethod, str],
        customer: Optional[CustomerInfo] = None,
        channel: SaleChannel = SaleChannel.POS,
        attempt: Optional[CheckoutAttempt] = None,
        discount_policy: Optional[DiscountPolicy] = None,
    ) -> Sale:
        """Encaisse le panier. En cas d'échec, le panier est inchangé et la tentative revient au choix du paiement."""
        attempt = attempt or CheckoutAttempt()
        if attempt.state == CheckoutState.IDLE:
            attempt.begin()
        method = self._coerce_payment_method(payment_method)
        channel = SaleChannel(channel)
        attempt.choose_payment_method(method)
        logger.info(f"[CheckoutService] Encaissement panier {cart.id} ({channel.value}, {method.value}), {len(cart.lines)} ligne(s).")

        try:
            sale = await self._finalize(cart, method, customer, channel, discount_policy or self.discount_policy)
        except Exception as e:
            attempt.fail(e)
            logger.warning(f"[CheckoutService] Encaissement refusé panier {cart.id}: {e}")
            raise

        attempt.complete(sale)
        logger.info(f"[CheckoutService] Vente {sale.invoice_number} validée: total {sale.total}.")
        return sale


class SalesService:
    """Consultation des ventes, reçus et statistiques."""

    def __init__(
        self,
        sale_repo: AbstractSaleRepository,
        reference_repo: Optional[AbstractReferenceDataRepository] = None,
        settings: Optional[Settings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.sale_repo = sale_repo
        self.reference_repo = reference_repo
        self.settings = settings or default_settings
        self.clock = clock or _utcnow

    async def list_sales(self, limit: Optional[int] = 100, offset: int = 0) -> Tuple[List[Sale], int]:
        return await self.sale_repo.list_sales(limit=limit, offset=offset)

    async def get_sale(self, invoice_number: str) -> Sale:
        sale = await self.sale_repo.get_by_invoice_number(invoice_number)
        if sale is None:
            logger.warning(f"[SalesService] Vente {invoice_number} non trouvée.")
            raise SaleNotFoundException(invoice_number)
        return sale

    async def customer_name_for(self, sale: Sale) -> Optional[str]:
        if sale.customer_id is None or self.reference_repo is None:
            return None
        customer = await self.reference_repo.get_customer(sale.customer_id)
        return customer.full_name if customer else None

    async def render_receipt(self, invoice_number: str) -> str:
        sale = await self.get_sale(invoice_number)
        return render_text_receipt(sale, customer_name=await self.customer_name_for(sale), settings=self.settings)

    async def get_statistics(self) -> SalesStatistics:
        """Chiffre d'affaires et panier moyen des ventes validées."""
        sales, total_count = await self.sale_repo.list_sales(limit=None, offset=0)
        validated = [s for s in sales if s.status == SaleStatus.VALIDEE]
        revenue = sum((s.total for s in validated), Decimal("0"))
        count = len(validated)
        today = self.clock().date()
        return SalesStatistics(
            revenue=revenue,
            sale_count=count,
            average_basket=revenue / count if count else Decimal("0"),
            sales_today=sum(1 for s in validated if s.created_at.date() == today),
        )
