import logging
from typing import Dict, List, Optional, Tuple

from atelier.sales.domain.entities import Sale
from atelier.sales.domain.exceptions import InvoiceNumberConflictException
from atelier.sales.domain.repositories import AbstractSaleRepository

logger = logging.getLogger(__name__)


class InMemorySaleRepository(AbstractSaleRepository):
    """Journal des ventes en mémoire. Les ventes sont immuables, elles sont stockées telles quelles."""

    def __init__(self):
        self._sales: Dict[str, Sale] = {}

    async def save(self, sale: Sale) -> Sale:
        if sale.invoice_number in self._sales:
            raise InvoiceNumberConflictException(sale.invoice_number)
        self._sales[sale.invoice_number] = sale
        logger.info(f"Vente {sale.invoice_number} enregistrée (total {sale.total}).")
        return sale

    async def next_invoice_sequence(self, prefix: str) -> int:
        return sum(1 for number in self._sales if number.startswith(prefix)) + 1

    async def get_by_invoice_number(self, invoice_number: str) -> Optional[Sale]:
        return self._sales.get(invoice_number)

    async def list_sales(self, limit: Optional[int] = 100, offset: int = 0) -> Tuple[List[Sale], int]:
        ordered = sorted(self._sales.values(), key=lambda s: s.created_at, reverse=True)
        end = None if limit is None else offset + limit
        return ordered[offset:end], len(ordered)
