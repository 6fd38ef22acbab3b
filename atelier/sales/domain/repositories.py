from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from .entities import Sale

class AbstractSaleRepository(ABC):
    """Interface abstraite pour le stockage des ventes."""

    @abstractmethod
    async def save(self, sale: Sale) -> Sale:
        """Enregistre une vente. Une vente enregistrée n'est plus modifiée.

        Raises:
            InvoiceNumberConflictException: Si le numéro de facture est déjà pris.
        """
        raise NotImplementedError

    @abstractmethod
    async def next_invoice_sequence(self, prefix: str) -> int:
        """Nombre de ventes dont le numéro commence par ``prefix``, plus un."""
        raise NotImplementedError

    @abstractmethod
    async def get_by_invoice_number(self, invoice_number: str) -> Optional[Sale]:
        raise NotImplementedError

    @abstractmethod
    async def list_sales(self, limit: Optional[int] = 100, offset: int = 0) -> Tuple[List[Sale], int]:
        """Ventes de la plus récente à la plus ancienne, avec le nombre total."""
        raise NotImplementedError
