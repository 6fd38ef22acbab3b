import logging
from typing import Optional, List, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from atelier.sales.domain.entities import Sale
from atelier.sales.domain.exceptions import InvoiceNumberConflictException
from atelier.sales.domain.repositories import AbstractSaleRepository

from .orm_models import SaleDB, SaleLineDB

logger = logging.getLogger(__name__)


class SQLAlchemySaleRepository(AbstractSaleRepository):
    """Implémentation SQLAlchemy du journal des ventes."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def save(self, sale: Sale) -> Sale:
        sale_db = SaleDB(
            invoice_number=sale.invoice_number,
            channel=sale.channel.value,
            subtotal=sale.subtotal,
            discount=sale.discount,
            total=sale.total,
            payment_method=sale.payment_method.value,
            created_at=sale.created_at,
            customer_id=sale.customer_id,
            customer=sale.customer.model_dump() if sale.customer else None,
            seller_name=sale.seller_name,
            status=sale.status.value,
        )
        sale_db.lines = [
            SaleLineDB(**line.model_dump(exclude={"line_total"}), position=position)
            for position, line in enumerate(sale.lines)
        ]
        try:
            self.session.add(sale_db)
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            if await self._invoice_number_exists(sale.invoice_number):
                logger.warning(f"Numéro de facture {sale.invoice_number} déjà enregistré par une autre vente.")
                raise InvoiceNumberConflictException(sale.invoice_number) from e
            logger.error(f"Contrainte DB violée pour la vente {sale.invoice_number}: {e}", exc_info=True)
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Erreur DB lors de l'enregistrement de la vente {sale.invoice_number}: {e}", exc_info=True)
            raise
        logger.info(f"Vente {sale.invoice_number} enregistrée (ID DB {sale_db.id}).")
        return sale

    async def _invoice_number_exists(self, invoice_number: str) -> bool:
        stmt = select(func.count()).select_from(SaleDB).where(SaleDB.invoice_number == invoice_number)
        return (await self.session.execute(stmt)).scalar_one() > 0

    async def next_invoice_sequence(self, prefix: str) -> int:
        stmt = select(func.count()).select_from(SaleDB).where(SaleDB.invoice_number.startswith(prefix, autoescape=True))
        count = (await self.session.execute(stmt)).scalar_one()
        return count + 1

    async def get_by_invoice_number(self, invoice_number: str) -> Optional[Sale]:
        stmt = (
            select(SaleDB)
            .where(SaleDB.invoice_number == invoice_number)
            .options(selectinload(SaleDB.lines))
        )
        sale_db = (await self.session.execute(stmt)).scalar_one_or_none()
        if not sale_db:
            logger.debug(f"Vente {invoice_number} non trouvée dans get_by_invoice_number().")
            return None
        return Sale.model_validate(sale_db)

    async def list_sales(self, limit: Optional[int] = 100, offset: int = 0) -> Tuple[List[Sale], int]:
        total_count = (await self.session.execute(select(func.count()).select_from(SaleDB))).scalar_one()
        stmt = (
            select(SaleDB)
            .options(selectinload(SaleDB.lines))
            .order_by(SaleDB.created_at.desc(), SaleDB.id.desc())
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return [Sale.model_validate(s) for s in result.scalars().all()], total_count
