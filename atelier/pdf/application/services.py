import logging
from typing import Optional

# Domain
from atelier.pdf.domain.generator import AbstractReceiptPDFGenerator
from atelier.pdf.domain.exceptions import ReceiptGenerationException
from atelier.sales.domain.entities import Sale

logger = logging.getLogger(__name__)

class ReceiptPDFService:
    """Service applicatif pour l'impression PDF des reçus."""

    def __init__(self, pdf_generator: AbstractReceiptPDFGenerator):
        self.pdf_generator = pdf_generator

    async def generate_receipt_pdf(
        self,
        sale: Sale,
        customer_name: Optional[str] = None,
        output_path: Optional[str] = None
    ) -> bytes:
        """Génère le PDF du reçu d'une vente.

        Raises:
            ReceiptGenerationException: Si la génération échoue.
        """
        logger.info(f"[ReceiptPDFService] Demande de génération PDF pour la vente {sale.invoice_number}.")
        try:
            return await self.pdf_generator.generate_receipt_pdf(
                sale=sale,
                customer_name=customer_name,
                output_path=output_path
            )
        except ReceiptGenerationException as e:
            logger.error(f"[ReceiptPDFService] Échec génération PDF vente {sale.invoice_number}: {e}")
            raise # Propage l'exception
        except Exception as e:
            logger.error(f"[ReceiptPDFService] Erreur inattendue génération PDF vente {sale.invoice_number}: {e}", exc_info=True)
            raise ReceiptGenerationException(f"Erreur inattendue: {e}", original_exception=e)
