from abc import ABC, abstractmethod
from typing import Optional

from atelier.sales.domain.entities import Sale

class AbstractReceiptPDFGenerator(ABC):
    """Interface abstraite pour un générateur de reçus PDF.
    L'implémentation gère entièrement la mise en page.
    """

    @abstractmethod
    async def generate_receipt_pdf(
        self,
        sale: Sale,
        customer_name: Optional[str] = None, # Nom du client caisse, si un client est associé
        output_path: Optional[str] = None # Chemin où sauvegarder le PDF (optionnel)
    ) -> bytes:
        """Génère le PDF du reçu (ou du bon de commande) d'une vente.

        Args:
            sale: Vente validée à imprimer.
            customer_name: Nom affiché pour une vente caisse associée à un client.
            output_path: Si fourni, sauvegarde aussi le PDF à ce chemin.

        Returns:
            Le contenu binaire du PDF généré.

        Raises:
            ReceiptGenerationException: Si une erreur survient durant la génération.
        """
        raise NotImplementedError
