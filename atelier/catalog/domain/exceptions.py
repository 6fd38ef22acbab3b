"""Exceptions spécifiques au domaine Catalog."""
from typing import Optional

from atelier.core.exceptions import NotFoundException, ValidationException


class ArticleNotFoundException(NotFoundException):
    """Levée lorsqu'un article spécifique n'est pas trouvé."""
    def __init__(self, article_id: str):
        super().__init__(f"Article avec ID {article_id} non trouvé.")
        self.article_id = article_id

class VariantNotFoundException(NotFoundException):
    """Levée lorsqu'une déclinaison n'existe pas (ou n'appartient pas à l'article)."""
    def __init__(self, variant_id: str, article_id: Optional[str] = None):
        if article_id:
            super().__init__(f"Déclinaison {variant_id} non trouvée pour l'article {article_id}.")
        else:
            super().__init__(f"Déclinaison avec ID {variant_id} non trouvée.")
        self.variant_id = variant_id
        self.article_id = article_id

class BarcodeNotFoundException(NotFoundException):
    """Levée lorsqu'aucun article ni déclinaison ne porte ce code-barres."""
    def __init__(self, code: str):
        super().__init__(f"Code-barres '{code}' non reconnu.")
        self.code = code

class CustomerNotFoundException(NotFoundException):
    def __init__(self, customer_id: str):
        super().__init__(f"Client avec ID {customer_id} non trouvé.")
        self.customer_id = customer_id

class InvalidBarcodeException(ValidationException):
    """Levée pour un code-barres vide."""
    def __init__(self):
        super().__init__("Le code-barres ne peut pas être vide.")

class ReferenceDataNotFoundException(NotFoundException):
    """Levée pour une taille ou une couleur inconnue."""
    def __init__(self, kind: str, reference_id: str):
        super().__init__(f"{kind} avec ID {reference_id} non trouvée.")
        self.kind = kind
        self.reference_id = reference_id
