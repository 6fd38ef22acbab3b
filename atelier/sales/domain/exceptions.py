"""Exceptions spécifiques au domaine Sales."""
from typing import List

from atelier.core.exceptions import AtelierDomainException, ConflictException, NotFoundException, ValidationException


class EmptyCartException(ValidationException):
    """Levée lors d'un encaissement sur un panier vide."""
    def __init__(self):
        super().__init__("Le panier est vide.")

class MissingCustomerInfoException(ValidationException):
    """Levée quand une commande boutique n'a pas les coordonnées obligatoires."""
    def __init__(self, missing_fields: List[str]):
        super().__init__(f"Informations client obligatoires manquantes: {', '.join(missing_fields)}.")
        self.missing_fields = missing_fields

class InvalidPaymentMethodException(ValidationException):
    def __init__(self, payment_method):
        super().__init__(f"Mode de paiement invalide: {payment_method}.")
        self.payment_method = payment_method

class SaleNotFoundException(NotFoundException):
    def __init__(self, invoice_number: str):
        super().__init__(f"Vente {invoice_number} non trouvée.")
        self.invoice_number = invoice_number

class InvoiceNumberConflictException(ConflictException):
    """Levée quand le numéro de facture calculé vient d'être pris par un autre encaissement."""
    def __init__(self, invoice_number: str):
        super().__init__(f"Le numéro de facture {invoice_number} vient d'être attribué à une autre vente. Veuillez relancer l'encaissement.")
        self.invoice_number = invoice_number

class InvalidCheckoutTransitionException(AtelierDomainException):
    """Transition d'état d'encaissement non permise (erreur de programmation côté appelant)."""
    def __init__(self, current_state: str, action: str):
        super().__init__(f"Action '{action}' impossible depuis l'état '{current_state}'.")
        self.current_state = current_state
        self.action = action
