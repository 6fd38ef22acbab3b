"""Exceptions spécifiques au domaine Cart."""
from atelier.core.exceptions import NotFoundException, ValidationException


class CartNotFoundException(NotFoundException):
    def __init__(self, cart_id: str):
        super().__init__(f"Panier {cart_id} non trouvé.")
        self.cart_id = cart_id

class CartLineNotFoundException(NotFoundException):
    def __init__(self, line_id: str):
        super().__init__(f"Ligne de panier {line_id} non trouvée.")
        self.line_id = line_id

class InvalidQuantityException(ValidationException):
    def __init__(self, quantity):
        super().__init__(f"Quantité invalide: {quantity}. Un entier strictement positif est attendu.")
        self.quantity = quantity

class VariantSelectionRequiredException(ValidationException):
    """Levée quand l'article a des déclinaisons et qu'aucune taille/couleur n'a été choisie."""
    def __init__(self, article_id: str, article_name: str):
        super().__init__(f"Veuillez sélectionner une taille et une couleur pour '{article_name}'.")
        self.article_id = article_id

class VariantInactiveException(ValidationException):
    def __init__(self, variant_id: str, sku: str):
        super().__init__(f"La déclinaison '{sku}' n'est plus disponible à la vente.")
        self.variant_id = variant_id
        self.sku = sku

class ArticleInactiveException(ValidationException):
    def __init__(self, article_id: str, article_name: str):
        super().__init__(f"L'article '{article_name}' n'est plus disponible à la vente.")
        self.article_id = article_id

class InvalidDiscountException(ValidationException):
    pass
