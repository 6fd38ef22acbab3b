"""Exceptions de base partagées par tous les domaines.

Trois familles d'erreurs, toutes récupérables localement :

* ``ValidationException`` : entrée invalide ou manquante (panier vide,
  taille/couleur non choisie, informations client incomplètes...).
* ``NotFoundException`` : identifiant ou code-barres inconnu.
* ``ConflictException`` : l'état a changé entre la lecture et l'écriture ; ``StockUnavailableException``
  (quantité demandée supérieure au stock) en est un cas particulier.
"""
from typing import Optional


class AtelierDomainException(Exception):
    """Classe de base pour les exceptions métier."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ValidationException(AtelierDomainException):
    """Levée lorsque l'appelant fournit une donnée invalide ou incomplète."""
    pass


class NotFoundException(AtelierDomainException):
    """Levée lorsqu'un identifiant ne correspond à aucun enregistrement."""
    pass


class ConflictException(AtelierDomainException):
    """Levée lorsque l'opération entre en conflit avec une écriture concurrente ; elle peut être rejouée."""
    pass


class StockUnavailableException(ConflictException):
    """Levée lorsque la quantité demandée dépasse le stock disponible."""
    def __init__(
        self,
        article_id: str,
        requested: int,
        available: int,
        variant_id: Optional[str] = None,
        label: Optional[str] = None,
    ):
        target = label or variant_id or article_id
        super().__init__(f"Stock insuffisant pour '{target}'. Demandé: {requested}, Disponible: {available}.")
        self.article_id = article_id
        self.variant_id = variant_id
        self.requested = requested
        self.available = available
