from typing import Optional, List
from decimal import Decimal
from datetime import datetime, timezone
from uuid import uuid4

from pydantic import BaseModel, Field, computed_field

from atelier.catalog.domain.entities import Article, Variant
from atelier.catalog.domain.exceptions import VariantNotFoundException

from .exceptions import (
    ArticleInactiveException, CartLineNotFoundException, InvalidQuantityException,
    VariantInactiveException, VariantSelectionRequiredException,
)

# Entités du Domaine "Cart" (panier d'une session de caisse ou de la boutique)

def _new_id() -> str:
    return uuid4().hex


def _check_quantity(quantity) -> int:
    # bool est un int en Python : on le refuse explicitement
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidQuantityException(quantity)
    return quantity


class CartLine(BaseModel):
    """Une ligne du panier : article + déclinaison, quantité et prix unitaire figé."""
    id: str = Field(default_factory=_new_id)
    article_id: str
    variant_id: Optional[str] = None
    article_name: str
    sku: Optional[str] = None
    size: Optional[str] = None   # Libellé de taille au moment de l'ajout
    color: Optional[str] = None  # Libellé de couleur au moment de l'ajout
    quantity: int = Field(..., gt=0)
    unit_price: Decimal = Field(..., ge=0) # Prix figé à l'ajout, jamais relu ensuite

    @computed_field
    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    def matches(self, article_id: str, variant_id: Optional[str]) -> bool:
        return self.article_id == article_id and self.variant_id == variant_id


class Cart(BaseModel):
    """Panier : suite ordonnée de lignes et client éventuellement sélectionné.

    Chaque opération est tout-ou-rien : si elle lève, le panier est inchangé.
    """
    id: str = Field(default_factory=_new_id)
    lines: List[CartLine] = []
    customer_id: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def subtotal(self) -> Decimal:
        return sum((line.line_total for line in self.lines), Decimal("0"))

    def find_line(self, article_id: str, variant_id: Optional[str] = None) -> Optional[CartLine]:
        return next((line for line in self.lines if line.matches(article_id, variant_id)), None)

    def get_line(self, line_id: str) -> CartLine:
        line = next((line for line in self.lines if line.id == line_id), None)
        if line is None:
            raise CartLineNotFoundException(line_id)
        return line

    def quantity_after_add(self, article: Article, variant: Optional[Variant], quantity: int) -> int:
        """Quantité qu'aurait la ligne (article, déclinaison) après l'ajout."""
        existing = self.find_line(article.id, variant.id if variant else None)
        return (existing.quantity if existing else 0) + quantity

    @staticmethod
    def validate_addition(article: Article, variant: Optional[Variant], quantity: int) -> None:
        """Vérifie qu'un ajout est possible, sans tenir compte du stock."""
        _check_quantity(quantity)
        if not article.active:
            raise ArticleInactiveException(article.id, article.name)
        if variant is None:
            if article.has_variants:
                raise VariantSelectionRequiredException(article.id, article.name)
            return
        if variant.article_id != article.id or article.get_variant(variant.id) is None:
            raise VariantNotFoundException(variant.id, article_id=article.id)
        if not variant.active:
            raise VariantInactiveException(variant.id, variant.sku)

    def add(
        self,
        article: Article,
        variant: Optional[Variant] = None,
        quantity: int = 1,
        size_label: Optional[str] = None,
        color_label: Optional[str] = None,
    ) -> CartLine:
        """Ajoute au panier, en fusionnant avec la ligne existante pour le même couple article/déclinaison."""
        self.validate_addition(article, variant, quantity)
        existing = self.find_line(article.id, variant.id if variant else None)
        if existing is not None:
            existing.quantity += quantity
            return existing
        line = CartLine(
            article_id=article.id,
            variant_id=variant.id if variant else None,
            article_name=article.name,
            sku=variant.sku if variant else None,
            size=size_label,
            color=color_label,
            quantity=quantity,
            unit_price=article.price_for(variant),
        )
        self.lines.append(line)
        return line

    def update_quantity(self, line_id: str, quantity: int) -> Optional[CartLine]:
        """Fixe la quantité d'une ligne. Zéro ou moins supprime la ligne (retourne None)."""
        line = self.get_line(line_id)
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise InvalidQuantityException(quantity)
        if quantity <= 0:
            self.lines.remove(line)
            return None
        line.quantity = quantity
        return line

    def remove_line(self, line_id: str) -> CartLine:
        line = self.get_line(line_id)
        self.lines.remove(line)
        return line

    def select_customer(self, customer_id: Optional[str]) -> None:
        self.customer_id = customer_id

    def clear(self) -> None:
        """Vide le panier et désélectionne le client."""
        self.lines = []
        self.customer_id = None
