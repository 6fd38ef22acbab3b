from enum import Enum
from typing import List, Optional, Tuple
from decimal import Decimal
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field

# Entités du Domaine "Sales"
# Une vente est écrite une seule fois, à l'encaissement, puis n'est plus jamais modifiée.

class PaymentMethod(str, Enum):
    ESPECES = "especes"
    CARTE = "carte"
    MOBILE_MONEY = "mobile_money"
    CHEQUE = "cheque"
    CREDIT = "credit"

    @property
    def label(self) -> str:
        return PAYMENT_METHOD_LABELS[self]

PAYMENT_METHOD_LABELS = {
    PaymentMethod.ESPECES: "Espèces",
    PaymentMethod.CARTE: "Carte",
    PaymentMethod.MOBILE_MONEY: "Mobile Money",
    PaymentMethod.CHEQUE: "Chèque",
    PaymentMethod.CREDIT: "Crédit",
}

class SaleChannel(str, Enum):
    POS = "pos"             # Vente en caisse
    BOUTIQUE = "boutique"   # Commande de la boutique en ligne

class SaleStatus(str, Enum):
    VALIDEE = "validee"
    ANNULEE = "annulee"

REQUIRED_CUSTOMER_FIELDS = ("last_name", "email", "phone")

class CustomerInfo(BaseModel):
    """Coordonnées saisies par l'acheteur de la boutique en ligne.

    Nom, email et téléphone sont obligatoires pour une commande boutique ; le contrôle
    est fait à l'encaissement, un champ absent vaut une chaîne vide.
    """
    last_name: str = Field("", max_length=100)
    first_name: Optional[str] = Field(None, max_length=100)
    email: str = Field("", max_length=255)
    phone: str = Field("", max_length=30)
    address: Optional[str] = None
    city: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    def missing_required_fields(self) -> List[str]:
        return [name for name in REQUIRED_CUSTOMER_FIELDS if not (getattr(self, name) or "").strip()]

class SaleLine(BaseModel):
    """Copie figée d'une ligne de panier au moment de l'encaissement."""
    article_id: str
    variant_id: Optional[str] = None
    article_name: str
    sku: Optional[str] = None
    size: Optional[str] = None
    color: Optional[str] = None
    quantity: int = Field(..., gt=0)
    unit_price: Decimal = Field(..., ge=0)

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @computed_field
    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

class Sale(BaseModel):
    invoice_number: str
    channel: SaleChannel = SaleChannel.POS
    lines: Tuple[SaleLine, ...]
    subtotal: Decimal
    discount: Decimal = Decimal("0")
    total: Decimal
    payment_method: PaymentMethod
    created_at: datetime
    customer_id: Optional[str] = None
    customer: Optional[CustomerInfo] = None
    seller_name: Optional[str] = None
    status: SaleStatus = SaleStatus.VALIDEE

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)
