from typing import Dict, Optional
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from atelier.sales.domain.entities import CustomerInfo, PaymentMethod, Sale, SaleChannel

# --- Schémas pour l'encaissement ---

class CheckoutRequest(BaseModel):
    payment_method: PaymentMethod
    channel: SaleChannel = SaleChannel.POS
    customer: Optional[CustomerInfo] = None # Obligatoire pour une commande boutique
    # Une seule forme de remise : pourcentage global, montant fixe ou pourcentage par ligne
    discount_percent: Optional[Decimal] = Field(None, ge=0, le=100)
    discount_amount: Optional[Decimal] = Field(None, ge=0)
    line_discounts: Optional[Dict[str, Decimal]] = None # id de ligne -> pourcentage

    @model_validator(mode="after")
    def check_single_discount(self):
        given = [d for d in (self.discount_percent, self.discount_amount, self.line_discounts) if d is not None]
        if len(given) > 1:
            raise ValueError("Indiquer une seule forme de remise (pourcentage, montant ou par ligne).")
        return self

class CheckoutResponse(BaseModel):
    sale: Sale
    receipt: str

# --- Schémas pour la consultation ---

class SalesStatistics(BaseModel):
    revenue: Decimal = Decimal("0")        # Chiffre d'affaires des ventes validées
    sale_count: int = 0
    average_basket: Decimal = Decimal("0")
    sales_today: int = 0
