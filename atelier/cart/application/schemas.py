from typing import Optional, List
from decimal import Decimal
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from atelier.cart.domain.entities import Cart, CartLine
from atelier.cart.domain.pricing import Totals

# --- Schémas de requête ---

class AddToCartRequest(BaseModel):
    article_id: str
    variant_id: Optional[str] = None
    quantity: int = Field(1, gt=0)

class ScanRequest(BaseModel):
    code: str = Field(..., min_length=1, description="Code-barres lu par la douchette")
    quantity: int = Field(1, gt=0)

class UpdateQuantityRequest(BaseModel):
    # Zéro ou négatif : la ligne est retirée du panier
    quantity: int

class SelectCustomerRequest(BaseModel):
    customer_id: str

# --- Schémas de réponse ---

class CartLineResponse(BaseModel):
    id: str
    article_id: str
    variant_id: Optional[str] = None
    article_name: str
    sku: Optional[str] = None
    size: Optional[str] = None
    color: Optional[str] = None
    quantity: int
    unit_price: Decimal
    line_total: Decimal

    model_config = ConfigDict(from_attributes=True)

class CartResponse(BaseModel):
    id: str
    lines: List[CartLineResponse] = []
    customer_id: Optional[str] = None
    item_count: int = 0
    subtotal: Decimal
    discount: Decimal
    total: Decimal
    created_at: datetime

    @classmethod
    def from_cart(cls, cart: Cart, totals: Totals) -> "CartResponse":
        return cls(
            id=cart.id,
            lines=[CartLineResponse.model_validate(line) for line in cart.lines],
            customer_id=cart.customer_id,
            item_count=cart.item_count,
            subtotal=totals.subtotal,
            discount=totals.discount,
            total=totals.total,
            created_at=cart.created_at,
        )
