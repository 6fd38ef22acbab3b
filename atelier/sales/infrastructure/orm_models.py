from typing import Optional, List, Dict, Any
from decimal import Decimal
from datetime import datetime

from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field, Relationship

# --- Tables des ventes (écrites une fois, jamais mises à jour) ---

class SaleDB(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    invoice_number: str = Field(max_length=50, unique=True, index=True)
    channel: str = Field(default="pos", max_length=20, index=True)
    subtotal: Decimal = Field(decimal_places=2, max_digits=12)
    discount: Decimal = Field(default=Decimal("0"), decimal_places=2, max_digits=12)
    total: Decimal = Field(decimal_places=2, max_digits=12)
    payment_method: str = Field(max_length=20)
    created_at: datetime = Field(index=True)
    customer_id: Optional[str] = Field(default=None, max_length=50)
    customer: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON)) # Coordonnées boutique
    seller_name: Optional[str] = Field(default=None, max_length=100)
    status: str = Field(default="validee", max_length=20)

    lines: List["SaleLineDB"] = Relationship(
        back_populates="sale",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "SaleLineDB.position"},
    )

    __tablename__ = "sales"

class SaleLineDB(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    sale_id: int = Field(foreign_key="sales.id", index=True)
    position: int = Field(default=0)
    article_id: str = Field(max_length=50)
    variant_id: Optional[str] = Field(default=None, max_length=50)
    article_name: str = Field(max_length=255)
    sku: Optional[str] = Field(default=None, max_length=100)
    size: Optional[str] = Field(default=None, max_length=20)
    color: Optional[str] = Field(default=None, max_length=50)
    quantity: int
    unit_price: Decimal = Field(decimal_places=2, max_digits=12)

    sale: Optional[SaleDB] = Relationship(back_populates="lines")

    __tablename__ = "sale_lines"
