from typing import Optional, List
from decimal import Decimal

from sqlmodel import SQLModel, Field, Relationship

# --- Tables du catalogue ---

class ArticleDB(SQLModel, table=True):
    id: str = Field(primary_key=True, max_length=50)
    name: str = Field(max_length=255, index=True)
    description: Optional[str] = None
    base_price: Decimal = Field(decimal_places=2, max_digits=12)
    category: str = Field(max_length=50, index=True)
    active: bool = Field(default=True)
    image_url: Optional[str] = Field(default=None, max_length=255)
    barcode: Optional[str] = Field(default=None, max_length=100, index=True)
    collection_id: Optional[str] = Field(default=None, max_length=50)
    stock: Optional[int] = Field(default=None) # Articles sans déclinaison uniquement
    position: int = Field(default=0) # Ordre du catalogue

    variants: List["VariantDB"] = Relationship(
        back_populates="article",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "VariantDB.position"},
    )

    __tablename__ = "articles"

class VariantDB(SQLModel, table=True):
    id: str = Field(primary_key=True, max_length=50)
    article_id: str = Field(foreign_key="articles.id", index=True)
    size_id: Optional[str] = Field(default=None, max_length=50)
    color_id: Optional[str] = Field(default=None, max_length=50)
    sku: str = Field(index=True, unique=True, max_length=100)
    price: Optional[Decimal] = Field(default=None, decimal_places=2, max_digits=12)
    purchase_price: Optional[Decimal] = Field(default=None, decimal_places=2, max_digits=12)
    stock: int = Field(default=0)
    min_stock: int = Field(default=0)
    barcode: Optional[str] = Field(default=None, max_length=100, index=True)
    active: bool = Field(default=True)
    position: int = Field(default=0)

    article: Optional[ArticleDB] = Relationship(back_populates="variants")

    __tablename__ = "article_variants"

# --- Données de référence ---

class SizeDB(SQLModel, table=True):
    id: str = Field(primary_key=True, max_length=50)
    name: str = Field(max_length=50)
    code: str = Field(max_length=10)
    category: str = Field(default="unisexe", max_length=20)
    order: int = Field(default=0)
    active: bool = Field(default=True)

    __tablename__ = "sizes"

class ColorDB(SQLModel, table=True):
    id: str = Field(primary_key=True, max_length=50)
    name: str = Field(max_length=50)
    hex_code: str = Field(max_length=7)
    rgb_code: Optional[str] = Field(default=None, max_length=20)
    active: bool = Field(default=True)

    __tablename__ = "colors"

class CustomerDB(SQLModel, table=True):
    id: str = Field(primary_key=True, max_length=50)
    last_name: str = Field(max_length=100)
    first_name: Optional[str] = Field(default=None, max_length=100)
    email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)

    __tablename__ = "customers"
