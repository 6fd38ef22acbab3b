from typing import Optional, List
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

# Entités du Domaine "Catalog"
# Indépendantes du stockage (mémoire ou SQL), chargées via from_attributes.

class Size(BaseModel):
    id: str
    name: str = Field(..., max_length=50)
    code: str = Field(..., max_length=10, description="Ex: 'XS', 'M', 'XXL'")
    category: str = Field("unisexe", max_length=20) # 'homme', 'femme', 'enfant', 'unisexe'
    order: int = 0
    active: bool = True

    model_config = ConfigDict(from_attributes=True)

class Color(BaseModel):
    id: str
    name: str = Field(..., max_length=50)
    hex_code: str = Field(..., max_length=7, description="Ex: '#FF0000'")
    rgb_code: Optional[str] = Field(None, max_length=20) # Ex: '255,0,0'
    active: bool = True

    model_config = ConfigDict(from_attributes=True)

class Customer(BaseModel):
    id: str
    last_name: str = Field(..., max_length=100)
    first_name: Optional[str] = Field(None, max_length=100)
    email: Optional[str] = None
    phone: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

class Variant(BaseModel):
    """Déclinaison d'un article (taille x couleur) avec son propre stock."""
    id: str
    article_id: str
    size_id: Optional[str] = None
    color_id: Optional[str] = None
    sku: str = Field(..., max_length=100)
    price: Optional[Decimal] = Field(None, ge=0) # Prix spécifique, sinon prix de base de l'article
    purchase_price: Optional[Decimal] = Field(None, ge=0)
    stock: int = Field(0, ge=0)
    min_stock: int = Field(0, ge=0)
    barcode: Optional[str] = None
    active: bool = True

    model_config = ConfigDict(from_attributes=True)

class Article(BaseModel):
    id: str
    name: str = Field(..., max_length=255)
    description: Optional[str] = None
    base_price: Decimal = Field(..., ge=0)
    category: str = Field(..., max_length=50)
    active: bool = True
    image_url: Optional[str] = None
    barcode: Optional[str] = None
    collection_id: Optional[str] = None
    stock: Optional[int] = Field(None, ge=0) # Stock à plat, seulement pour un article sans déclinaison
    variants: List[Variant] = []

    model_config = ConfigDict(from_attributes=True)

    @property
    def has_variants(self) -> bool:
        return len(self.variants) > 0

    @property
    def total_stock(self) -> int:
        if self.has_variants:
            return sum(v.stock for v in self.variants)
        return self.stock or 0

    def get_variant(self, variant_id: str) -> Optional[Variant]:
        return next((v for v in self.variants if v.id == variant_id), None)

    def price_for(self, variant: Optional[Variant] = None) -> Decimal:
        """Prix de vente effectif : celui de la déclinaison s'il existe, sinon le prix de base."""
        if variant is not None and variant.price is not None:
            return variant.price
        return self.base_price

class StockRequest(BaseModel):
    """Quantité à retirer (ou remettre) pour un article / une déclinaison."""
    article_id: str
    variant_id: Optional[str] = None
    quantity: int = Field(..., gt=0)

class BarcodeMatch(BaseModel):
    """Résultat de la lecture d'un code-barres."""
    article: Article
    variant: Optional[Variant] = None
