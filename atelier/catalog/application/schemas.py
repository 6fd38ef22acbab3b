from typing import Optional, List
from decimal import Decimal

from pydantic import BaseModel

from atelier.catalog.domain.entities import Article, Variant

# --- Schémas de réponse de l'API Catalog ---

class BarcodeLookupResponse(BaseModel):
    article: Article
    variant: Optional[Variant] = None
    unit_price: Decimal
    requires_variant_selection: bool = False
    available_variants: List[Variant] = []

class LowStockItem(BaseModel):
    article_id: str
    article_name: str
    variant_id: str
    sku: str
    stock: int
    min_stock: int

class SkuSuggestion(BaseModel):
    article_id: str
    size_id: Optional[str] = None
    color_id: Optional[str] = None
    sku: str
