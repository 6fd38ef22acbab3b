from abc import ABC, abstractmethod
from typing import Optional, List

from .entities import Article, Color, Customer, Size, StockRequest

# Interfaces Abstraites pour les Repositories
# Le panier et l'encaissement ne dépendent que de ces contrats.

class AbstractCatalogRepository(ABC):
    """Interface pour le repository des Articles (avec leurs déclinaisons et stocks)."""

    @abstractmethod
    async def list_articles(self) -> List[Article]:
        """Liste tous les articles, dans l'ordre du catalogue, avec leurs déclinaisons."""
        raise NotImplementedError

    @abstractmethod
    async def get_article(self, article_id: str) -> Optional[Article]:
        """Récupère un article par ID avec ses déclinaisons et stocks à jour."""
        raise NotImplementedError

    @abstractmethod
    async def decrement_stock(self, requests: List[StockRequest]) -> None:
        """Retire les quantités demandées, tout ou rien.
        Lève StockUnavailableException (sans rien modifier) si une ligne manque de stock.
        """
        raise NotImplementedError

    @abstractmethod
    async def increment_stock(self, requests: List[StockRequest]) -> None:
        """Remet les quantités en stock (compensation d'une vente non enregistrée)."""
        raise NotImplementedError


class AbstractReferenceDataRepository(ABC):
    """Interface pour les données de référence : clients, tailles, couleurs."""

    @abstractmethod
    async def list_customers(self) -> List[Customer]:
        raise NotImplementedError

    @abstractmethod
    async def get_customer(self, customer_id: str) -> Optional[Customer]:
        raise NotImplementedError

    @abstractmethod
    async def list_sizes(self) -> List[Size]:
        """Liste les tailles triées par ordre d'affichage."""
        raise NotImplementedError

    @abstractmethod
    async def list_colors(self) -> List[Color]:
        raise NotImplementedError
