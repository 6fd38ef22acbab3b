import logging
from typing import Dict

from atelier.cart.domain.entities import Cart
from atelier.cart.domain.exceptions import CartNotFoundException

logger = logging.getLogger(__name__)


class InMemoryCartStore:
    """Paniers ouverts, conservés en mémoire du processus et indexés par identifiant.

    Un panier appartient à une seule session de caisse ; il n'est jamais persisté.
    """

    def __init__(self):
        self._carts: Dict[str, Cart] = {}

    def create(self) -> Cart:
        cart = Cart()
        self._carts[cart.id] = cart
        logger.info(f"[CartStore] Panier {cart.id} ouvert.")
        return cart

    def get(self, cart_id: str) -> Cart:
        cart = self._carts.get(cart_id)
        if cart is None:
            raise CartNotFoundException(cart_id)
        return cart

    def delete(self, cart_id: str) -> None:
        if self._carts.pop(cart_id, None) is None:
            raise CartNotFoundException(cart_id)
        logger.info(f"[CartStore] Panier {cart_id} fermé.")
