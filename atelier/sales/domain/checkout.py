"""
Machine à états d'une tentative d'encaissement.

    IDLE -> AWAITING_PAYMENT_METHOD -> FINALIZING -> COMPLETED
                      ^                    |
                      +------ échec -------+

``cancel()`` depuis AWAITING_PAYMENT_METHOD revient à IDLE sans effet de bord.
Cet état est propre à l'écran d'encaissement : il ne touche ni au panier ni au stock.
"""
from enum import Enum
from typing import Optional

from .entities import PaymentMethod, Sale
from .exceptions import InvalidCheckoutTransitionException


class CheckoutState(str, Enum):
    IDLE = "idle"
    AWAITING_PAYMENT_METHOD = "awaiting_payment_method"
    FINALIZING = "finalizing"
    COMPLETED = "completed"


class CheckoutAttempt:

    def __init__(self):
        self.state = CheckoutState.IDLE
        self.payment_method: Optional[PaymentMethod] = None
        self.sale: Optional[Sale] = None
        self.last_error: Optional[str] = None

    def _require(self, expected: CheckoutState, action: str) -> None:
        if self.state != expected:
            raise InvalidCheckoutTransitionException(self.state.value, action)

    def begin(self) -> None:
        """Ouvre le choix du mode de paiement."""
        self._require(CheckoutState.IDLE, "begin")
        self.last_error = None
        self.state = CheckoutState.AWAITING_PAYMENT_METHOD

    def choose_payment_method(self, payment_method: PaymentMethod) -> None:
        self._require(CheckoutState.AWAITING_PAYMENT_METHOD, "choose_payment_method")
        self.payment_method = payment_method
        self.state = CheckoutState.FINALIZING

    def complete(self, sale: Sale) -> None:
        self._require(CheckoutState.FINALIZING, "complete")
        self.sale = sale
        self.last_error = None
        self.state = CheckoutState.COMPLETED

    def fail(self, error: Exception) -> None:
        """Retour au choix du mode de paiement ; l'erreur est conservée pour affichage."""
        self._require(CheckoutState.FINALIZING, "fail")
        self.last_error = str(error)
        self.payment_method = None
        self.state = CheckoutState.AWAITING_PAYMENT_METHOD

    def cancel(self) -> None:
        self._require(CheckoutState.AWAITING_PAYMENT_METHOD, "cancel")
        self.payment_method = None
        self.last_error = None
        self.state = CheckoutState.IDLE

    @property
    def is_completed(self) -> bool:
        return self.state == CheckoutState.COMPLETED
