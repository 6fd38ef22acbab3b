"""
Calcul des totaux du panier et politiques de remise.

Par défaut aucune remise n'est appliquée : total == sous-total.
La remise est arrondie à l'unité monétaire (1 FCFA par défaut) avant le calcul du total.
"""
from abc import ABC, abstractmethod
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Optional

from pydantic import BaseModel

from .entities import Cart
from .exceptions import InvalidDiscountException

ZERO = Decimal("0")
DEFAULT_QUANTUM = Decimal("1")


class Totals(BaseModel):
    subtotal: Decimal
    discount: Decimal = ZERO
    total: Decimal


def round_amount(amount: Decimal, quantum: Decimal = DEFAULT_QUANTUM) -> Decimal:
    return Decimal(amount).quantize(quantum, rounding=ROUND_HALF_UP)


def _check_percent(percent) -> Decimal:
    percent = Decimal(str(percent))
    if percent < 0 or percent > 100:
        raise InvalidDiscountException(f"Pourcentage de remise invalide: {percent}. Attendu entre 0 et 100.")
    return percent


class DiscountPolicy(ABC):
    """Point d'extension : montant de remise à déduire du sous-total."""

    @abstractmethod
    def discount_for(self, cart: Cart, subtotal: Decimal) -> Decimal:
        raise NotImplementedError


class NoDiscount(DiscountPolicy):
    def discount_for(self, cart: Cart, subtotal: Decimal) -> Decimal:
        return ZERO


class PercentageDiscount(DiscountPolicy):
    """Remise globale en pourcentage du sous-total."""

    def __init__(self, percent: Decimal):
        self.percent = _check_percent(percent)

    def discount_for(self, cart: Cart, subtotal: Decimal) -> Decimal:
        return subtotal * self.percent / Decimal("100")


class FixedAmountDiscount(DiscountPolicy):
    """Remise d'un montant fixe, plafonnée au sous-total."""

    def __init__(self, amount: Decimal):
        amount = Decimal(str(amount))
        if amount < 0:
            raise InvalidDiscountException(f"Montant de remise invalide: {amount}.")
        self.amount = amount

    def discount_for(self, cart: Cart, subtotal: Decimal) -> Decimal:
        return min(self.amount, subtotal)


class LineDiscount(DiscountPolicy):
    """Remise en pourcentage ligne par ligne, indexée par identifiant de ligne du panier."""

    def __init__(self, percent_by_line: Dict[str, Decimal]):
        self.percent_by_line = {line_id: _check_percent(p) for line_id, p in percent_by_line.items()}

    def discount_for(self, cart: Cart, subtotal: Decimal) -> Decimal:
        for line_id in self.percent_by_line:
            cart.get_line(line_id)  # lève si la ligne a été retirée du panier
        return sum(
            (line.line_total * self.percent_by_line[line.id] / Decimal("100")
             for line in cart.lines if line.id in self.percent_by_line),
            ZERO,
        )


def compute_totals(
    cart: Cart,
    policy: Optional[DiscountPolicy] = None,
    quantum: Decimal = DEFAULT_QUANTUM,
) -> Totals:
    """sous-total = somme des totaux de ligne ; total = sous-total - remise arrondie."""
    policy = policy or NoDiscount()
    subtotal = cart.subtotal
    discount = min(max(policy.discount_for(cart, subtotal), ZERO), subtotal)
    discount = min(round_amount(discount, quantum), subtotal)
    return Totals(subtotal=subtotal, discount=discount, total=subtotal - discount)
