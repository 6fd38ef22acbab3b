"""Mise en forme texte des reçus de caisse et bons de commande."""
from decimal import Decimal
from typing import List, Optional

from atelier.config import Settings, settings as default_settings
from atelier.sales.domain.entities import Sale, SaleChannel, SaleLine

RULE = "=" * 32
SEPARATOR = "-" * 32

_FRENCH_NUMBER = str.maketrans({",": " ", ".": ","})


def format_money(amount: Decimal, currency: Optional[str] = None) -> str:
    """``Decimal("105000")`` -> ``"105 000 FCFA"`` (séparateur de milliers : espace)."""
    currency = currency if currency is not None else default_settings.CURRENCY
    amount = Decimal(amount)
    if amount == amount.to_integral_value():
        text = f"{amount:,.0f}"
    else:
        text = f"{amount:,.2f}"
    text = text.translate(_FRENCH_NUMBER)
    return f"{text} {currency}".strip()


def describe_line(line: SaleLine) -> str:
    label = line.article_name
    if line.size:
        label += f" ({line.size})"
    if line.color:
        label += f" - {line.color}"
    return label


def render_text_receipt(
    sale: Sale,
    customer_name: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> str:
    settings = settings or default_settings
    currency = settings.CURRENCY
    is_order = sale.channel == SaleChannel.BOUTIQUE

    rows: List[str] = [
        f"{settings.STORE_NAME} - {settings.STORE_TAGLINE}",
        "BON DE COMMANDE" if is_order else "REÇU DE CAISSE",
        RULE,
        f"{'Commande' if is_order else 'Facture'} N°: {sale.invoice_number}",
        f"Date: {sale.created_at:%d/%m/%Y %H:%M}",
    ]
    if sale.seller_name:
        rows.append(f"Vendeur: {sale.seller_name}")
    if sale.customer is not None:
        rows.append(f"Client: {sale.customer.full_name}")
        rows.append(f"Tél: {sale.customer.phone}")
    elif customer_name:
        rows.append(f"Client: {customer_name}")

    rows += [SEPARATOR, "ARTICLES:"]
    for line in sale.lines:
        rows.append(describe_line(line))
        rows.append(
            f"  Qté: {line.quantity} x {format_money(line.unit_price, currency)}"
            f" = {format_money(line.line_total, currency)}"
        )

    rows += [SEPARATOR, f"Sous-total: {format_money(sale.subtotal, currency)}"]
    if sale.discount > 0:
        rows.append(f"Remise: -{format_money(sale.discount, currency)}")
    rows += [
        f"TOTAL: {format_money(sale.total, currency)}",
        f"Mode de paiement: {sale.payment_method.label}",
        RULE,
        "Merci de votre visite !",
    ]
    return "\n".join(rows)
