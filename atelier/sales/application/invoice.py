from datetime import datetime
from typing import Optional

from atelier.config import Settings, settings as default_settings
from atelier.sales.domain.entities import SaleChannel


def invoice_prefix(channel: SaleChannel, when: datetime, settings: Optional[Settings] = None) -> str:
    """Préfixe de numérotation : ``FAC-2026-`` en caisse, ``CMD261019`` pour la boutique."""
    settings = settings or default_settings
    if SaleChannel(channel) == SaleChannel.BOUTIQUE:
        return f"{settings.BOUTIQUE_ORDER_PREFIX}{when:%y%m%d}"
    return f"{settings.POS_INVOICE_PREFIX}-{when:%Y}-"


def format_invoice_number(prefix: str, sequence: int, width: int = 3) -> str:
    return f"{prefix}{sequence:0{width}d}"
