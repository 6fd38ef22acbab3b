import logging
from decimal import Decimal
from typing import List

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

# Charger les variables d'environnement AVANT de définir la classe Settings
load_dotenv()

# Classe de configuration utilisant Pydantic BaseSettings
class Settings(BaseSettings):
    # --- Application ---
    APP_NAME: str = "Atelier API"
    API_V1_PREFIX: str = "/api/v1"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    # --- Boutique / Caisse ---
    STORE_NAME: str = "WOOMAAN"
    STORE_TAGLINE: str = "BY YOLANDA DIVA"
    CURRENCY: str = "FCFA"
    CURRENCY_QUANTUM: Decimal = Decimal("1") # Unité d'arrondi des remises (1 FCFA)
    SELLER_NAME: str = "Vendeur CISS"

    # --- Stockage ---
    STORAGE_BACKEND: str = "memory" # "memory" ou "sql"
    DATABASE_URL: str = "sqlite+aiosqlite:///./atelier.db"
    DB_ECHO_LOG: bool = False

    # --- Numérotation des factures ---
    POS_INVOICE_PREFIX: str = "FAC"       # FAC-<année>-<séquence>
    BOUTIQUE_ORDER_PREFIX: str = "CMD"    # CMD<aammjj><séquence>
    INVOICE_SEQUENCE_WIDTH: int = 3

    # --- Stock ---
    DECREMENT_STOCK_ON_SALE: bool = True

    # --- Remises ---
    MAX_DISCOUNT_PERCENT: Decimal = Decimal("100")

    # --- Pagination ---
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    # --- Messages Génériques ---
    GENERIC_ERROR_MSG: str = "Erreur interne du serveur."

    class Config:
        # Charger depuis les variables d'environnement (respecte load_dotenv)
        env_file = ".env"
        env_file_encoding = 'utf-8'
        extra = 'ignore' # Ignorer les variables d'env non définies dans le modèle

# Instancier la classe de configuration
settings = Settings()

if settings.STORAGE_BACKEND not in ("memory", "sql"):
    logger.warning(f"STORAGE_BACKEND '{settings.STORAGE_BACKEND}' inconnu. Utilisation du stockage en mémoire.")
    settings.STORAGE_BACKEND = "memory"

logger.info(f"Configuration chargée: stockage={settings.STORAGE_BACKEND}, boutique={settings.STORE_NAME}, devise={settings.CURRENCY}")
