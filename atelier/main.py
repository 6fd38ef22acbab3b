"""
Module principal de l'application FastAPI Atelier.

Ce module configure l'instance FastAPI, ajoute le middleware CORS, prépare la base
SQL au démarrage si elle est activée, et inclut les routeurs du catalogue, des
paniers et des ventes.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from atelier import __version__
from atelier.config import settings

# --- Importer les routeurs ---
from atelier.catalog.interfaces.api import catalog_router
from atelier.cart.interfaces.api import cart_router
from atelier.sales.interfaces.api import checkout_router, sales_router

# Configurer le logging
logging.basicConfig(level=settings.LOG_LEVEL.upper())
logger = logging.getLogger(__name__)


async def init_sql_storage() -> None:
    """Crée les tables et charge le catalogue de démonstration dans une base vide."""
    from atelier.core.database import AsyncSessionLocal, create_tables
    from atelier.catalog.infrastructure.persistence import seed_catalog
    from atelier.catalog.infrastructure.seed import (
        default_articles, default_colors, default_customers, default_sizes
    )

    await create_tables()
    async with AsyncSessionLocal() as session:
        await seed_catalog(session, default_articles(), default_sizes(), default_colors(), default_customers())


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Démarrage {settings.APP_NAME} (stockage: {settings.STORAGE_BACKEND}).")
    if settings.STORAGE_BACKEND == "sql":
        await init_sql_storage()
    yield
    logger.info(f"Arrêt {settings.APP_NAME}.")


app = FastAPI(
    title=settings.APP_NAME,
    description="API de caisse : catalogue, panier, encaissement et reçus.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Range"],
)

# ======================================================
# Inclure les routeurs
# ======================================================
app.include_router(catalog_router, prefix=settings.API_V1_PREFIX)
app.include_router(cart_router, prefix=settings.API_V1_PREFIX)
app.include_router(checkout_router, prefix=settings.API_V1_PREFIX)
app.include_router(sales_router, prefix=settings.API_V1_PREFIX)


@app.get("/", tags=["Root"])
async def read_root():
    return {"message": f"Bienvenue sur l'API {settings.APP_NAME}", "version": __version__}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("atelier.main:app", host="0.0.0.0", port=8000)
