import logging

from fastapi import APIRouter, HTTPException, status

from atelier.config import settings

# Schemas
from atelier.cart.application.schemas import (
    AddToCartRequest, CartResponse, ScanRequest, SelectCustomerRequest, UpdateQuantityRequest
)

# Services & Dependencies
from atelier.cart.application.services import CartService
from atelier.cart.domain.entities import Cart
from atelier.cart.interfaces.dependencies import CartServiceDep, CartStoreDep

# Exceptions
from atelier.core.exceptions import NotFoundException, StockUnavailableException, ValidationException

logger = logging.getLogger(__name__)

cart_router = APIRouter(
    prefix="/carts",
    tags=["Carts"],
)

def _to_response(cart: Cart, service: CartService) -> CartResponse:
    return CartResponse.from_cart(cart, service.compute_totals(cart))

@cart_router.post("/", response_model=CartResponse, status_code=status.HTTP_201_CREATED)
async def create_cart_endpoint(store: CartStoreDep, service: CartServiceDep):
    """Ouvre un nouveau panier vide."""
    cart = store.create()
    return _to_response(cart, service)

@cart_router.get("/{cart_id}", response_model=CartResponse)
async def get_cart_endpoint(cart_id: str, store: CartStoreDep, service: CartServiceDep):
    try:
        return _to_response(store.get(cart_id), service)
    except NotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

@cart_router.delete("/{cart_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_cart_endpoint(cart_id: str, store: CartStoreDep):
    try:
        store.delete(cart_id)
    except NotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

@cart_router.post("/{cart_id}/lines", response_model=CartResponse)
async def add_to_cart_endpoint(
    cart_id: str,
    item: AddToCartRequest,
    store: CartStoreDep,
    service: CartServiceDep,
):
    """Ajoute un article (et sa déclinaison) au panier ; fusionne avec une ligne existante."""
    try:
        cart = store.get(cart_id)
        await service.add_to_cart(cart, item.article_id, variant_id=item.variant_id, quantity=item.quantity)
        return _to_response(cart, service)
    except ValidationException as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except NotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except StockUnavailableException as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception as e:
        logger.exception(f"Erreur inattendue ajout panier {cart_id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=settings.GENERIC_ERROR_MSG)

@cart_router.post("/{cart_id}/scan", response_model=CartResponse)
async def scan_barcode_endpoint(
    cart_id: str,
    scan: ScanRequest,
    store: CartStoreDep,
    service: CartServiceDep,
):
    """Ajoute au panier l'article correspondant au code-barres scanné."""
    try:
        cart = store.get(cart_id)
        await service.scan(cart, scan.code, quantity=scan.quantity)
        return _to_response(cart, service)
    except ValidationException as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except NotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except StockUnavailableException as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception as e:
        logger.exception(f"Erreur inattendue scan panier {cart_id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=settings.GENERIC_ERROR_MSG)

@cart_router.patch("/{cart_id}/lines/{line_id}", response_model=CartResponse)
async def update_line_quantity_endpoint(
    cart_id: str,
    line_id: str,
    update: UpdateQuantityRequest,
    store: CartStoreDep,
    service: CartServiceDep,
):
    """Fixe la quantité d'une ligne. Une quantité nulle ou négative retire la ligne."""
    try:
        cart = store.get(cart_id)
        await service.update_quantity(cart, line_id, update.quantity)
        return _to_response(cart, service)
    except ValidationException as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except NotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except StockUnavailableException as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception as e:
        logger.exception(f"Erreur inattendue MAJ ligne {line_id} panier {cart_id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=settings.GENERIC_ERROR_MSG)

@cart_router.delete("/{cart_id}/lines/{line_id}", response_model=CartResponse)
async def remove_line_endpoint(
    cart_id: str,
    line_id: str,
    store: CartStoreDep,
    service: CartServiceDep,
):
    try:
        cart = store.get(cart_id)
        service.remove_line(cart, line_id)
        return _to_response(cart, service)
    except NotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.exception(f"Erreur inattendue suppression ligne {line_id} panier {cart_id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=settings.GENERIC_ERROR_MSG)

@cart_router.put("/{cart_id}/customer", response_model=CartResponse)
async def select_customer_endpoint(
    cart_id: str,
    selection: SelectCustomerRequest,
    store: CartStoreDep,
    service: CartServiceDep,
):
    """Associe un client existant au panier."""
    try:
        cart = store.get(cart_id)
        await service.select_customer(cart, selection.customer_id)
        return _to_response(cart, service)
    except NotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.exception(f"Erreur inattendue sélection client panier {cart_id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=settings.GENERIC_ERROR_MSG)

@cart_router.delete("/{cart_id}/customer", response_model=CartResponse)
async def clear_customer_endpoint(cart_id: str, store: CartStoreDep, service: CartServiceDep):
    try:
        cart = store.get(cart_id)
        service.clear_customer(cart)
        return _to_response(cart, service)
    except NotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.exception(f"Erreur inattendue retrait client panier {cart_id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=settings.GENERIC_ERROR_MSG)
