import pytest
from httpx import AsyncClient

from atelier.cart.application.services import CartService
from atelier.config import settings

# Mark all tests in this module to use pytest-asyncio
pytestmark = pytest.mark.asyncio

API = "/api/v1/carts"


async def _new_cart(client: AsyncClient) -> str:
    response = await client.post(f"{API}/")
    assert response.status_code == 201
    return response.json()["id"]


async def test_create_and_get_cart(test_client: AsyncClient):
    cart_id = await _new_cart(test_client)
    response = await test_client.get(f"{API}/{cart_id}")
    assert response.status_code == 200
    data = response.json()
    assert data["lines"] == []
    assert float(data["total"]) == 0

async def test_unknown_cart(test_client: AsyncClient):
    assert (await test_client.get(f"{API}/inconnu")).status_code == 404
    response = await test_client.post(f"{API}/inconnu/lines", json={"article_id": "art7"})
    assert response.status_code == 404

async def test_add_merge_update_and_remove(test_client: AsyncClient):
    cart_id = await _new_cart(test_client)
    payload = {"article_id": "art1", "variant_id": "d1", "quantity": 2}
    response = await test_client.post(f"{API}/{cart_id}/lines", json=payload)
    assert response.status_code == 200
    assert float(response.json()["total"]) == 70000

    response = await test_client.post(f"{API}/{cart_id}/lines", json={**payload, "quantity": 1})
    data = response.json()
    assert len(data["lines"]) == 1
    assert data["lines"][0]["quantity"] == 3
    assert data["lines"][0]["size"] == "M"
    assert float(data["subtotal"]) == 105000

    line_id = data["lines"][0]["id"]
    response = await test_client.patch(f"{API}/{cart_id}/lines/{line_id}", json={"quantity": 0})
    assert response.status_code == 200
    assert response.json()["lines"] == []

    await test_client.post(f"{API}/{cart_id}/lines", json={"article_id": "art7"})
    line_id = (await test_client.get(f"{API}/{cart_id}")).json()["lines"][0]["id"]
    response = await test_client.delete(f"{API}/{cart_id}/lines/{line_id}")
    assert response.status_code == 200
    assert response.json()["item_count"] == 0

async def test_add_errors_are_mapped(test_client: AsyncClient):
    cart_id = await _new_cart(test_client)
    # Article avec déclinaisons sans taille/couleur choisie
    response = await test_client.post(f"{API}/{cart_id}/lines", json={"article_id": "art1"})
    assert response.status_code == 400
    # Au-delà du stock
    response = await test_client.post(f"{API}/{cart_id}/lines", json={"article_id": "art1", "variant_id": "d2", "quantity": 6})
    assert response.status_code == 409
    assert "Stock insuffisant" in response.json()["detail"]
    # Quantité invalide rejetée par le schéma
    response = await test_client.post(f"{API}/{cart_id}/lines", json={"article_id": "art7", "quantity": 0})
    assert response.status_code == 422
    assert (await test_client.get(f"{API}/{cart_id}")).json()["lines"] == []

async def test_scan(test_client: AsyncClient):
    cart_id = await _new_cart(test_client)
    response = await test_client.post(f"{API}/{cart_id}/scan", json={"code": "SAC001"})
    assert response.status_code == 200
    assert response.json()["lines"][0]["article_id"] == "art7"
    response = await test_client.post(f"{API}/{cart_id}/scan", json={"code": "inconnu"})
    assert response.status_code == 404

async def test_customer_selection(test_client: AsyncClient):
    cart_id = await _new_cart(test_client)
    response = await test_client.put(f"{API}/{cart_id}/customer", json={"customer_id": "2"})
    assert response.status_code == 200
    assert response.json()["customer_id"] == "2"
    response = await test_client.put(f"{API}/{cart_id}/customer", json={"customer_id": "404"})
    assert response.status_code == 404
    response = await test_client.delete(f"{API}/{cart_id}/customer")
    assert response.json()["customer_id"] is None

async def test_delete_cart(test_client: AsyncClient):
    cart_id = await _new_cart(test_client)
    assert (await test_client.delete(f"{API}/{cart_id}")).status_code == 204
    assert (await test_client.get(f"{API}/{cart_id}")).status_code == 404

async def test_unexpected_errors_return_generic_message(test_client: AsyncClient, mocker):
    cart_id = await _new_cart(test_client)
    line_id = (await test_client.post(f"{API}/{cart_id}/lines", json={"article_id": "art7"})).json()["lines"][0]["id"]
    mocker.patch.object(CartService, "remove_line", side_effect=RuntimeError("panne"))
    mocker.patch.object(CartService, "clear_customer", side_effect=RuntimeError("panne"))

    response = await test_client.delete(f"{API}/{cart_id}/lines/{line_id}")
    assert response.status_code == 500
    assert response.json()["detail"] == settings.GENERIC_ERROR_MSG

    response = await test_client.delete(f"{API}/{cart_id}/customer")
    assert response.status_code == 500
    assert response.json()["detail"] == settings.GENERIC_ERROR_MSG
