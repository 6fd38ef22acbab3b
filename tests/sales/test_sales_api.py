import pytest
from httpx import AsyncClient

# Mark all tests in this module to use pytest-asyncio
pytestmark = pytest.mark.asyncio

CARTS = "/api/v1/carts"
SALES = "/api/v1/sales"


async def _cart_with(client: AsyncClient, *items: dict) -> str:
    cart_id = (await client.post(f"{CARTS}/")).json()["id"]
    for item in items:
        response = await client.post(f"{CARTS}/{cart_id}/lines", json=item)
        assert response.status_code == 200
    return cart_id


async def test_checkout_kaftan(test_client: AsyncClient):
    cart_id = await _cart_with(test_client, {"article_id": "art1", "variant_id": "d1", "quantity": 3})
    response = await test_client.post(f"{CARTS}/{cart_id}/checkout", json={"payment_method": "especes"})
    assert response.status_code == 201
    data = response.json()
    sale = data["sale"]
    assert sale["invoice_number"].startswith("FAC-")
    assert float(sale["total"]) == 105000
    assert sale["status"] == "validee"
    assert "TOTAL: 105 000" in data["receipt"]

    cart = (await test_client.get(f"{CARTS}/{cart_id}")).json()
    assert cart["lines"] == []
    stock = (await test_client.get("/api/v1/catalog/articles/art1")).json()["variants"][0]["stock"]
    assert stock == 5

async def test_checkout_empty_cart(test_client: AsyncClient):
    cart_id = await _cart_with(test_client)
    response = await test_client.post(f"{CARTS}/{cart_id}/checkout", json={"payment_method": "carte"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Le panier est vide."

async def test_checkout_boutique_requires_customer(test_client: AsyncClient):
    cart_id = await _cart_with(test_client, {"article_id": "art7"})
    payload = {"payment_method": "mobile_money", "channel": "boutique", "customer": {"last_name": "Koné"}}
    response = await test_client.post(f"{CARTS}/{cart_id}/checkout", json=payload)
    assert response.status_code == 400
    payload["customer"].update({"email": "awa@email.com", "phone": "0102030405"})
    response = await test_client.post(f"{CARTS}/{cart_id}/checkout", json=payload)
    assert response.status_code == 201
    assert response.json()["sale"]["invoice_number"].startswith("CMD")

async def test_checkout_with_discount(test_client: AsyncClient):
    cart_id = await _cart_with(test_client, {"article_id": "art8", "quantity": 2})
    response = await test_client.post(
        f"{CARTS}/{cart_id}/checkout", json={"payment_method": "cheque", "discount_percent": "10"}
    )
    assert response.status_code == 201
    sale = response.json()["sale"]
    assert float(sale["discount"]) == 2400
    assert float(sale["total"]) == 21600

async def test_checkout_rejects_two_discounts(test_client: AsyncClient):
    cart_id = await _cart_with(test_client, {"article_id": "art8"})
    payload = {"payment_method": "cheque", "discount_percent": "10", "discount_amount": "1000"}
    response = await test_client.post(f"{CARTS}/{cart_id}/checkout", json=payload)
    assert response.status_code == 422

async def test_checkout_unknown_payment_method(test_client: AsyncClient):
    cart_id = await _cart_with(test_client, {"article_id": "art8"})
    response = await test_client.post(f"{CARTS}/{cart_id}/checkout", json={"payment_method": "bitcoin"})
    assert response.status_code == 422

async def test_list_get_and_statistics(test_client: AsyncClient):
    for article in ("art7", "art8"):
        cart_id = await _cart_with(test_client, {"article_id": article})
        await test_client.post(f"{CARTS}/{cart_id}/checkout", json={"payment_method": "especes"})

    response = await test_client.get(f"{SALES}/", params={"limit": 1})
    assert response.status_code == 200
    assert len(response.json()) == 1
    assert response.headers["Content-Range"] == "sales 0-0/2"

    sales = (await test_client.get(f"{SALES}/")).json()
    numbers = {s["invoice_number"] for s in sales}
    assert len(numbers) == 2

    number = sales[0]["invoice_number"]
    assert (await test_client.get(f"{SALES}/{number}")).json()["invoice_number"] == number
    assert (await test_client.get(f"{SALES}/FAC-1999-999")).status_code == 404

    stats = (await test_client.get(f"{SALES}/statistics")).json()
    assert stats["sale_count"] == 2
    assert float(stats["revenue"]) == 44000
    assert float(stats["average_basket"]) == 22000

async def test_text_and_pdf_receipts(test_client_with_mock_pdf: AsyncClient):
    client = test_client_with_mock_pdf
    cart_id = await _cart_with(client, {"article_id": "art7"})
    number = (await client.post(f"{CARTS}/{cart_id}/checkout", json={"payment_method": "carte"})).json()["sale"]["invoice_number"]

    response = await client.get(f"{SALES}/{number}/receipt")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert f"Facture N°: {number}" in response.text

    response = await client.get(f"{SALES}/{number}/receipt.pdf")
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content == f"%PDF-mock {number}".encode("utf-8")

    assert (await client.get(f"{SALES}/FAC-1999-999/receipt.pdf")).status_code == 404

async def test_checkout_on_sql_backend(sql_test_client: AsyncClient):
    cart_id = await _cart_with(sql_test_client, {"article_id": "art1", "variant_id": "d2", "quantity": 2})
    response = await sql_test_client.post(f"{CARTS}/{cart_id}/checkout", json={"payment_method": "especes"})
    assert response.status_code == 201
    number = response.json()["sale"]["invoice_number"]

    sale = (await sql_test_client.get(f"{SALES}/{number}")).json()
    assert float(sale["total"]) == 70000
    article = (await sql_test_client.get("/api/v1/catalog/articles/art1")).json()
    assert article["variants"][1]["stock"] == 3

async def test_checkout_invoice_number_conflict_returns_409(test_client: AsyncClient, sale_repo, mocker):
    first = await _cart_with(test_client, {"article_id": "art8"})
    assert (await test_client.post(f"{CARTS}/{first}/checkout", json={"payment_method": "carte"})).status_code == 201

    second = await _cart_with(test_client, {"article_id": "art1", "variant_id": "d1", "quantity": 2})
    mocker.patch.object(sale_repo, "next_invoice_sequence", return_value=1)
    response = await test_client.post(f"{CARTS}/{second}/checkout", json={"payment_method": "especes"})

    assert response.status_code == 409
    assert "relancer" in response.json()["detail"]
    cart = (await test_client.get(f"{CARTS}/{second}")).json()
    assert cart["item_count"] == 2
    stock = (await test_client.get("/api/v1/catalog/articles/art1")).json()["variants"][0]["stock"]
    assert stock == 8

async def test_checkout_with_line_discounts(test_client: AsyncClient):
    cart_id = await _cart_with(test_client, {"article_id": "art1", "variant_id": "d1", "quantity": 2}, {"article_id": "art7"})
    lines = (await test_client.get(f"{CARTS}/{cart_id}")).json()["lines"]
    kaftan_line = next(line["id"] for line in lines if line["article_id"] == "art1")

    payload = {"payment_method": "especes", "line_discounts": {kaftan_line: "10"}, "discount_amount": "500"}
    assert (await test_client.post(f"{CARTS}/{cart_id}/checkout", json=payload)).status_code == 422

    del payload["discount_amount"]
    response = await test_client.post(f"{CARTS}/{cart_id}/checkout", json=payload)
    assert response.status_code == 201
    sale = response.json()["sale"]
    assert float(sale["discount"]) == 7000
    assert float(sale["total"]) == 95000
