import pytest
from httpx import AsyncClient

# Mark all tests in this module to use pytest-asyncio
pytestmark = pytest.mark.asyncio

API = "/api/v1/catalog"


async def test_list_articles(test_client: AsyncClient):
    response = await test_client.get(f"{API}/articles")
    assert response.status_code == 200
    data = response.json()
    assert len(data) == 8
    assert data[0]["id"] == "art1"
    assert data[0]["variants"][0]["sku"] == "KAF-M-RED-001"

async def test_get_article_not_found(test_client: AsyncClient):
    response = await test_client.get(f"{API}/articles/inconnu")
    assert response.status_code == 404

async def test_available_variants(test_client: AsyncClient):
    response = await test_client.get(f"{API}/articles/art1/variants/available")
    assert response.status_code == 200
    assert [v["id"] for v in response.json()] == ["d1", "d2"]

async def test_lookup_variant_barcode(test_client: AsyncClient):
    response = await test_client.get(f"{API}/barcodes/1234567890124")
    assert response.status_code == 200
    data = response.json()
    assert data["variant"]["id"] == "d2"
    assert data["requires_variant_selection"] is False
    assert float(data["unit_price"]) == 35000

async def test_lookup_article_barcode_requires_selection(test_client: AsyncClient):
    response = await test_client.get(f"{API}/barcodes/KAF001")
    assert response.status_code == 200
    data = response.json()
    assert data["variant"] is None
    assert data["requires_variant_selection"] is True
    assert [v["id"] for v in data["available_variants"]] == ["d1", "d2"]

async def test_lookup_unknown_barcode(test_client: AsyncClient):
    response = await test_client.get(f"{API}/barcodes/000")
    assert response.status_code == 404

async def test_search_and_reference_data(test_client: AsyncClient):
    response = await test_client.get(f"{API}/search", params={"q": "robe"})
    assert [a["id"] for a in response.json()] == ["art3"]
    assert len((await test_client.get(f"{API}/sizes")).json()) == 6
    assert len((await test_client.get(f"{API}/colors")).json()) == 8
    customers = (await test_client.get(f"{API}/customers")).json()
    assert customers[0]["last_name"] == "Kouassi"
    assert (await test_client.get(f"{API}/low-stock")).json() == []

async def test_suggest_sku_for_new_variant(test_client: AsyncClient):
    response = await test_client.get(f"{API}/articles/art1/sku", params={"size_id": "t5", "color_id": "c5"})
    assert response.status_code == 200
    assert response.json()["sku"] == "KAF-XL-NOI-001"
    response = await test_client.get(f"{API}/articles/art1/sku", params={"color_id": "c99"})
    assert response.status_code == 404
