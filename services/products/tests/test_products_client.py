import asyncio

import httpx
import pytest

from app.clients import products_client
from app.clients.products_client import ProductsClientError, ProductsState
from app.main import app

URL = "http://test/graphql"
ADMIN_KEY = "test-admin-key"


def _asgi_client():
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")


def test_normalize_product():
    view = products_client.normalize_product({
        "id": 7,
        "name": "Aurora",
        "price": "30.00",
        "imageUrl": "/images/purses/fa5ame.jpg",
        "category": "Purses",
        "stockQuantity": 18,
        "isActive": False,
    })
    assert view.id == "7"
    assert view.price == 30.0
    assert view.image_url == "/images/purses/fa5ame.jpg"
    assert view.stock_quantity == 18
    assert view.is_active is False
    assert view.description is None


def test_crud_through_client():
    async def scenario():
        async with _asgi_client() as client:
            created = await products_client.create_product(
                {"name": "Bead Necklace", "price": 45.99, "category": "Necklaces"},
                admin_key=ADMIN_KEY, client=client, url=URL,
            )
            updated = await products_client.update_product(
                created.id, {"stock_quantity": 10, "name": None},
                admin_key=ADMIN_KEY, client=client, url=URL,
            )
            listed = await products_client.fetch_products(category="Necklaces", client=client, url=URL)
            removed = await products_client.remove_product(created.id, admin_key=ADMIN_KEY, client=client, url=URL)
            missing = await products_client.fetch_product(created.id, client=client, url=URL)
            return created, updated, listed, removed, missing

    created, updated, listed, removed, missing = asyncio.run(scenario())

    assert created.price == 45.99
    assert updated.stock_quantity == 10
    assert updated.name == "Bead Necklace"
    assert [p.id for p in listed] == [created.id]
    assert removed.stock_quantity == 10
    assert missing is None


def test_client_error_codes():
    async def scenario():
        async with _asgi_client() as client:
            with pytest.raises(ProductsClientError) as unauthorized:
                await products_client.create_product({"name": "A", "price": 1.0}, admin_key="wrong", client=client, url=URL)
            with pytest.raises(ProductsClientError) as not_found:
                await products_client.remove_product("999", admin_key=ADMIN_KEY, client=client, url=URL)
            return unauthorized.value, not_found.value

    unauthorized, not_found = asyncio.run(scenario())
    assert unauthorized.code == "UNAUTHORIZED"
    assert not_found.code == "NOT_FOUND"


def test_load_products_success():
    async def scenario():
        async with _asgi_client() as client:
            await products_client.create_product({"name": "Aurora", "price": 30.0}, admin_key=ADMIN_KEY, client=client, url=URL)
            return await products_client.load_products(ProductsState(), client=client, url=URL)

    state = asyncio.run(scenario())
    assert state.status == "succeeded"
    assert state.error is None
    assert [p.name for p in state.items] == ["Aurora"]


def test_load_products_failure_is_recorded():
    def handler(request):
        return httpx.Response(200, json={"data": None, "errors": [{"message": "boom", "extensions": {"code": "INTERNAL"}}]})

    async def scenario():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await products_client.load_products(ProductsState(), client=client, url=URL)

    state = asyncio.run(scenario())
    assert state.status == "failed"
    assert state.error == "boom"
    assert state.items == []


def test_fetch_featured_products():
    async def scenario():
        async with _asgi_client() as client:
            await products_client.create_product({"name": "Aurora", "price": 30.0}, admin_key=ADMIN_KEY, client=client, url=URL)
            await products_client.create_product({"name": "Retired", "price": 10.0, "is_active": False}, admin_key=ADMIN_KEY, client=client, url=URL)
            return await products_client.fetch_featured_products(client=client, url=URL)

    featured = asyncio.run(scenario())
    assert [p.name for p in featured] == ["Aurora"]
