"""
HTTP client for the Products GraphQL API.

Used by the storefront side to browse the catalog and by admin tooling to
manage products. Results are normalized into ``ProductView`` models and can be
collected into a ``ProductsState`` for display.
"""
import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional
import httpx
from pydantic import BaseModel

from ..config import ADMIN_KEY_HEADER, FEATURED_PRODUCTS_LIMIT

logger = logging.getLogger(__name__)

PRODUCTS_GRAPHQL_URL = os.getenv("PRODUCTS_GRAPHQL_URL", "http://products:8000/graphql")
TIMEOUT = 5.0  # seconds

PRODUCT_FIELDS = """
      id
      name
      price
      description
      imageUrl
      category
      stockQuantity
      isActive
      createdAt
      updatedAt
"""

GET_PRODUCTS = f"""
  query GetProducts($category: String) {{
    products(category: $category) {{{PRODUCT_FIELDS}    }}
  }}
"""

GET_PRODUCT = f"""
  query GetProduct($id: ID!) {{
    product(id: $id) {{{PRODUCT_FIELDS}    }}
  }}
"""

GET_FEATURED_PRODUCTS = f"""
  query GetFeaturedProducts($limit: Int) {{
    featuredProducts(limit: $limit) {{{PRODUCT_FIELDS}    }}
  }}
"""

CREATE_PRODUCT = f"""
  mutation CreateProduct($input: CreateProductInput!) {{
    createProduct(input: $input) {{{PRODUCT_FIELDS}    }}
  }}
"""

UPDATE_PRODUCT = f"""
  mutation UpdateProduct($input: UpdateProductInput!) {{
    updateProduct(input: $input) {{{PRODUCT_FIELDS}    }}
  }}
"""

REMOVE_PRODUCT = f"""
  mutation RemoveProduct($id: ID!) {{
    removeProduct(id: $id) {{{PRODUCT_FIELDS}    }}
  }}
"""


class ProductsClientError(Exception):
    """
    Raised when the API answers with GraphQL errors.

    Attributes:
        code: ``extensions.code`` of the first error (e.g. "NOT_FOUND",
            "UNAUTHORIZED", "BAD_USER_INPUT"), or None if absent
        errors: The raw error list from the response
    """

    def __init__(self, errors: List[Dict[str, Any]]):
        self.errors = errors
        first = errors[0] if errors else {}
        self.code = (first.get("extensions") or {}).get("code")
        super().__init__(first.get("message", "GraphQL request failed"))


class ProductView(BaseModel):
    """Product as the storefront displays it."""
    id: str
    name: str
    price: float
    description: Optional[str] = None
    image_url: Optional[str] = None
    category: Optional[str] = None
    stock_quantity: int = 0
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductsState(BaseModel):
    """Catalog list state: ``status`` moves idle -> loading -> succeeded | failed."""
    items: List[ProductView] = []
    status: str = "idle"
    error: Optional[str] = None


def normalize_product(raw: Dict[str, Any]) -> ProductView:
    """
    Convert a GraphQL product payload into a ``ProductView``.

    Args:
        raw: Product object as returned by the API (camelCase keys)

    Returns:
        ProductView with a string id and a float price
    """
    return ProductView(
        id=str(raw["id"]),
        name=raw["name"],
        price=float(raw["price"]),
        description=raw.get("description"),
        image_url=raw.get("imageUrl"),
        category=raw.get("category"),
        stock_quantity=raw.get("stockQuantity") or 0,
        is_active=raw.get("isActive", True),
        created_at=raw.get("createdAt"),
        updated_at=raw.get("updatedAt"),
    )


def _to_graphql_input(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Map snake_case field names onto the API's camelCase input names, dropping None."""
    names = {"image_url": "imageUrl", "stock_quantity": "stockQuantity", "is_active": "isActive"}
    return {names.get(key, key): value for key, value in fields.items() if value is not None}


@asynccontextmanager
async def _client_scope(client: Optional[httpx.AsyncClient]):
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(timeout=TIMEOUT) as owned:
        yield owned


async def execute(
    query: str,
    variables: Optional[Dict[str, Any]] = None,
    admin_key: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
    url: str = PRODUCTS_GRAPHQL_URL,
) -> Dict[str, Any]:
    """
    Send a GraphQL operation and return its ``data``.

    Raises:
        ProductsClientError: If the response contains GraphQL errors
        httpx.HTTPError: If there's a network error or the service is unavailable
    """
    headers = {ADMIN_KEY_HEADER: admin_key} if admin_key else None
    async with _client_scope(client) as http:
        response = await http.post(url, json={"query": query, "variables": variables or {}}, headers=headers)
        response.raise_for_status()
        body = response.json()

    if body.get("errors"):
        logger.error(f"Products API error: {body['errors'][0].get('message')}")
        raise ProductsClientError(body["errors"])
    return body.get("data") or {}


async def fetch_products(category: Optional[str] = None, client: Optional[httpx.AsyncClient] = None, **kwargs) -> List[ProductView]:
    """
    Retrieve all products, optionally limited to one category.

    Returns:
        List of normalized products
    """
    data = await execute(GET_PRODUCTS, {"category": category}, client=client, **kwargs)
    return [normalize_product(p) for p in data.get("products") or []]


async def fetch_product(product_id: str, client: Optional[httpx.AsyncClient] = None, **kwargs) -> Optional[ProductView]:
    """
    Retrieve a single product.

    Returns:
        The product, or None if it does not exist
    """
    data = await execute(GET_PRODUCT, {"id": str(product_id)}, client=client, **kwargs)
    raw = data.get("product")
    return normalize_product(raw) if raw else None


async def fetch_featured_products(limit: int = FEATURED_PRODUCTS_LIMIT, client: Optional[httpx.AsyncClient] = None, **kwargs) -> List[ProductView]:
    """Retrieve the newest active products for the storefront home page."""
    data = await execute(GET_FEATURED_PRODUCTS, {"limit": limit}, client=client, **kwargs)
    return [normalize_product(p) for p in data.get("featuredProducts") or []]


async def create_product(fields: Dict[str, Any], admin_key: str, client: Optional[httpx.AsyncClient] = None, **kwargs) -> ProductView:
    data = await execute(CREATE_PRODUCT, {"input": _to_graphql_input(fields)}, admin_key=admin_key, client=client, **kwargs)
    return normalize_product(data["createProduct"])


async def update_product(product_id: str, fields: Dict[str, Any], admin_key: str, client: Optional[httpx.AsyncClient] = None, **kwargs) -> ProductView:
    """
    Update some fields of a product. Fields that are None are left unchanged.

    Raises:
        ProductsClientError: code "NOT_FOUND" if the product does not exist
    """
    payload = _to_graphql_input(fields)
    payload["id"] = str(product_id)
    data = await execute(UPDATE_PRODUCT, {"input": payload}, admin_key=admin_key, client=client, **kwargs)
    return normalize_product(data["updateProduct"])


async def remove_product(product_id: str, admin_key: str, client: Optional[httpx.AsyncClient] = None, **kwargs) -> ProductView:
    """
    Delete a product.

    Returns:
        The product as it was just before deletion
    """
    data = await execute(REMOVE_PRODUCT, {"id": str(product_id)}, admin_key=admin_key, client=client, **kwargs)
    return normalize_product(data["removeProduct"])


async def load_products(state: ProductsState, category: Optional[str] = None, client: Optional[httpx.AsyncClient] = None, **kwargs) -> ProductsState:
    """
    Refresh ``state`` from the API, recording the outcome in ``status``/``error``.

    Errors are stored on the state instead of raised, so the caller can render
    them.
    """
    state.status = "loading"
    state.error = None
    try:
        state.items = await fetch_products(category=category, client=client, **kwargs)
    except (ProductsClientError, httpx.HTTPError) as e:
        state.status = "failed"
        state.error = str(e)
        return state
    state.status = "succeeded"
    return state
