"""
GraphQL schema for the Products service.

Exposes the catalog reads (``products``, ``product``, ``categories``,
``featuredProducts``) and the admin mutations (``createProduct``,
``updateProduct``, ``removeProduct``).
Mutations carry the ``IsAdmin`` permission; reads are public. Database work
runs in the threadpool so resolvers never block the event loop.
"""
from datetime import datetime
from typing import List, Optional
import strawberry
from graphql import GraphQLError
from pydantic import ValidationError
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session
from strawberry.types import Info

from . import schemas, service
from .auth import IsAdmin
from .config import FEATURED_PRODUCTS_LIMIT
from .exceptions import ProductsError, ValidationFailure


@strawberry.type(name="Product")
class ProductType:
    id: strawberry.ID
    name: str
    description: Optional[str]
    price: float
    image_url: Optional[str]
    category: Optional[str]
    stock_quantity: int
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row) -> "ProductType":
        """Build from an ORM row or a ``schemas.Product`` snapshot."""
        return cls(
            id=strawberry.ID(str(row.id)),
            name=row.name,
            description=row.description,
            price=float(row.price),
            image_url=row.image_url,
            category=row.category,
            stock_quantity=row.stock_quantity,
            is_active=row.is_active,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )


@strawberry.input
class CreateProductInput:
    name: str
    price: float
    description: Optional[str] = None
    image_url: Optional[str] = None
    category: Optional[str] = None
    stock_quantity: Optional[int] = None
    is_active: Optional[bool] = None


@strawberry.input
class UpdateProductInput:
    id: strawberry.ID
    name: Optional[str] = None
    price: Optional[float] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    category: Optional[str] = None
    stock_quantity: Optional[int] = None
    is_active: Optional[bool] = None


def _db(info: Info) -> Session:
    return info.context["db"]


def _graphql_error(exc: ProductsError) -> GraphQLError:
    return GraphQLError(str(exc), original_error=exc, extensions=exc.extensions)


def _validate(schema_cls, data: dict):
    try:
        return schema_cls(**data)
    except ValidationError as exc:
        raise _graphql_error(ValidationFailure.from_pydantic(exc))


def _rows(rows) -> List[ProductType]:
    return [ProductType.from_row(row) for row in rows]


def _row_or_none(row) -> Optional[ProductType]:
    return ProductType.from_row(row) if row is not None else None


@strawberry.type
class Query:
    @strawberry.field(description="All products in insertion order, optionally limited to one category.")
    async def products(self, info: Info, category: Optional[str] = None) -> List[ProductType]:
        rows = await run_in_threadpool(service.list_products, _db(info), category=category)
        return _rows(rows)

    @strawberry.field(description="A single product, or null when it does not exist.")
    async def product(self, info: Info, id: strawberry.ID) -> Optional[ProductType]:
        return _row_or_none(await run_in_threadpool(service.get_product, _db(info), id))

    @strawberry.field(description="Distinct product categories.")
    async def categories(self, info: Info) -> List[str]:
        return await run_in_threadpool(service.list_categories, _db(info))

    @strawberry.field(description="Newest active products, for storefront showcases.")
    async def featured_products(self, info: Info, limit: int = FEATURED_PRODUCTS_LIMIT) -> List[ProductType]:
        rows = await run_in_threadpool(service.list_featured_products, _db(info), limit=limit)
        return _rows(rows)


@strawberry.type
class Mutation:
    @strawberry.mutation(permission_classes=[IsAdmin])
    async def create_product(self, info: Info, input: CreateProductInput) -> ProductType:
        data = _validate(schemas.ProductCreate, strawberry.asdict(input))
        return ProductType.from_row(await run_in_threadpool(service.create_product, _db(info), data))

    @strawberry.mutation(permission_classes=[IsAdmin])
    async def update_product(self, info: Info, input: UpdateProductInput) -> ProductType:
        fields = strawberry.asdict(input)
        product_id = fields.pop("id")
        data = _validate(schemas.ProductUpdate, fields)
        try:
            row = await run_in_threadpool(service.update_product, _db(info), product_id, data)
        except ProductsError as exc:
            raise _graphql_error(exc)
        return ProductType.from_row(row)

    @strawberry.mutation(permission_classes=[IsAdmin])
    async def remove_product(self, info: Info, id: strawberry.ID) -> ProductType:
        try:
            snapshot = await run_in_threadpool(service.remove_product, _db(info), id)
        except ProductsError as exc:
            raise _graphql_error(exc)
        return ProductType.from_row(snapshot)


schema = strawberry.Schema(query=Query, mutation=Mutation)
