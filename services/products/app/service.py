"""
Business rules for the product catalog.

Sits between the GraphQL resolvers and ``crud``: applies create defaults,
merges partial updates onto the stored row and turns a missing row on a
mutation into ``ProductNotFoundError``. Reads never raise for a miss.
"""
import logging
from typing import List, Optional
from sqlalchemy.orm import Session

from . import crud, models, schemas
from .config import DEFAULT_STOCK_QUANTITY, FEATURED_PRODUCTS_LIMIT
from .exceptions import ProductNotFoundError

logger = logging.getLogger(__name__)

# Fields an update may leave out; each one falls back to the stored value
MERGEABLE_FIELDS = (
    "name",
    "description",
    "price",
    "image_url",
    "category",
    "stock_quantity",
    "is_active",
)


def list_products(db: Session, category: Optional[str] = None) -> List[models.Product]:
    return crud.get_products(db, category=category)


def list_categories(db: Session) -> List[str]:
    return crud.get_categories(db)


def list_featured_products(db: Session, limit: int = FEATURED_PRODUCTS_LIMIT) -> List[models.Product]:
    return crud.get_featured_products(db, limit=limit)


def get_product(db: Session, product_id) -> Optional[models.Product]:
    """Return the product or None. A miss is not an error on reads."""
    return crud.get_product(db, product_id)


def create_product(db: Session, data: schemas.ProductCreate) -> models.Product:
    """
    Create a product, filling in defaults for omitted optional fields.

    Args:
        db: Database session
        data: Validated create input

    Returns:
        The persisted Product
    """
    fields = {
        "name": data.name,
        "price": data.price,
        "description": data.description,
        "image_url": data.image_url,
        "category": data.category,
        "stock_quantity": (
            data.stock_quantity if data.stock_quantity is not None else DEFAULT_STOCK_QUANTITY
        ),
        "is_active": data.is_active if data.is_active is not None else True,
    }
    db_product = crud.create_product(db, fields)
    logger.info(f"Created product {db_product.id} ({db_product.name!r})")
    return db_product


def update_product(db: Session, product_id, data: schemas.ProductUpdate) -> models.Product:
    """
    Apply a partial update to an existing product.

    Fields left as None in ``data`` keep their stored value; None never
    clears a column.

    Args:
        db: Database session
        product_id: ID of the product to update
        data: Validated update input

    Returns:
        The updated Product

    Raises:
        ProductNotFoundError: If no product has this ID
    """
    existing = crud.get_product(db, product_id)
    if existing is None:
        raise ProductNotFoundError(product_id)

    patch = {}
    for field in MERGEABLE_FIELDS:
        value = getattr(data, field)
        patch[field] = value if value is not None else getattr(existing, field)

    db_product = crud.update_product(db, existing, patch)
    logger.info(f"Updated product {db_product.id}")
    return db_product


def remove_product(db: Session, product_id) -> schemas.Product:
    """
    Delete a product and return it as it was just before deletion.

    Raises:
        ProductNotFoundError: If no product has this ID
    """
    existing = crud.get_product(db, product_id)
    if existing is None:
        raise ProductNotFoundError(product_id)

    snapshot = schemas.Product.model_validate(existing)
    crud.delete_product(db, existing)
    logger.info(f"Removed product {snapshot.id}")
    return snapshot
