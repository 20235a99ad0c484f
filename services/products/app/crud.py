"""
CRUD (Create, Read, Update, Delete) operations for the Products service.

This module contains all database operations for the product catalog.
Functions here never decide defaults or raise for missing rows; that is the
service layer's job.
"""
from datetime import timedelta
from typing import Any, Dict, List, Optional
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from . import models
from .config import FEATURED_PRODUCTS_LIMIT

PK_MIN = -2**31
PK_MAX = 2**31 - 1

def get_product(db: Session, product_id) -> Optional[models.Product]:
    """
    Retrieve a single product by ID.

    Args:
        db: Database session
        product_id: ID of the product, as an int or a numeric string

    Returns:
        Product object or None if not found
    """
    try:
        pk = int(product_id)
    except (TypeError, ValueError):
        return None
    # Out of range for the Integer column, so no row can match
    if not PK_MIN <= pk <= PK_MAX:
        return None
    return db.query(models.Product).filter(models.Product.id == pk).first()

def get_products(db: Session, category: Optional[str] = None) -> List[models.Product]:
    """
    Retrieve all products in insertion order.

    Args:
        db: Database session
        category: Only return products whose category equals this value

    Returns:
        List of Product objects
    """
    query = db.query(models.Product)
    if category is not None:
        query = query.filter(models.Product.category == category)
    return query.order_by(models.Product.id).all()

def get_categories(db: Session) -> List[str]:
    """Distinct non-null categories in alphabetical order."""
    rows = (
        db.query(models.Product.category)
        .filter(models.Product.category.isnot(None))
        .distinct()
        .order_by(models.Product.category)
        .all()
    )
    return [category for (category,) in rows]

def get_featured_products(db: Session, limit: int = FEATURED_PRODUCTS_LIMIT) -> List[models.Product]:
    """
    Retrieve the newest active products for storefront showcases.

    Args:
        db: Database session
        limit: Maximum number of products to return

    Returns:
        Active Product objects, newest first
    """
    if limit <= 0:
        return []
    return (
        db.query(models.Product)
        .filter(models.Product.is_active.is_(True))
        .order_by(models.Product.created_at.desc(), models.Product.id.desc())
        .limit(limit)
        .all()
    )

def count_products(db: Session) -> int:
    return db.query(func.count(models.Product.id)).scalar()

def create_product(db: Session, fields: Dict[str, Any]) -> models.Product:
    """
    Create a new product in the database.

    Args:
        db: Database session
        fields: Column values for the new row

    Returns:
        Created Product object with id and timestamps populated
    """
    db_product = models.Product(**fields)
    db.add(db_product)
    _commit(db)
    db.refresh(db_product)
    return db_product

def update_product(db: Session, db_product: models.Product, patch: Dict[str, Any]) -> models.Product:
    """
    Merge ``patch`` into an existing product and save it.

    Args:
        db: Database session
        db_product: Product row to update
        patch: Column values to overwrite; keys not present keep their value

    Returns:
        Updated Product object
    """
    for key, value in patch.items():
        setattr(db_product, key, value)

    # updated_at has to move forward even when two writes share a clock tick
    now = models.utcnow()
    if db_product.updated_at is not None and now <= db_product.updated_at:
        now = db_product.updated_at + timedelta(microseconds=1)
    db_product.updated_at = now

    _commit(db)
    db.refresh(db_product)
    return db_product

def delete_product(db: Session, db_product: models.Product) -> None:
    """
    Delete a product from the database permanently.

    Args:
        db: Database session
        db_product: Product row to delete
    """
    db.delete(db_product)
    _commit(db)

def _commit(db: Session) -> None:
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
