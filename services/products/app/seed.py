"""
Populate an empty catalog with a starter set of LaRama products.

Run with ``python -m app.seed`` from ``services/products``.
"""
import logging
from decimal import Decimal

from . import crud, schemas, service
from .database import SessionLocal, init_db

logger = logging.getLogger(__name__)

STARTER_PRODUCTS = [
    {
        "name": "Noiré",
        "description": "Black beaded purse with golden details.",
        "price": Decimal("45.00"),
        "image_url": "/images/purses/black-hq.jpg",
        "category": "Purses",
        "stock_quantity": 12,
    },
    {
        "name": "Aurora",
        "description": "Pastel pearl purse.",
        "price": Decimal("30.00"),
        "image_url": "/images/purses/fa5ame.jpg",
        "category": "Purses",
        "stock_quantity": 18,
    },
    {
        "name": "Lumière",
        "description": "Crimson crystal evening purse.",
        "price": Decimal("60.00"),
        "image_url": "/images/purses/red.jpg",
        "category": "Purses",
        "stock_quantity": 8,
    },
    {
        "name": "Bead Necklace",
        "description": "Handcrafted beaded necklace.",
        "price": Decimal("45.99"),
        "category": "Necklaces",
    },
]


def seed(db) -> int:
    """
    Insert ``STARTER_PRODUCTS`` unless the table already has rows.

    Returns:
        Number of products created
    """
    if crud.count_products(db) > 0:
        logger.info("Products table is not empty, skipping seed")
        return 0
    for item in STARTER_PRODUCTS:
        service.create_product(db, schemas.ProductCreate(**item))
    return len(STARTER_PRODUCTS)


def main():
    logging.basicConfig(level=logging.INFO)
    init_db()
    db = SessionLocal()
    try:
        created = seed(db)
        logger.info(f"Seeded {created} products")
    finally:
        db.close()


if __name__ == "__main__":
    main()
