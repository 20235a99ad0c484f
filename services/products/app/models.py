"""
SQLAlchemy ORM models for the Products service.

Defines the database schema for the product catalog.
"""
from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Text, Numeric, Boolean, DateTime
from .config import DEFAULT_STOCK_QUANTITY, NAME_MAX_LENGTH, IMAGE_URL_MAX_LENGTH, CATEGORY_MAX_LENGTH
from .database import Base


def utcnow() -> datetime:
    """Naive UTC timestamp, the form stored in the DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Product(Base):
    """
    Product model representing an item in the storefront catalog.

    Attributes:
        id (int): Primary key, auto-incremented product ID
        name (str): Display name
        description (str): Optional long description
        price (Decimal): Unit price with two fractional digits
        image_url (str): Optional image location
        category (str): Optional free-form category label
        stock_quantity (int): Units available
        is_active (bool): Whether the product is shown in the storefront
        created_at (datetime): Timestamp when the product was created
        updated_at (datetime): Timestamp of the last successful write
    """
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(NAME_MAX_LENGTH), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(12, 2), nullable=False)
    image_url = Column(String(IMAGE_URL_MAX_LENGTH), nullable=True)
    category = Column(String(CATEGORY_MAX_LENGTH), nullable=True, index=True)
    stock_quantity = Column(Integer, nullable=False, default=DEFAULT_STOCK_QUANTITY)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow)
