"""
Pydantic schemas for input validation in the Products service.

The GraphQL layer checks field types; these schemas enforce column limits and
price precision before any database access.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from .config import NAME_MAX_LENGTH, IMAGE_URL_MAX_LENGTH, CATEGORY_MAX_LENGTH


class ProductBase(BaseModel):
    """Base schema with the optional product attributes."""
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, max_length=IMAGE_URL_MAX_LENGTH)
    category: Optional[str] = Field(None, max_length=CATEGORY_MAX_LENGTH)
    stock_quantity: Optional[int] = None
    # None means "not supplied"; the service decides the fallback
    is_active: Optional[bool] = None


class ProductCreate(ProductBase):
    """Schema for creating a new product. ``name`` and ``price`` are required."""
    name: str = Field(max_length=NAME_MAX_LENGTH)
    price: Decimal = Field(max_digits=12, decimal_places=2)


class ProductUpdate(ProductBase):
    """Schema for updating an existing product. All fields are optional."""
    name: Optional[str] = Field(None, max_length=NAME_MAX_LENGTH)
    price: Optional[Decimal] = Field(None, max_digits=12, decimal_places=2)


class Product(BaseModel):
    """
    Full product snapshot, includes all database fields.

    Used to hand back a row after it has been deleted.
    """
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    price: Decimal
    image_url: Optional[str] = None
    category: Optional[str] = None
    stock_quantity: int
    is_active: bool
    created_at: datetime
    updated_at: datetime
