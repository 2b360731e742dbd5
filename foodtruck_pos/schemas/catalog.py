from pydantic import Field
from datetime import datetime
from typing import Optional

from foodtruck_pos.schemas.common import CamelModel


class CategoryBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=255, description="Category name")


class CategoryCreate(CategoryBase):
    """Schema for creating a new category."""
    pass


class CategoryUpdate(CategoryBase):
    """Schema for renaming a category."""
    pass


class CategoryResponse(CategoryBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductBase(CamelModel):
    """Base schema for Product with common attributes."""
    name: str = Field(..., min_length=1, max_length=255, description="Product name")
    price: float = Field(..., ge=0, allow_inf_nan=False, description="Unit price (must be non-negative)")
    category_id: Optional[int] = Field(None, description="Category the product belongs to")
    category_name: str = Field(default="", max_length=255, description="Category name copy")
    stock: int = Field(default=0, ge=0, description="Available stock")
    min_stock: int = Field(default=0, ge=0, description="Low-stock alert threshold")
    description: str = Field(default="", description="Free text description")


class ProductCreate(ProductBase):
    """Schema for creating a new product."""
    pass


class ProductUpdate(CamelModel):
    """Schema for updating an existing product. All fields are optional."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    price: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    category_id: Optional[int] = None
    category_name: Optional[str] = Field(None, max_length=255)
    stock: Optional[int] = Field(None, ge=0)
    min_stock: Optional[int] = Field(None, ge=0)
    description: Optional[str] = None


class ProductResponse(ProductBase):
    """Schema for product response including all fields."""
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PosCategory(CamelModel):
    """A category with the products listed under it, for the POS screen."""
    id: int
    name: str
    products: list[ProductResponse]
