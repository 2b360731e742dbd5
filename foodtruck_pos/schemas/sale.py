from pydantic import Field
from datetime import datetime
from typing import Any

from foodtruck_pos.models.sale import PaymentMethod
from foodtruck_pos.schemas.common import CamelModel


class SaleItem(CamelModel):
    """A cart line: which product, how many, and the price the seller saw."""
    product_id: int = Field(..., description="ID of the product sold")
    name: str = Field(default="", description="Product name as shown in the cart")
    price: float = Field(default=0.0, ge=0, allow_inf_nan=False, description="Unit price at sale time")
    quantity: int = Field(..., ge=1, description="Units sold")


class SaleCreate(CamelModel):
    """Schema for recording a sale from the POS cart."""
    items: list[SaleItem] = Field(..., min_length=1, description="Cart lines, in order")
    total: float = Field(..., ge=0, allow_inf_nan=False, description="Total declared by the client")
    payment_method: PaymentMethod = Field(..., description="cash, card or transfer")


class SaleResponse(CamelModel):
    """Schema for a recorded sale."""
    id: int
    items: list[dict[str, Any]]
    total: float
    payment_method: PaymentMethod
    timestamp: datetime
    seller_id: int
    seller_name: str


class InsertResult(CamelModel):
    inserted_id: int
    acknowledged: bool = True


class SaleResult(CamelModel):
    """Outcome of POST /sales: the inserted record id plus low-stock alerts."""
    result: InsertResult
    alerts: list[str]
