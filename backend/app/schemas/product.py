from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = ""
    price: Decimal = Field(ge=0)
    stock: int = Field(default=0, ge=0)


class ProductResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    price: Decimal
    stock: int

    class Config:
        from_attributes = True


class ProductSyncResponse(BaseModel):
    success: bool
    synced: int
    total: int
    deleted: int = 0
