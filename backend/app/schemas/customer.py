from typing import Optional, List

from pydantic import BaseModel, Field

from app.schemas.order import CanonicalOrder


class CustomerRegisterRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=1, max_length=255)
    address: Optional[str] = None


class CustomerLoginRequest(BaseModel):
    email: str
    password: str


class CustomerUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[str] = Field(default=None, min_length=3, max_length=255)
    address: Optional[str] = None


class CustomerResponse(BaseModel):
    id: int
    name: str
    email: str
    address: Optional[str] = None

    class Config:
        from_attributes = True


class CustomerWithOrdersResponse(CustomerResponse):
    orders: List[CanonicalOrder] = []
