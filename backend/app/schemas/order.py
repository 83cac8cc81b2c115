from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from app.erp.status import CanonicalStatus


class CanonicalOrderItem(BaseModel):
    product_id: Optional[Union[int, str]] = None
    name: str
    quantity: int = 0
    price: float = 0.0


class CanonicalOrder(BaseModel):
    """Order shape shared by the ERP-normalized path and the local fallback path."""
    id: Optional[Union[int, str]] = None
    created_at: Optional[str] = None
    status: CanonicalStatus = CanonicalStatus.PENDING
    total_price: float = 0.0
    items: List[CanonicalOrderItem] = Field(default_factory=list)


class CustomerOrdersResult(BaseModel):
    orders: List[CanonicalOrder]
    erp_unreachable: bool = False


class OrderItemRequest(BaseModel):
    product_id: Optional[int] = None
    productName: Optional[str] = None
    quantity: int = 1


class OrderCreateRequest(BaseModel):
    # Presence is checked by the service so it can answer with INVALID_ARGUMENT
    customer: Optional[Dict[str, Any]] = None
    items: Optional[List[OrderItemRequest]] = None


class EnrichedOrderItem(BaseModel):
    """Line item as submitted to the ERP; price 0 means "let the ERP price it"."""
    productId: Optional[int] = None
    productName: str
    quantity: int
    price: float = 0.0


class StockShortfall(BaseModel):
    productName: str
    requested: int
    available: int


class OrderCreateResponse(BaseModel):
    success: bool
    erp: Any = None


class LocalOrderItemRequest(BaseModel):
    product_id: int
    quantity: int = Field(ge=1)


class LocalOrderCreateRequest(BaseModel):
    customer_id: int
    items: List[LocalOrderItemRequest] = Field(min_length=1)


class OrderStatusUpdateRequest(BaseModel):
    status: CanonicalStatus
