from app.schemas.product import ProductCreate, ProductResponse, ProductSyncResponse
from app.schemas.order import (
    CanonicalOrderItem,
    CanonicalOrder,
    CustomerOrdersResult,
    OrderItemRequest,
    OrderCreateRequest,
    EnrichedOrderItem,
    StockShortfall,
    OrderCreateResponse,
    LocalOrderItemRequest,
    LocalOrderCreateRequest,
    OrderStatusUpdateRequest,
)
from app.schemas.customer import (
    CustomerRegisterRequest,
    CustomerLoginRequest,
    CustomerUpdate,
    CustomerResponse,
    CustomerWithOrdersResponse,
)
from app.schemas.erp import ErpStatusResponse
