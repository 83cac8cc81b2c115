from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_erp_gateway
from app.erp.gateway import ErpGateway
from app.schemas.order import (
    CanonicalOrder,
    LocalOrderCreateRequest,
    OrderCreateRequest,
    OrderCreateResponse,
    OrderStatusUpdateRequest,
)
from app.services.order_reconciliation_service import OrderReconciliationService
from app.services.order_service import OrderService


router = APIRouter(prefix="/orders", tags=["Orders"])


def get_reconciliation_service(
    db: Session = Depends(get_db),
    gateway: ErpGateway = Depends(get_erp_gateway),
) -> OrderReconciliationService:
    return OrderReconciliationService(db, gateway)


def get_order_service(db: Session = Depends(get_db)) -> OrderService:
    return OrderService(db)


@router.post("", response_model=OrderCreateResponse, status_code=201)
def create_order(
    body: OrderCreateRequest,
    service: OrderReconciliationService = Depends(get_reconciliation_service),
):
    return service.create_order(body)


@router.post("/local", response_model=CanonicalOrder, status_code=201)
def create_local_order(
    body: LocalOrderCreateRequest,
    service: OrderService = Depends(get_order_service),
):
    return service.create_local_order(body)


@router.get("/customer/{customer_id}")
def get_customer_orders(
    customer_id: int,
    service: OrderReconciliationService = Depends(get_reconciliation_service),
):
    """Canonical order list, or ``{erp_unreachable: true, orders}`` in degraded mode."""
    result = service.get_customer_orders(customer_id)
    if result.erp_unreachable:
        return {"erp_unreachable": True, "orders": [o.model_dump(mode="json") for o in result.orders]}
    return [o.model_dump(mode="json") for o in result.orders]


@router.put("/{order_id}/status", response_model=CanonicalOrder)
def update_order_status(
    order_id: int,
    body: OrderStatusUpdateRequest,
    service: OrderService = Depends(get_order_service),
):
    return service.update_order_status(order_id, body)
