"""
Order Service: local order store (legacy, non-ERP path)

Local orders are a cache/fallback only: the ERP-backed flow lives in
``order_reconciliation_service``. This service owns the one
multi-statement write in the local store (order + items) and renders
local history into the canonical order shape.
"""
import logging
from decimal import Decimal
from typing import List

from sqlalchemy.orm import Session

from app.core.exceptions import EntityNotFoundException
from app.erp.normalizer import placeholder_product_name
from app.erp.status import normalize_status
from app.models.order import Order, OrderItem
from app.repositories.customer_repository import CustomerRepository
from app.repositories.order_repository import OrderRepository
from app.repositories.product_repository import ProductRepository
from app.schemas.order import (
    CanonicalOrder,
    CanonicalOrderItem,
    LocalOrderCreateRequest,
    OrderStatusUpdateRequest,
)

logger = logging.getLogger(__name__)


class OrderService:
    def __init__(self, db: Session):
        self._db = db
        self._repo = OrderRepository(db)
        self._customer_repo = CustomerRepository(db)
        self._product_repo = ProductRepository(db)

    def create_local_order(self, body: LocalOrderCreateRequest) -> CanonicalOrder:
        """Price items from the local catalog and persist order + items atomically."""
        if not self._customer_repo.get_by_id(body.customer_id):
            raise EntityNotFoundException("Customer", body.customer_id)

        try:
            order = Order(customer_id=body.customer_id, status="pending", total_price=Decimal("0"))
            self._db.add(order)
            total = Decimal("0")
            for item in body.items:
                product = self._product_repo.get_by_id(item.product_id)
                if not product:
                    raise EntityNotFoundException("Product", item.product_id)
                price = Decimal(str(product.price or 0))
                order.items.append(OrderItem(product_id=product.id, quantity=item.quantity, price=price))
                total += price * item.quantity
            order.total_price = total.quantize(Decimal("0.01"))
            self._db.commit()
        except Exception:
            self._db.rollback()
            raise

        self._db.refresh(order)
        logger.info(
            "local_order_created order_id=%s customer_id=%s total=%s",
            order.id,
            order.customer_id,
            order.total_price,
        )
        return self.to_canonical(order)

    def list_local_orders(self, customer_id: int) -> List[CanonicalOrder]:
        return [self.to_canonical(order) for order in self._repo.list_for_customer(customer_id)]

    def update_order_status(self, order_id: int, body: OrderStatusUpdateRequest) -> CanonicalOrder:
        order = self._repo.get_by_id(order_id)
        if not order:
            raise EntityNotFoundException("Order", order_id)
        order = self._repo.update(order, {"status": body.status.value})
        return self.to_canonical(order)

    @staticmethod
    def to_canonical(order: Order) -> CanonicalOrder:
        items = []
        for item in order.items:
            name = item.product.name if item.product is not None else placeholder_product_name(item.product_id)
            items.append(
                CanonicalOrderItem(
                    product_id=item.product_id,
                    name=name,
                    quantity=item.quantity,
                    price=float(item.price or 0),
                )
            )
        return CanonicalOrder(
            id=order.id,
            created_at=order.created_at.isoformat() if order.created_at else None,
            status=normalize_status(order.status),
            total_price=float(order.total_price or 0),
            items=items,
        )
