"""
Order Reconciliation Service

Mediates between the local store and the ERP for orders. The ERP is the
source of truth for stock, pricing and order existence; the local
database only supplies display data for enrichment and a degraded-mode
order history when the ERP cannot be reached.

Order creation runs as one synchronous flow, terminal on the first hard
failure:
    validate -> enrich (local) -> verify stock (ERP) -> submit (ERP)
"""
import logging
from collections import OrderedDict
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    EntityNotFoundException,
    InsufficientStockException,
    InvalidArgumentException,
    UpstreamErrorException,
    UpstreamUnavailableException,
)
from app.erp.gateway import ErpGateway
from app.erp.normalizer import normalize_orders, placeholder_product_name
from app.models.customer import Customer
from app.repositories.customer_repository import CustomerRepository
from app.repositories.product_repository import ProductRepository
from app.schemas.order import (
    CustomerOrdersResult,
    EnrichedOrderItem,
    OrderCreateRequest,
    OrderCreateResponse,
    OrderItemRequest,
    StockShortfall,
)
from app.services.order_service import OrderService

logger = logging.getLogger(__name__)

ERP_FAILURES = (UpstreamUnavailableException, UpstreamErrorException)


class OrderReconciliationService:

    def __init__(self, db: Session, gateway: ErpGateway):
        self._db = db
        self._gateway = gateway
        self._product_repo = ProductRepository(db)
        self._customer_repo = CustomerRepository(db)
        self._local_orders = OrderService(db)

    # ── Order creation ───────────────────────────────────────────────────────

    def create_order(self, body: OrderCreateRequest) -> OrderCreateResponse:
        if not body.customer or not body.items:
            raise InvalidArgumentException("customer and a non-empty items list are required")
        for index, item in enumerate(body.items):
            if item.quantity is None or item.quantity < 1:
                raise InvalidArgumentException(f"items[{index}].quantity must be a positive integer")

        enriched = [self._enrich_item(item) for item in body.items]
        self._verify_stock(enriched)

        payload = {
            "customer": body.customer,
            "items": [item.model_dump() for item in enriched],
            "total": self.order_total(enriched),
        }
        try:
            confirmation = self._gateway.create_purchase_order(payload)
        except UpstreamUnavailableException as exc:
            logger.error("purchase_order_unconfirmed reason=unreachable error=%s", exc.message)
            raise UpstreamUnavailableException(
                "ERP unreachable while submitting the order; the order was not confirmed",
                details=exc.message,
            ) from exc
        except UpstreamErrorException as exc:
            logger.error("purchase_order_unconfirmed reason=rejected error=%s", exc.message)
            raise

        logger.info(
            "purchase_order_submitted items=%s total=%s customer_email=%s",
            len(enriched),
            payload["total"],
            body.customer.get("email"),
        )
        return OrderCreateResponse(success=True, erp=confirmation)

    def _enrich_item(self, item: OrderItemRequest) -> EnrichedOrderItem:
        """Resolve display name and unit price locally; never fatal to the order."""
        name = None
        price = Decimal("0")
        if item.product_id is not None:
            try:
                product = self._product_repo.get_by_id(item.product_id)
            except SQLAlchemyError as exc:
                self._db.rollback()
                logger.warning("enrichment_lookup_failed product_id=%s error=%s", item.product_id, exc)
                product = None
            if product is not None:
                name = product.name
                price = Decimal(str(product.price or 0))

        if not name:
            name = item.productName or placeholder_product_name(item.product_id)

        return EnrichedOrderItem(
            productId=item.product_id,
            productName=name,
            quantity=item.quantity,
            price=float(price),
        )

    def _verify_stock(self, items: List[EnrichedOrderItem]) -> None:
        requested: "OrderedDict[str, int]" = OrderedDict()
        for item in items:
            requested[item.productName] = requested.get(item.productName, 0) + item.quantity

        try:
            stocks = self._gateway.get_stocks(list(requested.keys()))
        except ERP_FAILURES as exc:
            logger.error("stock_check_failed error=%s", exc.message)
            raise UpstreamUnavailableException(
                "ERP unreachable during stock check; order not submitted",
                details=exc.message,
            ) from exc

        shortfalls = [
            StockShortfall(productName=name, requested=qty, available=stocks.get(name, 0)).model_dump()
            for name, qty in requested.items()
            if qty > stocks.get(name, 0)
        ]
        if shortfalls:
            logger.info("stock_check_rejected shortfalls=%s", shortfalls)
            raise InsufficientStockException(shortfalls)

    @staticmethod
    def order_total(items: List[EnrichedOrderItem]) -> float:
        total = sum((Decimal(str(i.price)) * i.quantity for i in items), Decimal("0"))
        return float(total.quantize(Decimal("0.01")))

    # ── Order retrieval ──────────────────────────────────────────────────────

    def get_customer_orders(self, customer_id: int) -> CustomerOrdersResult:
        customer = self._customer_repo.get_by_id(customer_id)
        if not customer:
            raise EntityNotFoundException("Customer", customer_id)

        try:
            raw_orders = self._lookup_erp_orders(customer)
        except ERP_FAILURES as exc:
            logger.warning(
                "erp_orders_degraded customer_id=%s error=%s; serving local history",
                customer_id,
                exc.message,
            )
            return CustomerOrdersResult(
                orders=self._local_orders.list_local_orders(customer.id),
                erp_unreachable=True,
            )

        return CustomerOrdersResult(orders=normalize_orders(raw_orders))

    def _lookup_erp_orders(self, customer: Customer) -> List[Dict[str, Any]]:
        """Progressively looser ERP lookups; stops at the first non-empty result."""
        email = (customer.email or "").strip()
        name = (customer.name or "").strip()
        orders: List[Dict[str, Any]] = []

        if email:
            orders = self._gateway.get_orders_by_customer_email(email)
            if not orders and email != email.lower():
                logger.info("erp_orders_retry variant=lowercase_email customer_id=%s", customer.id)
                orders = self._gateway.get_orders_by_customer_email(email.lower())

        if not orders and name:
            logger.info("erp_orders_retry variant=name_exact customer_id=%s", customer.id)
            orders = self._gateway.get_orders_by_customer_name(name)
            if not orders:
                logger.info("erp_orders_retry variant=name_contains customer_id=%s", customer.id)
                orders = self._gateway.get_orders_by_customer_name_contains(name)

        return orders
