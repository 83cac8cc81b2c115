"""
ERP order shape normalization.

The ERP exposes orders through more than one integration path (OData
expansion, direct RPC) and the field names differ between them. Each
logical field is resolved with a first-match extractor list, so the
priority order below is the single place that decides which key wins.
"""
import math
from typing import Any, Dict, List, Mapping, Optional, Union

from app.erp.extractors import FirstMatch, is_scalar, key, nested
from app.erp.status import normalize_status
from app.schemas.order import CanonicalOrder, CanonicalOrderItem


ORDER_ID = FirstMatch(
    key("ID"),
    key("id"),
    key("orderID"),
    key("orderId"),
    key("order_id"),
    key("OrderID"),
)

ORDER_CREATED_AT = FirstMatch(
    key("createdAt"),
    key("created_at"),
    key("orderDate"),
    key("order_date"),
    key("date"),
    key("modifiedAt"),
)

# Flat status values win over structured ones
ORDER_STATUS = FirstMatch(
    key("status", accept=is_scalar),
    key("statusCode", accept=is_scalar),
    key("status_code", accept=is_scalar),
    key("status_ID", accept=is_scalar),
    key("status"),
    key("statusCode"),
    key("state"),
)

ORDER_TOTAL = FirstMatch(
    key("total"),
    key("totalPrice"),
    key("total_price"),
    key("totalAmount"),
    key("grossAmount"),
    key("netAmount"),
    default=0,
)

ORDER_ITEMS = FirstMatch(
    key("items", accept=lambda v: isinstance(v, list)),
    key("Items", accept=lambda v: isinstance(v, list)),
    key("orderItems", accept=lambda v: isinstance(v, list)),
    key("lines", accept=lambda v: isinstance(v, list)),
    default=[],
)

PRODUCT_RECORD_NAME = FirstMatch(
    key("name"),
    key("productName"),
    key("title"),
    key("productID"),
)

ITEM_PRODUCT_REF = FirstMatch(
    key("product_ID", accept=is_scalar),
    key("productID", accept=is_scalar),
    key("productId", accept=is_scalar),
    key("product_id", accept=is_scalar),
    key("product", accept=is_scalar),
    nested("product", FirstMatch(key("ID"), key("id"), key("productID"))),
)

ITEM_NAME = FirstMatch(
    nested("product", PRODUCT_RECORD_NAME),
    key("productName"),
    key("product_name"),
    key("name"),
    key("title"),
)

ITEM_QUANTITY = FirstMatch(
    key("quantity"),
    key("qty"),
    key("amount"),
    default=0,
)

ITEM_PRICE = FirstMatch(
    key("price"),
    key("unitPrice"),
    key("unit_price"),
    key("netPrice"),
    nested("product", FirstMatch(key("price"))),
    default=0,
)


def _to_float(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _to_int(value: Any) -> int:
    return int(_to_float(value))


def _to_ref(value: Any) -> Optional[Union[int, str]]:
    """Identifiers stay int or str; anything else is stringified."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return str(value)


def placeholder_product_name(product_ref: Any) -> str:
    if product_ref is None or product_ref == "":
        return "Unknown product"
    return f"Product {product_ref}"


def normalize_order_item(raw: Mapping[str, Any]) -> CanonicalOrderItem:
    if not isinstance(raw, Mapping):
        raw = {}
    product_ref = _to_ref(ITEM_PRODUCT_REF.resolve(raw))
    name = ITEM_NAME.resolve(raw)
    return CanonicalOrderItem(
        product_id=product_ref,
        name=str(name) if name is not None else placeholder_product_name(product_ref),
        quantity=_to_int(ITEM_QUANTITY.resolve(raw)),
        price=_to_float(ITEM_PRICE.resolve(raw)),
    )


def normalize_order(raw: Mapping[str, Any]) -> CanonicalOrder:
    if not isinstance(raw, Mapping):
        raw = {}
    created_at = ORDER_CREATED_AT.resolve(raw)
    return CanonicalOrder(
        id=_to_ref(ORDER_ID.resolve(raw)),
        created_at=str(created_at) if created_at is not None else None,
        status=normalize_status(ORDER_STATUS.resolve(raw)),
        total_price=_to_float(ORDER_TOTAL.resolve(raw)),
        items=[normalize_order_item(item) for item in ORDER_ITEMS.resolve(raw)],
    )


def normalize_orders(raw_orders: List[Dict[str, Any]]) -> List[CanonicalOrder]:
    return [normalize_order(raw) for raw in raw_orders or []]
