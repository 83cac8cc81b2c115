from app.erp.extractors import FirstMatch, key
from app.erp.normalizer import (
    ORDER_STATUS,
    normalize_order,
    normalize_order_item,
    normalize_orders,
)
from app.erp.status import CanonicalStatus


ODATA_ORDER = {
    "ID": "7f1c-0001",
    "createdAt": "2026-10-01T08:30:00Z",
    "status": 30,
    "total": "91.00",
    "customer": {"email": "jane.doe@example.com", "name": "Jane Doe"},
    "items": [
        {"product_ID": "P-1", "quantity": 2, "price": "45.50", "product": {"ID": "P-1", "name": "Chair"}},
    ],
}


def test_odata_expanded_order_is_normalized():
    order = normalize_order(ODATA_ORDER)

    assert order.id == "7f1c-0001"
    assert order.created_at == "2026-10-01T08:30:00Z"
    assert order.status == CanonicalStatus.SHIPPED
    assert order.total_price == 91.0
    assert len(order.items) == 1
    assert order.items[0].name == "Chair"
    assert order.items[0].quantity == 2
    assert order.items[0].price == 45.5
    assert order.items[0].product_id == "P-1"


def test_rpc_shaped_order_uses_alternate_field_names():
    order = normalize_order(
        {
            "orderId": 55,
            "orderDate": "2026-09-30",
            "statusCode": "picked",
            "totalAmount": 12.5,
            "orderItems": [{"productName": "Lamp", "qty": 1, "unitPrice": 12.5}],
        }
    )

    assert order.id == 55
    assert order.created_at == "2026-09-30"
    assert order.status == CanonicalStatus.PICKED
    assert order.total_price == 12.5
    assert order.items[0].name == "Lamp"
    assert order.items[0].quantity == 1
    assert order.items[0].price == 12.5


def test_flat_status_takes_priority_over_nested_status():
    raw = {"status_code": 40, "state": {"status": "shipped"}}
    assert normalize_order(raw).status == CanonicalStatus.COMPLETED

    name, _ = ORDER_STATUS.match({"status": 20, "statusCode": {"code": 40}})
    assert name == "status"


def test_nested_status_object_is_used_when_no_flat_value():
    assert normalize_order({"status": {"code": -10}}).status == CanonicalStatus.CANCELED


def test_product_sub_record_may_be_a_list():
    item = normalize_order_item({"product": [{"name": "Desk"}], "quantity": 1})
    assert item.name == "Desk"


def test_unresolvable_item_name_gets_placeholder_from_product_reference():
    item = normalize_order_item({"product_ID": "P-9", "quantity": "3"})
    assert item.name == "Product P-9"
    assert item.quantity == 3
    assert item.price == 0.0


def test_item_without_any_reference_gets_generic_placeholder():
    assert normalize_order_item({}).name == "Unknown product"


def test_missing_fields_fall_back_to_defaults():
    order = normalize_order({})

    assert order.id is None
    assert order.created_at is None
    assert order.status == CanonicalStatus.PENDING
    assert order.total_price == 0.0
    assert order.items == []


def test_odd_identifier_shapes_are_coerced_instead_of_rejected():
    order = normalize_order(
        {
            "ID": {"uuid": "A1"},
            "items": [
                {"product_ID": 1.5, "quantity": 1},
                {"product_ID": 4.0, "quantity": 1},
                {"product_ID": True, "quantity": 1},
            ],
        }
    )

    assert order.id == "{'uuid': 'A1'}"
    assert [item.product_id for item in order.items] == ["1.5", 4, "True"]
    assert order.items[0].name == "Product 1.5"


def test_non_finite_numbers_become_zero():
    order = normalize_order({"ID": 1, "total": "inf", "items": [{"name": "Desk", "quantity": "nan", "price": float("inf")}]})

    assert order.total_price == 0.0
    assert order.items[0].quantity == 0
    assert order.items[0].price == 0.0


def test_normalize_orders_handles_empty_input():
    assert normalize_orders([]) == []
    assert len(normalize_orders([ODATA_ORDER, {"ID": 2}])) == 2


def test_first_match_reports_which_extractor_won():
    combinator = FirstMatch(key("a"), key("b"), default="none")

    assert combinator.match({"b": 1}) == ("b", 1)
    assert combinator.match({"a": 0, "b": 1}) == ("a", 0)
    assert combinator.match({}) == (None, "none")
    assert combinator.names == ["a", "b"]
