"""
Shared fixtures: an isolated in-memory database per test, a recording
fake ERP gateway, and a TestClient wired to both.
"""
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.exceptions import InvalidArgumentException
from app.database import Base, get_db
from app.dependencies import get_erp_gateway
from app.main import app as webshop_app
from app.models.customer import Customer
from app.models.product import Product


class FakeErpGateway:
    """Stands in for ErpGateway; every call is recorded as ``(operation, argument)``."""

    def __init__(self):
        self.calls: List[tuple] = []
        self.reachable = True
        self.stocks: Dict[str, int] = {}
        self.stock_error: Optional[Exception] = None
        self.purchase_orders: List[Dict[str, Any]] = []
        self.purchase_order_response: Any = {"success": True, "orderId": "PO-1001", "status": "new"}
        self.purchase_order_error: Optional[Exception] = None
        self.orders_by_email: Dict[str, List[Dict[str, Any]]] = {}
        self.orders_by_name: Dict[str, List[Dict[str, Any]]] = {}
        self.orders_by_name_contains: Dict[str, List[Dict[str, Any]]] = {}
        self.orders_error: Optional[Exception] = None
        self.products: List[Dict[str, Any]] = []
        self.products_error: Optional[Exception] = None
        self.direct_products: List[Dict[str, Any]] = []
        self.direct_products_error: Optional[Exception] = None

    def calls_to(self, operation: str) -> List[tuple]:
        return [c for c in self.calls if c[0] == operation]

    def ping(self) -> bool:
        self.calls.append(("ping", None))
        return self.reachable

    def get_stocks(self, product_names):
        if not product_names:
            raise InvalidArgumentException("productNames must be a non-empty list")
        self.calls.append(("get_stocks", list(product_names)))
        if self.stock_error:
            raise self.stock_error
        return {name: self.stocks[name] for name in product_names if name in self.stocks}

    def create_purchase_order(self, payload):
        self.calls.append(("create_purchase_order", payload))
        if self.purchase_order_error:
            raise self.purchase_order_error
        self.purchase_orders.append(payload)
        return self.purchase_order_response

    def get_orders_by_customer_email(self, email):
        self.calls.append(("get_orders_by_customer_email", email))
        if self.orders_error:
            raise self.orders_error
        return list(self.orders_by_email.get(email, []))

    def get_orders_by_customer_name(self, name):
        self.calls.append(("get_orders_by_customer_name", name))
        if self.orders_error:
            raise self.orders_error
        return list(self.orders_by_name.get(name, []))

    def get_orders_by_customer_name_contains(self, name):
        self.calls.append(("get_orders_by_customer_name_contains", name))
        if self.orders_error:
            raise self.orders_error
        return list(self.orders_by_name_contains.get(name, []))

    def get_products(self):
        self.calls.append(("get_products", None))
        if self.products_error:
            raise self.products_error
        return list(self.products)

    def get_products_direct(self):
        self.calls.append(("get_products_direct", None))
        if self.direct_products_error:
            raise self.direct_products_error
        return list(self.direct_products)


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def erp():
    return FakeErpGateway()


@pytest.fixture
def client(db, erp):
    def _override_get_db():
        yield db

    webshop_app.dependency_overrides[get_db] = _override_get_db
    webshop_app.dependency_overrides[get_erp_gateway] = lambda: erp
    try:
        yield TestClient(webshop_app)
    finally:
        webshop_app.dependency_overrides.clear()


@pytest.fixture
def customer(db) -> Customer:
    row = Customer(name="Jane Doe", email="Jane.Doe@Example.com", password="secret", address="Main St 1")
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


@pytest.fixture
def products(db) -> List[Product]:
    rows = [
        Product(name="Desk", description="Oak desk", price=120, stock=4),
        Product(name="Chair", description="Office chair", price=45.5, stock=10),
    ]
    db.add_all(rows)
    db.commit()
    for row in rows:
        db.refresh(row)
    return rows
