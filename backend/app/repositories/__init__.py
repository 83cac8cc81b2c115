# Repository Layer: Data Access (Repository Pattern)
from app.repositories.base import BaseRepository
from app.repositories.product_repository import ProductRepository
from app.repositories.customer_repository import CustomerRepository
from app.repositories.order_repository import OrderRepository

__all__ = [
    "BaseRepository",
    "ProductRepository",
    "CustomerRepository",
    "OrderRepository",
]
