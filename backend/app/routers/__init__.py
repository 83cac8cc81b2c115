# Routers package: Thin Controllers
from app.routers import (
    products,
    customers,
    orders,
    erp,
)

__all__ = [
    "products",
    "customers",
    "orders",
    "erp",
]
