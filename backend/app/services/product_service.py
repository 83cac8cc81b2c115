"""
Product Service: local catalog maintenance plus live ERP stock lookups.
"""
import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import DuplicateEntityException, EntityNotFoundException, InvalidArgumentException
from app.erp.gateway import ErpGateway
from app.models.product import Product
from app.repositories.product_repository import ProductRepository
from app.schemas.product import ProductCreate

logger = logging.getLogger(__name__)


class ProductService:
    def __init__(self, db: Session, gateway: Optional[ErpGateway] = None):
        self._repo = ProductRepository(db)
        self._gateway = gateway

    def list_products(self) -> List[Product]:
        return self._repo.list_all()

    def get_product(self, product_id: int) -> Product:
        product = self._repo.get_by_id(product_id)
        if not product:
            raise EntityNotFoundException("Product", product_id)
        return product

    def create_product(self, data: ProductCreate) -> Product:
        name = data.name.strip()
        if self._repo.get_by_name(name):
            raise DuplicateEntityException(f"Product '{name}' already exists")
        product = self._repo.create(
            Product(name=name, description=data.description or "", price=data.price, stock=data.stock)
        )
        logger.info("product_created id=%s name=%s", product.id, product.name)
        return product

    def delete_product(self, product_id: int) -> None:
        product = self.get_product(product_id)
        self._repo.delete(product)
        logger.info("product_deleted id=%s", product_id)

    def get_live_stocks(self, names: List[str]) -> Dict[str, int]:
        """Stock straight from the ERP; names the ERP does not report come back as 0."""
        cleaned = [n.strip() for n in names if n and n.strip()]
        if not cleaned:
            raise InvalidArgumentException("at least one product name is required")
        if self._gateway is None:
            raise RuntimeError("ProductService was built without an ERP gateway")
        stocks = self._gateway.get_stocks(cleaned)
        return {name: stocks.get(name, 0) for name in cleaned}
