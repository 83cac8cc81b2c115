"""
Product Sync Service: pull the ERP catalog into the local products table.

The ERP is authoritative for catalog membership: every local product whose
name is absent from the fetched catalog is deleted, and an empty ERP catalog
clears the local table. There is no undo. Upserts and deletes run in one
transaction so readers never see a half-emptied catalog.

Products are matched by name, not by an ERP identifier; a rename on the ERP
side therefore shows up locally as delete + insert.
"""
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    UpstreamErrorException,
    UpstreamUnavailableException,
    WebshopException,
)
from app.erp.gateway import ErpGateway
from app.models.product import Product
from app.repositories.product_repository import ProductRepository
from app.schemas.product import ProductSyncResponse

logger = logging.getLogger(__name__)


def _to_price(value: Any) -> Decimal:
    try:
        price = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return Decimal("0")
    if not price.is_finite() or price < 0:
        return Decimal("0")
    return price.quantize(Decimal("0.01"))


def _to_stock(value: Any) -> int:
    try:
        return max(int(float(value)), 0)
    except (TypeError, ValueError):
        return 0


class ProductSyncService:
    def __init__(self, db: Session, gateway: ErpGateway):
        self._db = db
        self._gateway = gateway
        self._repo = ProductRepository(db)

    def sync_from_erp(self) -> ProductSyncResponse:
        logger.info("erp_product_sync_started")
        erp_products = self._fetch_catalog()
        logger.info("erp_product_sync_received count=%s", len(erp_products))

        seen: Dict[str, Product] = {}
        synced = 0
        try:
            for raw in erp_products:
                name = self._resolve_name(raw)
                if not name:
                    logger.warning("erp_product_skipped reason=no_name record=%s", raw)
                    continue

                price = _to_price(raw.get("price"))
                stock = _to_stock(raw.get("stock"))
                product = seen.get(name) or self._repo.get_by_name(name)
                if product is not None:
                    product.price = price
                    product.stock = stock
                    logger.info("erp_product_updated name=%s stock=%s", name, stock)
                else:
                    product = Product(
                        name=name,
                        description=raw.get("description") or "",
                        price=price,
                        stock=stock,
                    )
                    self._db.add(product)
                    logger.info("erp_product_inserted name=%s stock=%s", name, stock)
                seen[name] = product
                synced += 1

            self._db.flush()
            deleted = self._repo.delete_not_in_names(seen.keys())
            self._db.commit()
        except SQLAlchemyError as exc:
            self._db.rollback()
            logger.exception("erp_product_sync_failed; local catalog left unchanged")
            raise WebshopException(f"Product sync failed: {exc.__class__.__name__}") from exc

        if deleted:
            logger.info("erp_product_sync_deleted count=%s", deleted)
        logger.info("erp_product_sync_completed synced=%s total=%s", synced, len(erp_products))
        return ProductSyncResponse(success=True, synced=synced, total=len(erp_products), deleted=deleted)

    def _fetch_catalog(self) -> List[Any]:
        try:
            return self._gateway.get_products()
        except (UpstreamUnavailableException, UpstreamErrorException) as exc:
            logger.warning("erp_catalog_primary_failed error=%s; trying direct query", exc.message)
            return self._gateway.get_products_direct()

    @staticmethod
    def _resolve_name(raw: Any) -> str:
        if not isinstance(raw, dict):
            return ""
        for field_name in ("name", "productID"):
            value = raw.get(field_name)
            text = str(value).strip() if value is not None else ""
            if text:
                return text
        return ""
