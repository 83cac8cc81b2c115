from typing import Dict, List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_erp_gateway
from app.erp.gateway import ErpGateway
from app.schemas.product import ProductCreate, ProductResponse, ProductSyncResponse
from app.services.product_service import ProductService
from app.services.product_sync_service import ProductSyncService


router = APIRouter(prefix="/products", tags=["Products"])


def get_product_service(
    db: Session = Depends(get_db),
    gateway: ErpGateway = Depends(get_erp_gateway),
) -> ProductService:
    return ProductService(db, gateway)


def get_product_sync_service(
    db: Session = Depends(get_db),
    gateway: ErpGateway = Depends(get_erp_gateway),
) -> ProductSyncService:
    return ProductSyncService(db, gateway)


@router.get("", response_model=List[ProductResponse])
def list_products(service: ProductService = Depends(get_product_service)):
    return service.list_products()


@router.get("/stocks", response_model=Dict[str, int])
def live_stocks(
    names: str = Query("", description="Comma-separated product names"),
    service: ProductService = Depends(get_product_service),
):
    return service.get_live_stocks(names.split(","))


@router.post("/sync", response_model=ProductSyncResponse)
def sync_products(service: ProductSyncService = Depends(get_product_sync_service)):
    return service.sync_from_erp()


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(product_id: int, service: ProductService = Depends(get_product_service)):
    return service.get_product(product_id)


@router.post("", response_model=ProductResponse, status_code=201)
def create_product(body: ProductCreate, service: ProductService = Depends(get_product_service)):
    return service.create_product(body)


@router.delete("/{product_id}")
def delete_product(product_id: int, service: ProductService = Depends(get_product_service)):
    service.delete_product(product_id)
    return {"message": "Product deleted"}
