from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.customer import (
    CustomerLoginRequest,
    CustomerRegisterRequest,
    CustomerResponse,
    CustomerUpdate,
    CustomerWithOrdersResponse,
)
from app.services.customer_service import CustomerService


router = APIRouter(prefix="/customers", tags=["Customers"])


def get_customer_service(db: Session = Depends(get_db)) -> CustomerService:
    return CustomerService(db)


@router.post("/register", response_model=CustomerResponse, status_code=201)
def register(body: CustomerRegisterRequest, service: CustomerService = Depends(get_customer_service)):
    return service.register(body)


@router.post("/login", response_model=CustomerResponse)
def login(body: CustomerLoginRequest, service: CustomerService = Depends(get_customer_service)):
    return service.login(body)


@router.get("/{customer_id}", response_model=CustomerWithOrdersResponse)
def get_customer(customer_id: int, service: CustomerService = Depends(get_customer_service)):
    return service.get_customer_with_orders(customer_id)


@router.put("/{customer_id}", response_model=CustomerResponse)
def update_customer(
    customer_id: int,
    body: CustomerUpdate,
    service: CustomerService = Depends(get_customer_service),
):
    return service.update_customer(customer_id, body)
