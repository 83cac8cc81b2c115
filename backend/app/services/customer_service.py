"""
Customer Service

Credentials are stored and compared verbatim. This is a known deficiency
carried over deliberately; hashing is out of scope for this service.
"""
import logging

from sqlalchemy.orm import Session

from app.core.exceptions import (
    AuthenticationFailedException,
    DuplicateEntityException,
    EntityNotFoundException,
)
from app.models.customer import Customer
from app.repositories.customer_repository import CustomerRepository
from app.schemas.customer import (
    CustomerLoginRequest,
    CustomerRegisterRequest,
    CustomerUpdate,
    CustomerWithOrdersResponse,
)
from app.services.order_service import OrderService

logger = logging.getLogger(__name__)


class CustomerService:
    def __init__(self, db: Session):
        self._repo = CustomerRepository(db)
        self._orders = OrderService(db)

    def register(self, data: CustomerRegisterRequest) -> Customer:
        if self._repo.get_by_email(data.email):
            raise DuplicateEntityException("Email already exists")
        customer = self._repo.create(
            Customer(name=data.name, email=data.email, password=data.password, address=data.address)
        )
        logger.info("customer_registered id=%s", customer.id)
        return customer

    def login(self, data: CustomerLoginRequest) -> Customer:
        customer = self._repo.get_by_credentials(data.email, data.password)
        if not customer:
            raise AuthenticationFailedException()
        return customer

    def get_customer(self, customer_id: int) -> Customer:
        customer = self._repo.get_by_id(customer_id)
        if not customer:
            raise EntityNotFoundException("Customer", customer_id)
        return customer

    def get_customer_with_orders(self, customer_id: int) -> CustomerWithOrdersResponse:
        customer = self.get_customer(customer_id)
        return CustomerWithOrdersResponse(
            id=customer.id,
            name=customer.name,
            email=customer.email,
            address=customer.address,
            orders=self._orders.list_local_orders(customer.id),
        )

    def update_customer(self, customer_id: int, data: CustomerUpdate) -> Customer:
        customer = self.get_customer(customer_id)
        updates = {
            k: v for k, v in data.model_dump(exclude_unset=True).items()
            if v is not None or k == "address"
        }
        new_email = updates.get("email")
        if new_email and new_email != customer.email:
            existing = self._repo.get_by_email(new_email)
            if existing and existing.id != customer.id:
                raise DuplicateEntityException("Email already exists")
        return self._repo.update(customer, updates)
