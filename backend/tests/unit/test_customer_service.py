import pytest

from app.core.exceptions import (
    AuthenticationFailedException,
    DuplicateEntityException,
    EntityNotFoundException,
)
from app.schemas.customer import CustomerLoginRequest, CustomerRegisterRequest, CustomerUpdate
from app.services.customer_service import CustomerService


def test_register_and_login(db):
    service = CustomerService(db)
    created = service.register(
        CustomerRegisterRequest(name="Max", email="max@example.com", password="pw", address="Elm 2")
    )

    logged_in = service.login(CustomerLoginRequest(email="max@example.com", password="pw"))

    assert logged_in.id == created.id
    assert logged_in.address == "Elm 2"


def test_register_rejects_duplicate_email(db, customer):
    with pytest.raises(DuplicateEntityException):
        CustomerService(db).register(
            CustomerRegisterRequest(name="Other", email=customer.email, password="x")
        )


def test_login_with_wrong_password_fails(db, customer):
    with pytest.raises(AuthenticationFailedException):
        CustomerService(db).login(CustomerLoginRequest(email=customer.email, password="wrong"))


def test_get_missing_customer(db):
    with pytest.raises(EntityNotFoundException):
        CustomerService(db).get_customer(123)


def test_update_keeps_unset_fields(db, customer):
    updated = CustomerService(db).update_customer(customer.id, CustomerUpdate(name="Jane Smith"))

    assert updated.name == "Jane Smith"
    assert updated.email == "Jane.Doe@Example.com"
    assert updated.address == "Main St 1"


def test_update_can_clear_address(db, customer):
    updated = CustomerService(db).update_customer(customer.id, CustomerUpdate(address=None))
    assert updated.address is None


def test_update_rejects_email_of_another_customer(db, customer):
    service = CustomerService(db)
    service.register(CustomerRegisterRequest(name="Max", email="max@example.com", password="pw"))

    with pytest.raises(DuplicateEntityException):
        service.update_customer(customer.id, CustomerUpdate(email="max@example.com"))


def test_customer_with_orders_uses_local_history(db, customer):
    result = CustomerService(db).get_customer_with_orders(customer.id)
    assert result.email == customer.email
    assert result.orders == []
