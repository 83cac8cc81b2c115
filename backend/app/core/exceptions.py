"""
Domain Exceptions

Services raise these; the global handler in ``app.main`` turns them into
structured JSON responses so every failure kind stays distinguishable for
the caller (stock shortfall list vs. generic ERP-down banner).
"""
from typing import Any, Dict, List, Optional


class WebshopException(Exception):
    """Base class for all domain exceptions."""

    code = "WEBSHOP_ERROR"
    status_code = 500

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"success": False, "error": self.message, "code": self.code}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class InvalidArgumentException(WebshopException):
    code = "INVALID_ARGUMENT"
    status_code = 400


class EntityNotFoundException(WebshopException):
    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class DuplicateEntityException(WebshopException):
    code = "DUPLICATE_ENTITY"
    status_code = 400


class AuthenticationFailedException(WebshopException):
    code = "INVALID_CREDENTIALS"
    status_code = 401

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class InsufficientStockException(WebshopException):
    """Business-rule failure: one or more items exceed live ERP stock."""

    code = "INSUFFICIENT_STOCK"
    status_code = 409

    def __init__(self, shortfalls: List[Dict[str, Any]]):
        super().__init__("Insufficient stock", details=shortfalls)
        self.shortfalls = shortfalls


class UpstreamUnavailableException(WebshopException):
    """ERP could not be reached once the retry budget was spent."""

    code = "UPSTREAM_UNAVAILABLE"
    status_code = 502

    def __init__(self, message: str, details: Optional[Any] = None, request_sent: bool = True):
        super().__init__(message, details=details)
        # False only when the request provably never reached the ERP (refused, connect timeout)
        self.request_sent = request_sent


class UpstreamErrorException(WebshopException):
    """ERP answered, but with a failure response."""

    code = "UPSTREAM_ERROR"
    status_code = 502

    def __init__(self, message: str, status_code: int = 0, response_body: str = ""):
        super().__init__(message, details={"status": status_code, "body": response_body} if status_code else None)
        self.upstream_status = status_code
        self.response_body = response_body


def to_http_status(exc: WebshopException) -> int:
    return exc.status_code
