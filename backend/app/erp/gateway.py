"""
ERP Gateway

Single point of outbound communication with the ERP. Hides transport,
HTTP basic auth, timeouts and retry/backoff from the services; every
failure leaves this module as a typed domain exception so callers can
choose a fallback.

Wire contract:
- ``GET  /api/stock?productName=<name>``         -> ``{productName, stock}``
- ``POST /api/stock-batch {productNames: [...]}`` -> ``{name: stock, ...}``
- ``POST /api/purchase-orders {customer, items, total}`` -> opaque confirmation
- ``GET  /odata/v4/simple-erp/Products``          -> ``{value: [...]}`` or ``[...]``
- ``GET  /odata/v4/simple-erp/Orders?$filter=...&$expand=customer,items($expand=product)``
"""
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import quote

import requests
from requests.auth import HTTPBasicAuth
from urllib3.exceptions import MaxRetryError, NewConnectionError

from app.core.exceptions import (
    InvalidArgumentException,
    UpstreamErrorException,
    UpstreamUnavailableException,
    WebshopException,
)
from app.erp.retry import RetryPolicy

logger = logging.getLogger(__name__)

STOCK_PATH = "/api/stock"
STOCK_BATCH_PATH = "/api/stock-batch"
PURCHASE_ORDERS_PATH = "/api/purchase-orders"
ODATA_SERVICE_PATH = "/odata/v4/simple-erp"
PRODUCTS_PATH = f"{ODATA_SERVICE_PATH}/Products"
ORDERS_PATH = f"{ODATA_SERVICE_PATH}/Orders"
ORDERS_EXPAND = "customer,items($expand=product)"


@dataclass(frozen=True)
class ErpGatewayConfig:
    """Explicit gateway configuration; built from settings at the composition root."""
    base_url: str = "http://localhost:4004"
    username: Optional[str] = None
    password: Optional[str] = None
    timeout_seconds: float = 8.0
    ping_timeout_seconds: float = 3.0
    fallback_timeout_seconds: float = 5.0
    retry_policy: RetryPolicy = field(default_factory=RetryPolicy)
    ping_policy: RetryPolicy = field(default_factory=lambda: RetryPolicy(attempts=2, base_delay=0.1))

    @property
    def root_url(self) -> str:
        return self.base_url.rstrip("/")


def odata_quote(value: Any) -> str:
    """Escape a value for use inside an OData single-quoted string literal."""
    return str(value).replace("'", "''")


def _encode_component(value: str) -> str:
    # Same safe set as JavaScript's encodeURIComponent: spaces become %20, never '+'
    return quote(value, safe="!~*'()")


def _as_int(value: Any) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return 0


def _never_reached_erp(exc: requests.exceptions.ConnectionError) -> bool:
    """True only when no connection was established (refused, DNS, connect timeout).

    ``ConnectionError`` also wraps aborted connections where the request
    body was already written, so those count as sent.
    """
    if isinstance(exc, requests.exceptions.ConnectTimeout):
        return True
    reason = exc.args[0] if exc.args else None
    if isinstance(reason, MaxRetryError):
        reason = reason.reason
    return isinstance(reason, NewConnectionError)


def _unwrap_collection(data: Any, operation: str) -> List[Any]:
    items = data.get("value", data) if isinstance(data, dict) else data
    if not isinstance(items, list):
        raise UpstreamErrorException(
            f"ERP returned an invalid collection for {operation} (type: {type(items).__name__})"
        )
    return items


class ErpGateway:
    """HTTP client for the ERP.

    Usage:
        gateway = ErpGateway(settings.erp_gateway_config())
        stocks = gateway.get_stocks(["Desk", "Chair"])
        gateway.close()
    """

    def __init__(
        self,
        config: ErpGatewayConfig,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._config = config
        self._owns_session = session is None
        self._session = session if session is not None else requests.Session()
        if config.username and config.password:
            self._session.auth = HTTPBasicAuth(config.username, config.password)
        self._sleep = sleep
        logger.info("ERP gateway initialized base_url=%s auth_user=%s", config.root_url, config.username)

    @property
    def config(self) -> ErpGatewayConfig:
        return self._config

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "ErpGateway":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ── Transport ────────────────────────────────────────────────────────────

    def _send(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        timeout: Optional[float] = None,
        parse_body: bool = True,
    ) -> Any:
        """One HTTP exchange, no retries."""
        url = f"{self._config.root_url}{path}"
        try:
            response = self._session.request(
                method,
                url,
                params=params,
                json=json,
                timeout=timeout if timeout is not None else self._config.timeout_seconds,
                headers={"Accept": "application/json"},
            )
        except requests.exceptions.ConnectionError as exc:
            raise UpstreamUnavailableException(
                f"ERP unreachable: {exc.__class__.__name__}",
                details=str(exc),
                request_sent=not _never_reached_erp(exc),
            ) from exc
        except requests.exceptions.RequestException as exc:
            raise UpstreamUnavailableException(
                f"ERP request failed: {exc.__class__.__name__}", details=str(exc), request_sent=True
            ) from exc

        if response.status_code >= 400:
            raise UpstreamErrorException(
                f"ERP responded {response.status_code} to {method} {path}",
                status_code=response.status_code,
                response_body=response.text[:500],
            )
        if not parse_body or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamErrorException(
                f"ERP returned a non-JSON body for {method} {path}",
                status_code=response.status_code,
                response_body=response.text[:500],
            ) from exc

    @staticmethod
    def _should_retry(policy: RetryPolicy, idempotent: bool) -> Callable[[Exception], bool]:
        def should_retry(exc: Exception) -> bool:
            if isinstance(exc, UpstreamUnavailableException):
                return idempotent or not exc.request_sent
            if isinstance(exc, UpstreamErrorException):
                return idempotent and exc.upstream_status in policy.retry_on_status
            return False

        return should_retry

    def _call(
        self,
        method: str,
        path: str,
        operation: str,
        idempotent: bool = True,
        policy: Optional[RetryPolicy] = None,
        **kwargs: Any,
    ) -> Any:
        policy = policy or self._config.retry_policy
        return policy.run(
            lambda: self._send(method, path, **kwargs),
            should_retry=self._should_retry(policy, idempotent),
            sleep=self._sleep,
            operation=operation,
        )

    # ── Operations ───────────────────────────────────────────────────────────

    def ping(self) -> bool:
        """Liveness probe; never raises."""
        try:
            self._call(
                "GET",
                f"{PRODUCTS_PATH}?$top=1",
                operation="ping",
                policy=self._config.ping_policy,
                timeout=self._config.ping_timeout_seconds,
                parse_body=False,
            )
            return True
        except WebshopException as exc:
            logger.info("ERP ping failed: %s", exc.message)
            return False

    def get_stock(self, product_name: str) -> Dict[str, Any]:
        if not product_name:
            raise InvalidArgumentException("productName required")
        data = self._call("GET", STOCK_PATH, operation="get_stock", params={"productName": product_name})
        if not isinstance(data, dict):
            raise UpstreamErrorException("ERP returned an invalid stock payload")
        return {"productName": data.get("productName", product_name), "stock": _as_int(data.get("stock"))}

    def get_stocks(self, product_names: List[str]) -> Dict[str, int]:
        """Batched stock lookup. Names missing from the result must be read as zero."""
        if not isinstance(product_names, (list, tuple)) or len(product_names) == 0:
            raise InvalidArgumentException("productNames must be a non-empty list")
        data = self._call(
            "POST",
            STOCK_BATCH_PATH,
            operation="get_stocks",
            json={"productNames": list(product_names)},
        )
        if not isinstance(data, dict):
            raise UpstreamErrorException("ERP returned an invalid stock-batch payload")
        return {str(name): _as_int(stock) for name, stock in data.items()}

    def create_purchase_order(self, payload: Dict[str, Any]) -> Any:
        """Submit a purchase order.

        Not idempotent on the ERP side: only failures where the request never
        left this process are retried. Any error means "not confirmed".
        """
        if not payload:
            raise InvalidArgumentException("order payload required")
        return self._call(
            "POST",
            PURCHASE_ORDERS_PATH,
            operation="create_purchase_order",
            idempotent=False,
            json=payload,
        )

    def get_orders_by_customer_email(self, email: str) -> List[Dict[str, Any]]:
        if not email:
            raise InvalidArgumentException("email required")
        return self._get_orders(f"customer/email eq '{odata_quote(email)}'", "get_orders_by_customer_email")

    def get_orders_by_customer_name(self, name: str) -> List[Dict[str, Any]]:
        if not name:
            raise InvalidArgumentException("name required")
        return self._get_orders(f"customer/name eq '{odata_quote(name)}'", "get_orders_by_customer_name")

    def get_orders_by_customer_name_contains(self, name: str) -> List[Dict[str, Any]]:
        """Substring match; ERP name records may differ in spelling/casing from local ones."""
        if not name:
            raise InvalidArgumentException("name required")
        return self._get_orders(
            f"contains(customer/name,'{odata_quote(name)}')",
            "get_orders_by_customer_name_contains",
        )

    def _get_orders(self, filter_expr: str, operation: str) -> List[Dict[str, Any]]:
        path = (
            f"{ORDERS_PATH}?$filter={_encode_component(filter_expr)}"
            f"&$expand={_encode_component(ORDERS_EXPAND)}"
        )
        data = self._call("GET", path, operation=operation)
        return _unwrap_collection(data, operation)

    def get_products(self) -> List[Dict[str, Any]]:
        data = self._call("GET", PRODUCTS_PATH, operation="get_products")
        products = _unwrap_collection(data, "get_products")
        logger.info("ERP catalog fetched count=%s", len(products))
        return products

    def get_products_direct(self) -> List[Dict[str, Any]]:
        """Single un-retried catalog query with its own short timeout.

        Used as the last resort when the retried catalog pull has failed.
        """
        data = self._send("GET", PRODUCTS_PATH, timeout=self._config.fallback_timeout_seconds)
        return _unwrap_collection(data, "get_products_direct")
