"""
Webshop ERP Bridge: FastAPI Application Entry Point

- Global exception handler converts domain exceptions into structured JSON
- The ERP gateway is constructed once at startup, owned by the app and
  handed to services through dependency injection
"""
import logging
import time
import uuid
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from app.config import settings
from app.database import create_tables, engine
from app.core.exceptions import WebshopException, to_http_status
from app.erp.gateway import ErpGateway
from app.utils.logging import configure_logging, request_id_var
from app.routers import products, customers, orders, erp

configure_logging(log_level=settings.LOG_LEVEL, log_format=settings.LOG_FORMAT)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Webshop backend reconciled in real time with the ERP system of record",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS Middleware ───────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    """
    Adds request correlation metadata for observability.
    - Reads incoming X-Request-ID (if present) or generates one and binds
      it to every log record emitted while the request is handled
    - Adds timing header; ERP retries show up here as latency
    """
    start = time.perf_counter()
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id
    token = request_id_var.set(request_id)
    try:
        response = await call_next(request)

        duration_ms = (time.perf_counter() - start) * 1000
        if settings.ENABLE_REQUEST_ID:
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time-Ms"] = f"{duration_ms:.2f}"

        if settings.ENABLE_REQUEST_LOGGING:
            logger.info(
                "request_completed method=%s path=%s status=%s duration_ms=%.2f",
                request.method,
                request.url.path,
                response.status_code,
                duration_ms,
                extra={"duration_ms": round(duration_ms, 2)},
            )
    finally:
        request_id_var.reset(token)

    return response

# ── Global Exception Handlers ─────────────────────────────────────────────────

@app.exception_handler(WebshopException)
async def webshop_exception_handler(request: Request, exc: WebshopException) -> JSONResponse:
    """
    Converts all domain exceptions to structured HTTP responses.
    Routers never catch domain exceptions themselves.
    """
    return JSONResponse(status_code=to_http_status(exc), content=exc.to_payload())


# ── API Routers ───────────────────────────────────────────────────────────────
API_PREFIX = "/api"
app.include_router(products.router, prefix=API_PREFIX)
app.include_router(customers.router, prefix=API_PREFIX)
app.include_router(orders.router, prefix=API_PREFIX)
app.include_router(erp.router, prefix=API_PREFIX)


# ── Lifecycle Events ──────────────────────────────────────────────────────────

@app.on_event("startup")
def startup_event():
    logger.info("Starting %s v%s", settings.APP_NAME, settings.APP_VERSION)
    create_tables()
    app.state.erp_gateway = ErpGateway(settings.erp_gateway_config())
    logger.info("API available at http://localhost:8000/docs")


@app.on_event("shutdown")
def shutdown_event():
    gateway = getattr(app.state, "erp_gateway", None)
    if gateway is not None:
        gateway.close()
    logger.info("%s shutting down.", settings.APP_NAME)


# ── Health Endpoints ──────────────────────────────────────────────────────────

@app.get("/", tags=["Health"])
def root():
    return {"app": settings.APP_NAME, "version": settings.APP_VERSION, "docs": "/docs", "status": "running"}


@app.get("/health", tags=["Health"])
def health_check():
    return {"status": "healthy", "app": settings.APP_NAME}


@app.get("/ready", tags=["Health"])
def readiness_check(request: Request):
    """
    Lightweight readiness endpoint intended for orchestrators.
    ERP reachability is reported separately by /api/erp/status.
    """
    db_ok = True
    db_error = None

    if settings.READINESS_CHECK_DATABASE:
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except Exception as exc:
            db_ok = False
            db_error = str(exc)

    return JSONResponse(
        status_code=200 if db_ok else 503,
        content={
            "status": "ready" if db_ok else "not_ready",
            "app": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "request_id": getattr(request.state, "request_id", None),
            "checks": {
                "database": {
                    "enabled": settings.READINESS_CHECK_DATABASE,
                    "ok": db_ok,
                    "error": db_error,
                }
            },
        },
    )
