from pydantic_settings import BaseSettings
from typing import List
from pydantic import model_validator

from app.erp.gateway import ErpGatewayConfig
from app.erp.retry import RetryPolicy


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./webshop.db"
    ENVIRONMENT: str = "development"
    AUTO_CREATE_TABLES: bool = True
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"
    DEBUG: bool = True
    APP_NAME: str = "Webshop ERP Bridge"
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"
    ENABLE_REQUEST_ID: bool = True
    ENABLE_REQUEST_LOGGING: bool = True
    READINESS_CHECK_DATABASE: bool = True

    ERP_BASE_URL: str = "http://localhost:4004"
    ERP_USER: str = "alice"
    ERP_PASS: str = "alice"
    ERP_TIMEOUT_SECONDS: float = 8.0
    ERP_PING_TIMEOUT_SECONDS: float = 3.0
    ERP_FALLBACK_TIMEOUT_SECONDS: float = 5.0
    ERP_RETRY_ATTEMPTS: int = 3
    ERP_RETRY_BASE_DELAY_SECONDS: float = 0.2
    ERP_RETRY_MAX_DELAY_SECONDS: float = 5.0
    ERP_RETRY_JITTER: str = "none"
    ERP_PING_ATTEMPTS: int = 2
    ERP_PING_BASE_DELAY_SECONDS: float = 0.1

    @property
    def cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",")]

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() in {"prod", "production"}

    def erp_gateway_config(self) -> ErpGatewayConfig:
        return ErpGatewayConfig(
            base_url=self.ERP_BASE_URL,
            username=self.ERP_USER or None,
            password=self.ERP_PASS or None,
            timeout_seconds=self.ERP_TIMEOUT_SECONDS,
            ping_timeout_seconds=self.ERP_PING_TIMEOUT_SECONDS,
            fallback_timeout_seconds=self.ERP_FALLBACK_TIMEOUT_SECONDS,
            retry_policy=RetryPolicy(
                attempts=self.ERP_RETRY_ATTEMPTS,
                base_delay=self.ERP_RETRY_BASE_DELAY_SECONDS,
                max_delay=self.ERP_RETRY_MAX_DELAY_SECONDS,
                jitter=self.ERP_RETRY_JITTER,
            ),
            ping_policy=RetryPolicy(
                attempts=self.ERP_PING_ATTEMPTS,
                base_delay=self.ERP_PING_BASE_DELAY_SECONDS,
                max_delay=self.ERP_RETRY_MAX_DELAY_SECONDS,
                jitter=self.ERP_RETRY_JITTER,
            ),
        )

    @model_validator(mode="after")
    def validate_production_safety(self):
        if self.ERP_RETRY_ATTEMPTS < 1:
            raise ValueError("ERP_RETRY_ATTEMPTS must be at least 1.")

        if self.ERP_RETRY_JITTER not in {"none", "full"}:
            raise ValueError("ERP_RETRY_JITTER must be 'none' or 'full'.")

        if not self.is_production:
            return self

        if "sqlite" in self.DATABASE_URL.lower():
            raise ValueError("SQLite is not allowed when ENVIRONMENT is production.")

        if self.AUTO_CREATE_TABLES:
            raise ValueError("AUTO_CREATE_TABLES must be false in production; use Alembic migrations.")

        return self


settings = Settings()
