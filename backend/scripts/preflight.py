"""Deployment preflight checks for database and ERP settings.

Usage:
    python scripts/preflight.py

Exits non-zero when any required control fails.
"""

from __future__ import annotations

import os
import sys


DEFAULT_ERP_CREDENTIALS = ("alice", "alice")


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, default))
    except ValueError:
        return -1.0


def collect_checks() -> list[tuple[str, bool, str]]:
    environment = os.getenv("ENVIRONMENT", "development").strip().lower()
    database_url = os.getenv("DATABASE_URL", "sqlite:///./webshop.db")
    auto_create_tables = _bool_env("AUTO_CREATE_TABLES", True)
    erp_base_url = os.getenv("ERP_BASE_URL", "http://localhost:4004").strip()
    erp_user = os.getenv("ERP_USER", DEFAULT_ERP_CREDENTIALS[0])
    erp_pass = os.getenv("ERP_PASS", DEFAULT_ERP_CREDENTIALS[1])
    timeout = _float_env("ERP_TIMEOUT_SECONDS", 8.0)
    attempts = int(_float_env("ERP_RETRY_ATTEMPTS", 3))

    checks: list[tuple[str, bool, str]] = [
        ("ENVIRONMENT is explicitly set", bool(environment), f"ENVIRONMENT={environment or '<empty>'}"),
        (
            "ERP_BASE_URL is an http(s) URL",
            erp_base_url.startswith(("http://", "https://")),
            f"ERP_BASE_URL={erp_base_url or '<empty>'}",
        ),
        ("ERP_TIMEOUT_SECONDS is positive", timeout > 0, f"ERP_TIMEOUT_SECONDS={timeout}"),
        ("ERP_RETRY_ATTEMPTS is at least 1", attempts >= 1, f"ERP_RETRY_ATTEMPTS={attempts}"),
    ]

    if environment in {"production", "prod"}:
        checks.extend(
            [
                (
                    "DATABASE_URL is not SQLite",
                    "sqlite" not in database_url.lower(),
                    f"DATABASE_URL={database_url}",
                ),
                (
                    "AUTO_CREATE_TABLES is disabled",
                    not auto_create_tables,
                    f"AUTO_CREATE_TABLES={auto_create_tables}",
                ),
                (
                    "ERP credentials are not the development defaults",
                    (erp_user, erp_pass) != DEFAULT_ERP_CREDENTIALS,
                    f"ERP_USER={erp_user}",
                ),
            ]
        )
    return checks


def run() -> int:
    checks = collect_checks()

    has_failures = False
    print("Webshop ERP Bridge Preflight")
    for title, ok, detail in checks:
        marker = "PASS" if ok else "FAIL"
        print(f"[{marker}] {title} ({detail})")
        if not ok:
            has_failures = True

    if has_failures:
        print("\nPreflight failed. Resolve failed checks before deployment.")
        return 1

    print("\nPreflight passed.")
    return 0


if __name__ == "__main__":
    sys.exit(run())
