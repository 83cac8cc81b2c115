"""
ERP order status normalization.

ERP views report status as a numeric code, a string enum, or a nested
object carrying either. Everything maps onto ``CanonicalStatus``;
unrecognized input falls back to ``pending``. The fallback is lossy on
purpose: an unknown status is shown as pending rather than guessed.
"""
from enum import Enum
from typing import Any, Dict


class CanonicalStatus(str, Enum):
    PENDING = "pending"
    PICKED = "picked"
    SHIPPED = "shipped"
    COMPLETED = "completed"
    CANCELED = "canceled"


DEFAULT_STATUS = CanonicalStatus.PENDING

STATUS_CODES: Dict[int, CanonicalStatus] = {
    10: CanonicalStatus.PENDING,
    20: CanonicalStatus.PICKED,
    30: CanonicalStatus.SHIPPED,
    40: CanonicalStatus.COMPLETED,
    -10: CanonicalStatus.CANCELED,
}

STATUS_NAMES: Dict[str, CanonicalStatus] = {
    "new": CanonicalStatus.PENDING,
    "pending": CanonicalStatus.PENDING,
    "picked": CanonicalStatus.PICKED,
    "shipped": CanonicalStatus.SHIPPED,
    "completed": CanonicalStatus.COMPLETED,
    "canceled": CanonicalStatus.CANCELED,
}


def normalize_status(raw: Any) -> CanonicalStatus:
    if isinstance(raw, dict):
        for key in ("status", "code"):
            if raw.get(key) is not None:
                return normalize_status(raw[key])
        return DEFAULT_STATUS

    if isinstance(raw, bool):
        return DEFAULT_STATUS

    if isinstance(raw, int):
        return STATUS_CODES.get(raw, DEFAULT_STATUS)

    if isinstance(raw, float):
        return STATUS_CODES.get(int(raw), DEFAULT_STATUS) if raw.is_integer() else DEFAULT_STATUS

    if isinstance(raw, str):
        text = raw.strip().lower()
        if text.lstrip("-").isdigit():
            return STATUS_CODES.get(int(text), DEFAULT_STATUS)
        return STATUS_NAMES.get(text, DEFAULT_STATUS)

    return DEFAULT_STATUS
