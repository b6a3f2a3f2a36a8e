"""
Runtime configuration.

Every value can be overridden from the environment so the same build
runs unchanged under a test client, a dev server or gunicorn.
"""

from __future__ import annotations

import os
from decimal import Decimal


def _env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


API_BASE: str = _env("LEDGERSTREAM_API_BASE", "/ledgerstream/v1").rstrip("/")

DEFAULT_TOP_N: int = int(_env("LEDGERSTREAM_DEFAULT_TOP_N", "5"))

# 2 % commission -> every amount is multiplied by 0.98
COMMISSION_RATE: Decimal = Decimal(_env("LEDGERSTREAM_COMMISSION_RATE", "0.02"))

BIG_DEBIT_THRESHOLD: Decimal = Decimal(_env("LEDGERSTREAM_BIG_DEBIT_THRESHOLD", "100"))

KEY_SEPARATOR: str = ","

LOG_LEVEL: str = _env("LEDGERSTREAM_LOG_LEVEL", "INFO")
