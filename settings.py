from __future__ import annotations

import os
from typing import List


def _split_csv(s: str) -> List[str]:
    return [part.strip() for part in (s or "").split(",") if part.strip()]


# Allow calls from the Vite/Next dev servers unless overridden
CORS_ORIGINS = _split_csv(
    os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173",
    )
)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper()

# Interface bounds, not tunable
MAX_COUNT = 100
MAX_DIGITS = 6

# Request defaults: 12 two-digit additions
DEFAULT_COUNT = max(1, min(int(os.getenv("DEFAULT_COUNT", "12")), MAX_COUNT))
DEFAULT_DIGITS = max(1, min(int(os.getenv("DEFAULT_DIGITS", "2")), MAX_DIGITS))
