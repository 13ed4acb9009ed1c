"""
Environment configuration for the signaling server
"""
import os
from typing import Tuple


def parse_origins(value: str) -> Tuple[str, ...]:
    """Split a comma-separated CORS_ORIGIN value. Empty means unrestricted."""
    origins = tuple(o.strip() for o in (value or "").split(",") if o.strip())
    return origins or ("*",)


CORS_ORIGINS = parse_origins(os.environ.get("CORS_ORIGIN", "*"))
SERVER_HOST = os.environ.get("SERVER_HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", 3000))
PING_INTERVAL_MS = int(os.environ.get("PING_INTERVAL_MS", 15000))
