import os
from typing import List, Optional

from dotenv import load_dotenv

# Load .env from the backend directory
load_dotenv(os.path.join(os.path.dirname(__file__), "..", "..", ".env"))

# Backing store (course / section / lecture records live there)
STORE_BASE_URL: str = os.getenv("STORE_BASE_URL", "http://localhost:8000/api/v2").rstrip("/")


def _optional_float(name: str) -> Optional[float]:
    raw = os.getenv(name, "").strip()
    return float(raw) if raw else None


# None means the transport default (requests imposes no timeout)
STORE_TIMEOUT_SECONDS: Optional[float] = _optional_float("STORE_TIMEOUT_SECONDS")

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

CORS_ALLOW_ORIGINS: List[str] = [
    origin.strip()
    for origin in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",")
    if origin.strip()
]
