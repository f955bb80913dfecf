"""Caller identity, read from the Bearer header and passed through to the store unverified."""
from __future__ import annotations
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

_bearer = HTTPBearer(auto_error=False)


def caller_identity(credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer)) -> Optional[str]:
    # The store authorizes writes; a missing identity surfaces as Forbidden from the core.
    if not credentials:
        return None
    return credentials.credentials.strip() or None
