"""Failure taxonomy shared by the domain, the store adapter and the managers.

Every failure is terminal for the call that raised it: nothing in this package retries.
"""
from __future__ import annotations
from typing import Any, Optional


class CourseAdminError(Exception):
    """Base class. `status` / `details` are filled in when the store supplied them."""

    kind = "error"

    def __init__(self, message: str, status: Optional[int] = None, details: Any = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.details = details

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, status={self.status!r})"


class ValidationError(CourseAdminError):
    """Required field missing or malformed. Raised before any store request is made."""

    kind = "validation"


class AmbiguousLectureError(ValidationError):
    kind = "ambiguous"


class NotFound(CourseAdminError):
    kind = "not_found"


class Forbidden(CourseAdminError):
    kind = "forbidden"


class NetworkError(CourseAdminError):
    """The store could not be reached at all (no response)."""

    kind = "network"


class StoreError(CourseAdminError):
    """The store answered but reported a business failure other than NotFound/Forbidden."""

    kind = "store"


class TreeBusyError(CourseAdminError):
    """A load or mutation is already in flight for this curriculum tree."""

    kind = "busy"


ERRORS_BY_KIND = {
    cls.kind: cls
    for cls in (
        ValidationError,
        AmbiguousLectureError,
        NotFound,
        Forbidden,
        NetworkError,
        StoreError,
        TreeBusyError,
    )
}
