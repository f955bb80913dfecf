"""Result<T> pattern. Domain rules return this instead of raising for normal validation flow."""
from __future__ import annotations
from typing import TypeVar, Generic, Optional

from course_admin.domain.common.errors import ERRORS_BY_KIND, CourseAdminError

T = TypeVar("T")


class Result(Generic[T]):
    def __init__(
        self,
        is_success: bool,
        value: Optional[T] = None,
        error: Optional[str] = None,
        kind: str = "validation",
    ):
        self.is_success = is_success
        self.value = value
        self.error = error
        self.kind = kind

    @classmethod
    def ok(cls, value: T) -> "Result[T]":
        return cls(is_success=True, value=value)

    @classmethod
    def fail(cls, error: str, kind: str = "validation") -> "Result[T]":
        return cls(is_success=False, error=error, kind=kind)

    def unwrap(self) -> T:
        """Return the value, or raise the typed error matching `kind`."""
        if self.is_success:
            return self.value
        error_cls = ERRORS_BY_KIND.get(self.kind, CourseAdminError)
        raise error_cls(self.error or "Unknown error")

    def __repr__(self) -> str:
        if self.is_success:
            return f"Result.ok({self.value!r})"
        return f"Result.fail({self.error!r}, kind={self.kind!r})"
