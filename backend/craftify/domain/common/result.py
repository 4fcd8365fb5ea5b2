"""Result<T> pattern — store and domain functions return this instead of raising for normal flow."""
from __future__ import annotations
from enum import Enum
from typing import Dict, Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    PRECONDITION_FAILED = "precondition_failed"


class Result(Generic[T]):
    def __init__(
        self,
        is_success: bool,
        value: Optional[T] = None,
        error: Optional[str] = None,
        kind: Optional[ErrorKind] = None,
        field_errors: Optional[Dict[str, str]] = None,
    ):
        self.is_success = is_success
        self.value = value
        self.error = error
        self.kind = kind
        self.field_errors = field_errors or {}

    @classmethod
    def ok(cls, value: T) -> "Result[T]":
        return cls(is_success=True, value=value)

    @classmethod
    def fail(
        cls,
        error: str,
        kind: ErrorKind = ErrorKind.VALIDATION,
        field_errors: Optional[Dict[str, str]] = None,
    ) -> "Result[T]":
        return cls(is_success=False, error=error, kind=kind, field_errors=field_errors)

    @classmethod
    def invalid(cls, field_errors: Dict[str, str]) -> "Result[T]":
        """Validation failure carrying one message per offending field."""
        summary = "; ".join(f"{k}: {v}" for k, v in field_errors.items())
        return cls.fail(summary, ErrorKind.VALIDATION, field_errors)

    @classmethod
    def not_found(cls, error: str) -> "Result[T]":
        return cls.fail(error, ErrorKind.NOT_FOUND)

    @classmethod
    def conflict(cls, error: str) -> "Result[T]":
        return cls.fail(error, ErrorKind.CONFLICT)

    @classmethod
    def precondition_failed(cls, error: str) -> "Result[T]":
        return cls.fail(error, ErrorKind.PRECONDITION_FAILED)

    def __repr__(self) -> str:
        if self.is_success:
            return f"Result.ok({self.value!r})"
        return f"Result.fail({self.error!r}, kind={self.kind.value if self.kind else None})"
