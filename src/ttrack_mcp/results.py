"""Structured outcomes shared by every core operation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Coarse classification of an operation failure."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    STATE_CONFLICT = "state_conflict"


@dataclass(slots=True, frozen=True)
class OperationError:
    """Describes why an operation was rejected.

    ``reason`` is a stable machine-readable code such as ``task_not_found``;
    ``message`` is meant for people.
    """

    kind: ErrorKind
    reason: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"kind": self.kind.value, "reason": self.reason, "message": self.message}


@dataclass(slots=True)
class OperationResult(Generic[T]):
    """Holds either the payload of a successful operation or its error."""

    value: T | None = None
    error: OperationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T | None = None) -> "OperationResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, reason: str, message: str) -> "OperationResult[Any]":
        return cls(error=OperationError(kind=kind, reason=reason, message=message))

    def unwrap(self) -> T:
        """Return the payload, raising ``RuntimeError`` if the operation failed."""

        if self.error is not None:
            raise RuntimeError(self.error.message)
        return self.value  # type: ignore[return-value]


def invalid(reason: str, message: str) -> OperationResult[Any]:
    return OperationResult.failure(ErrorKind.VALIDATION, reason, message)


def not_found(reason: str, message: str) -> OperationResult[Any]:
    return OperationResult.failure(ErrorKind.NOT_FOUND, reason, message)


def conflict(reason: str, message: str) -> OperationResult[Any]:
    return OperationResult.failure(ErrorKind.STATE_CONFLICT, reason, message)


__all__ = [
    "ErrorKind",
    "OperationError",
    "OperationResult",
    "conflict",
    "invalid",
    "not_found",
]
