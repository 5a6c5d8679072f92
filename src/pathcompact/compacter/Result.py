from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class CompactPathError(Enum):
    InvalidArgument = auto()
    AllocationFailure = auto()
    MalformedState = auto()


@dataclass(frozen=True)
class Result(Generic[T]):
    ok: bool
    value: Optional[T] = None
    error: Optional[CompactPathError] = None
    message: Optional[str] = None

    @staticmethod
    def success(value: T) -> "Result[T]":
        return Result(ok=True, value=value)

    @staticmethod
    def fail(error: CompactPathError, message: str) -> "Result[T]":
        return Result(ok=False, error=error, message=message)

    def __bool__(self) -> bool:
        return self.ok
