"""Outcome values returned by session operations."""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from .errors import PantryError

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """An operation that completed with a value."""

    value: T
    message: str = ""

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """An operation that failed; nothing was changed locally."""

    error: PantryError
    message: str = ""

    @property
    def ok(self) -> bool:
        return False

    @property
    def error_code(self) -> str:
        return self.error.error_code

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": False,
            "error": f"{self.message}: {self.error}" if self.message else str(self.error),
            "error_code": self.error_code,
        }


Result = Success[T] | Failure
