from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from fitplan.exceptions import StoreError

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """
    Result of a store call: either a value or a tagged StoreError.

    Handlers branch on ``error`` (ConflictError, NotFoundError, or plain
    StoreError) rather than catching driver exceptions.
    """
    value: Optional[T] = None
    error: Optional[StoreError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: StoreError) -> "Outcome[T]":
        return cls(error=error)

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value
