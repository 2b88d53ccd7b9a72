"""
Typed result for operations that can fail validation.

UI callers check `success` and show `error.message` inline instead of
handling exceptions.
"""
import functools
import logging
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

from app.core.exceptions import PersistenceFailure, PlannerError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """Outcome of a planning operation."""
    success: bool
    value: Optional[T] = None
    error: Optional[PlannerError] = None

    @classmethod
    def ok(cls, value: T) -> "OperationResult[T]":
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, error: PlannerError) -> "OperationResult[T]":
        return cls(success=False, error=error)

    def unwrap(self) -> T:
        """Return the value or raise the stored error."""
        if not self.success:
            raise self.error
        return self.value


def returns_result(func: Callable[..., T]) -> Callable[..., OperationResult[T]]:
    """
    Wrap a function that raises PlannerError so it returns an OperationResult.

    PersistenceFailure is not a validation error and is re-raised unchanged.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> OperationResult[T]:
        try:
            value = func(*args, **kwargs)
        except PersistenceFailure:
            raise
        except PlannerError as e:
            logger.warning(f"{func.__name__} rejected: {e.code}: {e.message}")
            return OperationResult.fail(e)
        return OperationResult.ok(value)

    return wrapper
