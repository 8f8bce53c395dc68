"""The value a dispatcher hands back for every request.

A :class:`Result` holds either the decoded value or exactly one
:class:`~skyfetch.exceptions.NetworkError`; there are no partial results.
Expected failures travel as values so that callers can branch on them
without ``try``/``except``, and :meth:`Result.unwrap` turns them back into
exceptions for code that prefers to let them propagate.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

from skyfetch.exceptions import NetworkError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of one request.

    Attributes:
        value: The decoded value.  May itself be ``None`` when the expected
            shape allows it, so test :attr:`ok` rather than the value.
        error: The failure, when the request did not succeed.
        from_cache: ``True`` when the value was served from the cache.
    """

    value: Optional[T] = None
    error: Optional[NetworkError] = None
    from_cache: bool = False

    @classmethod
    def success(cls, value: T, from_cache: bool = False) -> Result[T]:
        return cls(value=value, from_cache=from_cache)

    @classmethod
    def failure(cls, error: NetworkError) -> Result[T]:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, raising the contained error on failure."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    def map(self, fn: Callable[[T], U]) -> Result[U]:
        """Apply *fn* to a successful value; failures pass through unchanged."""
        if self.error is not None:
            return Result(error=self.error)
        return Result(value=fn(self.value), from_cache=self.from_cache)  # type: ignore[arg-type]
