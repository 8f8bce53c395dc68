"""Decoding of raw response bodies into the shape a caller expects.

The dispatchers keep bodies as bytes until the last moment: the same bytes
are decoded whether they come off the wire or out of the cache, and only
bytes that decoded successfully are ever cached.  Decoding goes through a
Pydantic :class:`~pydantic.TypeAdapter`, so *shape* can be a model class,
a parametrised container such as ``list[SearchResult]``, or ``Any`` for
plain JSON.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from skyfetch.exceptions import DecodingError

T = TypeVar("T")


@lru_cache(maxsize=64)
def _adapter(shape: Any) -> TypeAdapter[Any]:
    return TypeAdapter(shape)


def decode_payload(payload: bytes, shape: type[T] | Any = Any) -> T:
    """Parse *payload* as JSON and validate it against *shape*.

    Args:
        payload: Raw response body.
        shape: The expected type.  Defaults to ``Any`` (plain JSON).

    Returns:
        The validated value.

    Raises:
        DecodingError: If the body is not JSON or does not match *shape*.
    """
    try:
        return _adapter(shape).validate_json(payload)
    except (ValidationError, ValueError) as exc:
        raise DecodingError(exc) from exc
