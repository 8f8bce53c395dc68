"""Error classification for the dispatchers.

Maps what the transport hands back -- an :mod:`httpx` exception or an HTTP
status code -- onto exactly one tag of the
:class:`~skyfetch.exceptions.NetworkError` taxonomy:

==================================  ==========================
Input                               Result
==================================  ==========================
:class:`httpx.TimeoutException`     :class:`RequestTimeout`
TLS handshake / certificate error   :class:`TLSError`
malformed HTTP from the peer        :class:`InvalidResponse`
any other transport failure         :class:`ConnectionError_`
status 429                          :class:`RateLimitExceeded`
other status outside 200-299        :class:`HTTPError`
==================================  ==========================
"""

from __future__ import annotations

import ssl
from typing import Optional

import httpx

from skyfetch.exceptions import (
    ConnectionError_,
    HTTPError,
    InvalidResponse,
    NetworkError,
    RateLimitExceeded,
    RequestTimeout,
    TLSError,
)

_TLS_MARKERS = ("ssl", "certificate verify")


def classify_transport_error(exc: BaseException) -> NetworkError:
    """Classify a failure raised while no response was received."""
    if isinstance(exc, httpx.TimeoutException):
        return RequestTimeout(exc)
    if _is_tls_failure(exc):
        return TLSError(exc)
    if isinstance(exc, (httpx.ProtocolError, httpx.DecodingError)):
        return InvalidResponse(exc)
    return ConnectionError_(exc)


def classify_status(status_code: int) -> Optional[NetworkError]:
    """Return the error for *status_code*, or ``None`` for a 2xx status."""
    if 200 <= status_code <= 299:
        return None
    if status_code == 429:
        return RateLimitExceeded()
    return HTTPError(status_code)


def describe_error(error: NetworkError) -> str:
    """Render *error* for a user: the message followed by the recovery suggestion."""
    return f"{error.message}. {error.recovery_suggestion}"


def _is_tls_failure(exc: BaseException) -> bool:
    """Walk the exception chain looking for an SSL failure."""
    seen: set[int] = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, ssl.SSLError):
            return True
        text = str(current).lower()
        if any(marker in text for marker in _TLS_MARKERS):
            return True
        current = current.__cause__ or current.__context__
    return False
