"""Exception hierarchy for skyfetch.

All exceptions inherit from :class:`SkyfetchError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`skyfetch.exit_codes`.
The top-level error handler in :func:`skyfetch.app.main` catches
``SkyfetchError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Request failures form a closed taxonomy under :class:`NetworkError`. The
dispatchers never raise these past their own boundary; they return them
inside a :class:`~skyfetch.client.result.Result`, and callers raise them
with :meth:`~skyfetch.client.result.Result.unwrap` when they want to.

Subclass hierarchy::

    SkyfetchError (exit 1)
    +-- ConfigError             (exit 1)
    +-- NetworkError
        +-- InvalidURL          (exit 2)
        +-- InvalidResponse     (exit 5)
        +-- HTTPError           (exit 4 on 404, otherwise 5)
        +-- RateLimitExceeded   (exit 8)
        +-- RequestTimeout      (exit 6)
        +-- TLSError            (exit 6)
        +-- ConnectionError_    (exit 6)
        +-- DecodingError       (exit 9)
"""

from __future__ import annotations

import enum
from typing import Optional

from skyfetch.exit_codes import (
    EXIT_CONNECTION_ERROR,
    EXIT_DECODING_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_RATE_LIMITED,
    EXIT_SERVER_ERROR,
)


class SkyfetchError(Exception):
    """Base exception for all skyfetch errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`skyfetch.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(SkyfetchError):
    """Raised for configuration problems (missing API key, invalid settings file)."""

    exit_code = EXIT_GENERIC_FAILURE


# --- Network taxonomy ---


class ErrorKind(str, enum.Enum):
    """The eight tags a failed request can carry."""

    INVALID_URL = "invalid_url"
    INVALID_RESPONSE = "invalid_response"
    HTTP_ERROR = "http_error"
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"
    TIMEOUT = "timeout"
    TLS_ERROR = "tls_error"
    NETWORK_ERROR = "network_error"
    DECODING_ERROR = "decoding_error"


class NetworkError(SkyfetchError):
    """Base class of the request failure taxonomy.

    Each subclass fixes a :class:`ErrorKind` tag, whether the failure is
    worth retrying from the user's point of view, and a recovery suggestion
    shown next to the message.  Subclasses that wrap a lower-level failure
    keep it on :attr:`cause`.

    Two errors compare equal when they share a tag and a message.  The
    message embeds the cause's own message, so equality never looks at the
    structure of the underlying exception.
    """

    kind: ErrorKind
    retryable: bool = False
    recovery_suggestion: str = "Please try again later"

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause

    @property
    def message(self) -> str:
        return str(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NetworkError):
            return NotImplemented
        return self.kind == other.kind and self.message == other.message

    def __hash__(self) -> int:
        return hash((self.kind, self.message))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


def _cause_message(cause: BaseException) -> str:
    return str(cause) or type(cause).__name__


class InvalidURL(NetworkError):
    """The endpoint could not form a valid URL."""

    kind = ErrorKind.INVALID_URL
    exit_code = EXIT_INVALID_USAGE
    recovery_suggestion = "Please verify the URL and try again"

    def __init__(self, url: str = "") -> None:
        message = "Invalid URL provided"
        if url:
            message = f"{message}: {url}"
        super().__init__(message)
        self.url = url


class InvalidResponse(NetworkError):
    """The transport answered with something that is not a well-formed HTTP response."""

    kind = ErrorKind.INVALID_RESPONSE
    exit_code = EXIT_SERVER_ERROR
    retryable = True
    recovery_suggestion = "Please try again later. If the problem persists, contact support"

    def __init__(self, cause: Optional[BaseException] = None) -> None:
        message = "Invalid response from server"
        if cause is not None:
            message = f"{message}: {_cause_message(cause)}"
        super().__init__(message, cause)


class HTTPError(NetworkError):
    """Status code outside ``[200, 299]`` other than 429."""

    kind = ErrorKind.HTTP_ERROR
    exit_code = EXIT_SERVER_ERROR
    recovery_suggestion = "Please try again later. If the problem persists, contact support"

    def __init__(self, status_code: int) -> None:
        super().__init__(f"HTTP error: {status_code}")
        self.status_code = status_code
        self.retryable = 500 <= status_code <= 599
        if status_code == 404:
            self.exit_code = EXIT_NOT_FOUND


class RateLimitExceeded(NetworkError):
    """The provider answered HTTP 429."""

    kind = ErrorKind.RATE_LIMIT_EXCEEDED
    exit_code = EXIT_RATE_LIMITED
    retryable = True

    def __init__(self) -> None:
        super().__init__("Too many requests. Please try again later")
        self.status_code = 429


class RequestTimeout(NetworkError):
    """The transport call exceeded the configured request timeout."""

    kind = ErrorKind.TIMEOUT
    exit_code = EXIT_CONNECTION_ERROR
    retryable = True

    def __init__(self, cause: Optional[BaseException] = None) -> None:
        super().__init__("Request timed out. Please try again", cause)


class TLSError(NetworkError):
    """Secure-connection negotiation failed."""

    kind = ErrorKind.TLS_ERROR
    exit_code = EXIT_CONNECTION_ERROR
    recovery_suggestion = "Please check your internet connection and try again"

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"SSL error: {_cause_message(cause)}", cause)


class ConnectionError_(NetworkError):
    """Any other transport-level failure (connectivity, DNS, reset).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    kind = ErrorKind.NETWORK_ERROR
    exit_code = EXIT_CONNECTION_ERROR
    retryable = True
    recovery_suggestion = "Please check your internet connection and try again"

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"Network error: {_cause_message(cause)}", cause)


class DecodingError(NetworkError):
    """The response body failed to parse into the expected shape."""

    kind = ErrorKind.DECODING_ERROR
    exit_code = EXIT_DECODING_ERROR
    recovery_suggestion = "Please update the app to the latest version"

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"Failed to decode data: {_cause_message(cause)}", cause)
