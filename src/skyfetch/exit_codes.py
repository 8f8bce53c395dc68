"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~skyfetch.exceptions.SkyfetchError` subclass.
Shell wrappers can inspect the exit code to tell a transient failure
(connection, rate limit) from a configuration problem without parsing
stderr.

Example::

    $ skyfetch weather London
    $ echo $?
    8   # EXIT_RATE_LIMITED -- the provider throttled the request
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""Invalid arguments, or a request target that cannot form a valid URL."""

EXIT_NOT_FOUND = 4
"""The provider answered HTTP 404."""

EXIT_SERVER_ERROR = 5
"""The provider answered with a non-2xx status or a malformed response."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, TLS failure, DNS, connection refused)."""

EXIT_RATE_LIMITED = 8
"""The provider rejected the request with HTTP 429."""

EXIT_DECODING_ERROR = 9
"""The response body did not match the expected schema."""
