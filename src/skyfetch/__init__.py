"""skyfetch -- weather-provider client with a time-bounded request cache.

The package is organised around a small network core: an
:class:`~skyfetch.client.endpoint.Endpoint` describes a request, the
dispatchers in :mod:`skyfetch.client` decide per request whether to serve
it from the in-memory :class:`~skyfetch.cache.ResponseCache` or fetch it,
and every failure is reported as one tag of the
:class:`~skyfetch.exceptions.NetworkError` taxonomy.

A Typer command-line application sits on top of the core::

    skyfetch search London
    skyfetch weather "London, United Kingdom" --refresh
    skyfetch recent list

Modules:
    app: Typer application factory and CLI entry point.
    models: Pydantic configuration models shared across the package.
    config: XDG-aware settings loading and persistence.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
