"""routecheck exception hierarchy.

Shared across the config loader, application model, parsers, and checker
so every module raises and catches the same types.  Only the CLI turns
these into exit codes.
"""


class RouteCheckError(Exception):
    """Base for all routecheck-specific errors."""


class ConfigurationError(RouteCheckError):
    """Raised when the checker configuration is invalid.

    Typically raised while loading ``.routecheck.yml``.
    """


class AppModelError(RouteCheckError):
    """Raised when the application model cannot be loaded.

    Covers a failed ``bin/rails runner`` dump as well as malformed
    model JSON.
    """


class ParserError(RouteCheckError):
    """A parser adapter failed on a source file."""


class ParserNotInstalledError(ParserError):
    """The Ruby grammar package required for parsing is not installed."""
