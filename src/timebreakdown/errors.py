"""Failures that abort a time breakdown run, each mapped to its own exit code.

Record-level problems such as an unparseable message timestamp are not
errors here: normalization skips and counts them instead.
"""


class TimeBreakdownError(Exception):
    """Base exception for failures that stop the breakdown from being produced."""


class ConfigurationError(TimeBreakdownError):
    """Raised when the Supabase project URL is missing or not an http(s) URL."""


class AuthenticationError(TimeBreakdownError):
    """Raised when ``SUPABASE_KEY`` is unset or PostgREST answers 401/403."""


class ApiError(TimeBreakdownError):
    """Raised when a PostgREST GET fails, returns an error status, or its body is not a JSON row list."""


class DataValidationError(TimeBreakdownError):
    """Raised when a submission or message row arrives without its id, or a submission without its artist id."""
