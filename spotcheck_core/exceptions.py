"""
Custom exceptions for the bill text spotcheck pipeline.

Mismatches between a reference and stored data are ordinary results and are
never raised. Only structural failures end up here.
"""


class SpotcheckError(Exception):
    """Base exception for spotcheck errors."""
    pass


class ParseError(SpotcheckError):
    """A scraped filename or print number did not match its expected format."""
    pass


class ArgumentError(SpotcheckError, ValueError):
    """A required argument was missing when invoking a spotcheck."""
    pass
