"""
Exception hierarchy for the BOM Ledger engine.

Limit violations are raised to the caller immediately. Fetch and decode
failures are raised by part sources and absorbed by ``Part.refresh``, which
leaves the part unresolved instead of crashing the sweep.
"""


class BOMError(Exception):
    """Base class for all errors raised by the package."""


class ApplicationLimitsError(BOMError):
    """A configured resource limit (row cap, assembly depth or cycle) would be exceeded."""


class PartResolutionError(BOMError):
    """
    A part could not be fetched or decoded.

    Attributes:
        url: The reference that failed to resolve, when known.
    """

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url
