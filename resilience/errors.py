"""
Engine error taxonomy.

Only BusinessNotFoundError aborts report generation. Missing subsystem data is
never raised; it degrades the affected factor instead.
"""


class ResilienceError(Exception):
    """Base class for all engine errors."""


class BusinessNotFoundError(ResilienceError):
    """The business profile could not be located."""

    def __init__(self, business_id: str) -> None:
        super().__init__(f"Business not found: {business_id}")
        self.business_id = business_id


class MissingFundDataError(ResilienceError):
    """A risk analysis was requested without a fund snapshot."""

    def __init__(self, message: str = "missing fund data") -> None:
        super().__init__(message)


class ComputationError(ResilienceError):
    """Internal invariant violated. Indicates a programming error."""
