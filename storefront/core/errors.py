"""Errors raised by the Data Access Layer."""


class DataAccessError(Exception):
    """Base class for data access errors."""


class TierError(DataAccessError):
    """A storage tier is unreachable or failed an operation.

    Absorbed on reads (the next tier is tried); on writes the next tier is
    tried and the local mutation is kept.
    """

    def __init__(self, tier: str, operation: str, message: str) -> None:
        super().__init__(f"{tier} {operation} failed: {message}")
        self.tier = tier
        self.operation = operation


class AuthenticationError(DataAccessError):
    """Missing, invalid or expired admin credential.

    Never triggers a fallback to another tier for writes.
    """


class RejectedError(DataAccessError):
    """A tier refused the mutation under a business rule (e.g. a 409 conflict).

    Like AuthenticationError it never falls through to another tier: the
    local change is rolled back.
    """


class PersistenceError(DataAccessError):
    """A write could not be persisted to any tier, local cache included."""
