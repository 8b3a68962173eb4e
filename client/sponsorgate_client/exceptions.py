"""Exceptions for the sponsorgate client."""

from typing import Optional


class SponsorGateClientError(Exception):
    """Base exception for sponsorgate client errors."""

    pass


class RequestRejectedError(SponsorGateClientError):
    """Raised when the API rejects a request as malformed (HTTP 400)."""

    pass


class SponsorshipFailedError(SponsorGateClientError):
    """Raised when the sponsorship service or the blockchain failed."""

    def __init__(self, error: str, message: Optional[str] = None):
        self.error = error
        self.message = message
        super().__init__(f"{error}: {message}" if message else error)


class CommittedWithoutDetailsError(SponsorshipFailedError):
    """
    Raised when a sponsored transaction committed but its effects are unavailable.

    The transaction is final; do not resubmit it.
    """

    def __init__(self, digest: str, error: str, message: Optional[str] = None):
        self.digest = digest
        super().__init__(error, message)


class NetworkError(SponsorGateClientError):
    """Raised when there's a network communication error."""

    pass
