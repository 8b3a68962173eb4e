from sponsorgate_client.client import (
    ExecutedTransaction,
    SponsorGateClient,
    SponsoredTransaction,
    VerificationOutcome,
)
from sponsorgate_client.exceptions import (
    CommittedWithoutDetailsError,
    NetworkError,
    RequestRejectedError,
    SponsorGateClientError,
    SponsorshipFailedError,
)

__all__ = [
    "SponsorGateClient",
    "SponsoredTransaction",
    "ExecutedTransaction",
    "VerificationOutcome",
    "SponsorGateClientError",
    "RequestRejectedError",
    "SponsorshipFailedError",
    "CommittedWithoutDetailsError",
    "NetworkError",
]
