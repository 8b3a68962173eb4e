from sponsorgate.models.sponsorship import (
    ExecutionResult,
    SponsorshipTicket,
    TicketStatus,
)
from sponsorgate.models.verification import (
    InteractionQuery,
    InteractionRecord,
    VerificationResult,
)

__all__ = [
    "ExecutionResult",
    "SponsorshipTicket",
    "TicketStatus",
    "InteractionQuery",
    "InteractionRecord",
    "VerificationResult",
]
