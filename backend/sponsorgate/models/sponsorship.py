from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class TicketStatus(Enum):
    """Lifecycle of a sponsored transaction."""

    CREATED = "created"  # Unsigned bytes issued by the sponsor
    EXECUTED = "executed"  # Finalized with the user's signature
    FAILED = "failed"  # Finalization rejected


@dataclass
class SponsorshipTicket:
    """
    A sponsored transaction awaiting the user's signature.

    The digest is exactly the value the caller must hand back for
    execution. A ticket is finalized at most once.
    """

    digest: str
    bytes: str
    status: TicketStatus = TicketStatus.CREATED

    def mark_executed(self) -> None:
        """Record a successful finalization."""
        if self.status != TicketStatus.CREATED:
            raise ValueError(f"Ticket {self.digest} already {self.status.value}")
        self.status = TicketStatus.EXECUTED

    def mark_failed(self) -> None:
        """Record a rejected finalization."""
        if self.status != TicketStatus.CREATED:
            raise ValueError(f"Ticket {self.digest} already {self.status.value}")
        self.status = TicketStatus.FAILED


@dataclass
class ExecutionResult:
    """Outcome of a committed sponsored transaction."""

    digest: str
    effects: Optional[dict[str, Any]] = None
    object_changes: list[dict[str, Any]] = field(default_factory=list)
