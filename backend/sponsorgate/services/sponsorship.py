import logging
from typing import Any, Optional, Protocol

from sponsorgate.errors import (
    PostCommitQueryError,
    UpstreamServiceError,
    ValidationError,
)
from sponsorgate.models.sponsorship import ExecutionResult, SponsorshipTicket

logger = logging.getLogger(__name__)


class SponsorService(Protocol):
    """Protocol for the external sponsorship API."""

    async def request_sponsorship(
        self,
        network: str,
        tx_kind_bytes: str,
        sender: str,
        allowed_addresses: Optional[list[str]] = None,
        allowed_move_call_targets: Optional[list[str]] = None,
    ) -> dict[str, str]:
        """Create a sponsored transaction. Returns digest and bytes."""
        ...

    async def finalize_sponsorship(self, digest: str, signature: str) -> dict[str, str]:
        """Execute a sponsored transaction with the user's signature. Returns digest."""
        ...


class TransactionDetailSource(Protocol):
    """Protocol for reading committed transaction details."""

    async def get_transaction_details(self, digest: str) -> dict[str, Any]:
        """Returns effects and objectChanges."""
        ...


class SponsorshipCoordinator:
    """
    Runs the two-phase sponsorship protocol.

    Phase one asks the sponsor for unsigned bytes and a digest. Phase two
    hands the user's signature back to the sponsor, which commits the
    transaction, then reads the effects from the fullnode. Finalization is
    never retried: once the sponsor accepts a signature the transaction is
    final, whatever happens afterwards.
    """

    def __init__(
        self,
        sponsor: SponsorService,
        chain: TransactionDetailSource,
        network: str,
    ) -> None:
        self._sponsor = sponsor
        self._chain = chain
        self._network = network

    @property
    def network(self) -> str:
        return self._network

    async def create_sponsorship(
        self,
        transaction_kind_bytes: str,
        sender_address: str,
        allowed_addresses: Optional[list[str]] = None,
        allowed_move_call_targets: Optional[list[str]] = None,
    ) -> SponsorshipTicket:
        """
        Create a sponsored transaction for the sender to sign.

        Raises:
            ValidationError: If either required argument is empty
            UpstreamServiceError: If the sponsor rejects or cannot be reached
        """
        if not transaction_kind_bytes or not sender_address:
            raise ValidationError("transactionKindBytes and senderAddress are required")

        logger.info(f"Creating sponsored transaction for {sender_address} on {self._network}")

        try:
            data = await self._sponsor.request_sponsorship(
                network=self._network,
                tx_kind_bytes=transaction_kind_bytes,
                sender=sender_address,
                allowed_addresses=allowed_addresses,
                allowed_move_call_targets=allowed_move_call_targets,
            )
        except UpstreamServiceError as e:
            logger.error(f"Sponsorship request failed for {sender_address}: {e.remote_message or e}")
            raise

        ticket = SponsorshipTicket(digest=data["digest"], bytes=data["bytes"])
        logger.info(f"Sponsored transaction created: {ticket.digest}")
        return ticket

    async def execute_sponsorship(self, digest: str, signature: str) -> ExecutionResult:
        """
        Finalize a sponsored transaction and fetch its effects.

        Raises:
            ValidationError: If digest or signature is empty
            UpstreamServiceError: If finalization failed (nothing was committed)
            PostCommitQueryError: If the transaction committed but its
                details could not be fetched
        """
        if not digest or not signature:
            raise ValidationError("digest and signature are required")

        ticket = SponsorshipTicket(digest=digest, bytes="")
        logger.info(f"Executing sponsored transaction: {digest}")

        try:
            finalized = await self._sponsor.finalize_sponsorship(digest, signature)
        except UpstreamServiceError as e:
            ticket.mark_failed()
            logger.error(
                f"Sponsored transaction {ticket.digest} {ticket.status.value}: "
                f"{e.remote_message or e}"
            )
            raise

        # Committed from here on
        ticket.mark_executed()
        committed_digest = finalized.get("digest") or ticket.digest
        logger.info(f"Sponsored transaction {committed_digest} {ticket.status.value}")

        try:
            details = await self._chain.get_transaction_details(committed_digest)
        except Exception as e:
            logger.error(f"Detail query for committed {committed_digest} failed: {e}")
            raise PostCommitQueryError(committed_digest, str(e)) from e

        return ExecutionResult(
            digest=committed_digest,
            effects=details.get("effects"),
            object_changes=details.get("objectChanges") or [],
        )
