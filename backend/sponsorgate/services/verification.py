import logging
from typing import Any, Optional, Protocol

from sponsorgate.errors import VerificationInternalError
from sponsorgate.models.verification import (
    INTERNAL_ERROR,
    NO_INTERACTION_FOUND,
    NO_PACKAGE_ID,
    ON_CHAIN_FAILURE,
    InteractionQuery,
    InteractionRecord,
    VerificationResult,
)
from sponsorgate.services.detection import InteractionDetector, substring_detector

logger = logging.getLogger(__name__)

# Number of most recent transactions inspected per user
HISTORY_LIMIT = 50


class TransactionHistorySource(Protocol):
    """Protocol for reading a user's transaction history."""

    async def query_transactions_by_address(
        self,
        address: str,
        limit: int = HISTORY_LIMIT,
        order: str = "descending",
    ) -> list[dict[str, Any]]:
        ...


class InteractionRecorder(Protocol):
    """Protocol for writing attestations to the registry."""

    async def record_interaction(self, dapp_id: str, user_address: str) -> InteractionRecord:
        ...


class InteractionVerifier:
    """
    Verifies that a user called a dApp's package and records it on-chain.

    verify() never raises. Any failure inside the workflow is logged and
    reported as a non-verified result, so callers can treat verification as
    advisory.
    """

    def __init__(
        self,
        history: TransactionHistorySource,
        recorder: InteractionRecorder,
        detector: InteractionDetector = substring_detector,
    ) -> None:
        self._history = history
        self._recorder = recorder
        self._detector = detector

    async def verify(
        self,
        user_address: str,
        dapp_id: str,
        package_id: Optional[str] = None,
    ) -> VerificationResult:
        """Run the verification workflow for one user and dApp."""
        query = InteractionQuery(
            user_address=user_address,
            dapp_id=dapp_id,
            package_id=package_id,
        )
        logger.info(
            f"Verifying user {user_address} for dApp {dapp_id} (package: {package_id})"
        )

        try:
            return await self._verify(query)
        except Exception as e:
            error = e if isinstance(e, VerificationInternalError) else VerificationInternalError(
                f"{type(e).__name__}: {e}"
            )
            logger.exception(f"Verification of {user_address} for {dapp_id} failed: {error}")
            return VerificationResult.failure(INTERNAL_ERROR)

    async def _verify(self, query: InteractionQuery) -> VerificationResult:
        if not query.package_id:
            return VerificationResult.failure(NO_PACKAGE_ID)

        transactions = await self._history.query_transactions_by_address(
            query.user_address,
            limit=HISTORY_LIMIT,
            order="descending",
        )
        if not isinstance(transactions, list):
            raise VerificationInternalError("Transaction history is not a list")

        if not any(self._detector(tx, query.package_id) for tx in transactions):
            logger.info(f"No interaction with {query.package_id} by {query.user_address}")
            return VerificationResult.failure(NO_INTERACTION_FOUND)

        logger.info(f"Interaction found! Recording verification for {query.user_address}...")

        record = await self._recorder.record_interaction(query.dapp_id, query.user_address)
        if not record.tx_digest:
            raise VerificationInternalError("Registry write returned no digest")

        if record.verified:
            logger.info(f"Verification recorded: {record.tx_digest}")
            return VerificationResult.success(record.tx_digest)

        return VerificationResult.failure(ON_CHAIN_FAILURE)
