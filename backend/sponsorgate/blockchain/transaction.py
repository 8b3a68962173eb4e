"""Registry writes signed by the administrative identity."""

import asyncio
import logging
from typing import Any, Optional, Protocol

from sponsorgate.blockchain.identity import AdminIdentity
from sponsorgate.models.verification import InteractionRecord

logger = logging.getLogger(__name__)

# Shared Clock object on every Sui network
SUI_CLOCK_OBJECT_ID = "0x6"


class SignedTransactionGateway(Protocol):
    """Anything able to submit a transaction on behalf of an identity."""

    async def submit_signed_transaction(
        self,
        identity: AdminIdentity,
        tx_data: dict[str, Any],
    ) -> dict[str, Any]:
        ...


class TransactionSubmitter:
    """
    Submits ``record_interaction`` calls to the registry contract.

    All transactions are signed by the admin identity and go out one at a
    time, so the service never races itself on the admin's gas objects.
    """

    def __init__(
        self,
        gateway: SignedTransactionGateway,
        identity: AdminIdentity,
        gas_budget: Optional[int] = None,
    ) -> None:
        """
        Initialize the transaction submitter.

        Args:
            gateway: Client that builds, signs and executes transactions
            identity: Admin identity holding the indexer capability
            gas_budget: Gas budget in MIST (node default if not given)
        """
        self._gateway = gateway
        self._identity = identity
        self._gas_budget = gas_budget
        self._lock = asyncio.Lock()

    @property
    def admin_address(self) -> str:
        return self._identity.address

    async def record_interaction(self, dapp_id: str, user_address: str) -> InteractionRecord:
        """
        Record a verified interaction on-chain.

        Contract signature:
        record_interaction(cap, registry, dapp_id, user, clock)

        Returns:
            The attestation, ``verified`` reflecting the effects status
        """
        identity = self._identity
        tx_data: dict[str, Any] = {
            "target": identity.record_target,
            "arguments": [
                identity.cap_id,
                identity.registry_id,
                dapp_id,
                user_address,
                SUI_CLOCK_OBJECT_ID,
            ],
        }
        if self._gas_budget is not None:
            tx_data["gas_budget"] = self._gas_budget

        logger.info(f"Submitting record_interaction: dapp={dapp_id} user={user_address}")

        async with self._lock:
            result = await self._gateway.submit_signed_transaction(identity, tx_data)

        digest = result["digest"]
        effects = result.get("effects") or {}
        status = effects.get("status", {}).get("status")
        if status != "success":
            logger.error(f"record_interaction {digest} failed: {effects.get('status')}")

        return InteractionRecord(
            dapp_id=dapp_id,
            user_address=user_address,
            verified=status == "success",
            tx_digest=digest,
        )
