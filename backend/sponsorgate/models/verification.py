from dataclasses import dataclass
from typing import Any, Optional

# Outcome messages returned to callers
NO_PACKAGE_ID = "no package id"
NO_INTERACTION_FOUND = "no interaction found"
ON_CHAIN_FAILURE = "on-chain verification failed"
INTERNAL_ERROR = "internal error"


@dataclass
class InteractionQuery:
    """Input to the verification workflow."""

    user_address: str
    dapp_id: str
    package_id: Optional[str] = None


@dataclass
class VerificationResult:
    """Structured outcome of a verification attempt."""

    verified: bool
    tx_digest: Optional[str] = None
    message: Optional[str] = None

    @staticmethod
    def success(tx_digest: str) -> "VerificationResult":
        return VerificationResult(verified=True, tx_digest=tx_digest)

    @staticmethod
    def failure(message: str) -> "VerificationResult":
        return VerificationResult(verified=False, message=message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize with camelCase keys, omitting empty fields."""
        data: dict[str, Any] = {"verified": self.verified}
        if self.tx_digest is not None:
            data["txDigest"] = self.tx_digest
        if self.message is not None:
            data["message"] = self.message
        return data


@dataclass
class InteractionRecord:
    """
    Attestation written to the registry contract.

    Owned by the registry, not by the caller; the service only authors it.
    """

    dapp_id: str
    user_address: str
    verified: bool
    tx_digest: Optional[str] = None
