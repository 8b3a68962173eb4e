"""Client for the sponsorgate API."""

from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from sponsorgate_client.exceptions import (
    CommittedWithoutDetailsError,
    NetworkError,
    RequestRejectedError,
    SponsorshipFailedError,
)


@dataclass
class SponsoredTransaction:
    """Unsigned sponsored transaction returned by the create step."""

    digest: str
    bytes: str


@dataclass
class ExecutedTransaction:
    """Committed sponsored transaction."""

    digest: str
    effects: Optional[dict[str, Any]] = None
    object_changes: list[dict[str, Any]] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return (self.effects or {}).get("status", {}).get("status") == "success"


@dataclass
class VerificationOutcome:
    """Result of an interaction verification."""

    verified: bool
    tx_digest: Optional[str] = None
    message: Optional[str] = None


class SponsorGateClient:
    """
    Client for requesting gas sponsorship and interaction verification.

    The user's signature over the sponsored bytes is produced by the
    caller's wallet; this client only relays it.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: Base URL of the sponsorgate API
            timeout: Request timeout in seconds
            http_client: Preconfigured client (created if not provided)
        """
        self._base_url = base_url.rstrip("/")
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "SponsorGateClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _post(self, path: str, json: dict[str, Any]) -> dict[str, Any]:
        """Make a request to the API and map error bodies to exceptions."""
        try:
            response = await self._client.post(f"{self._base_url}{path}", json=json)
        except httpx.RequestError as e:
            raise NetworkError(f"Request failed: {e}") from e

        try:
            body = response.json()
        except ValueError:
            raise NetworkError(f"HTTP {response.status_code}: {response.text}")

        if response.status_code == 400:
            raise RequestRejectedError(body.get("error", response.text))
        if response.status_code >= 400:
            error = body.get("error", f"HTTP {response.status_code}")
            if body.get("committed") and body.get("digest"):
                raise CommittedWithoutDetailsError(body["digest"], error, body.get("message"))
            raise SponsorshipFailedError(error, body.get("message"))

        return body

    async def create_sponsored_transaction(
        self,
        transaction_kind_bytes: str,
        sender_address: str,
        allowed_addresses: Optional[list[str]] = None,
        allowed_move_call_targets: Optional[list[str]] = None,
    ) -> SponsoredTransaction:
        """
        Request sponsorship for a transaction kind.

        Args:
            transaction_kind_bytes: Base64 transaction kind bytes
            sender_address: Address that will sign the transaction
            allowed_addresses: Optional address allow-list
            allowed_move_call_targets: Optional move call allow-list

        Returns:
            The bytes to sign and the digest to execute with
        """
        payload: dict[str, Any] = {
            "transactionKindBytes": transaction_kind_bytes,
            "senderAddress": sender_address,
        }
        if allowed_addresses is not None:
            payload["allowedAddresses"] = allowed_addresses
        if allowed_move_call_targets is not None:
            payload["allowedMoveCallTargets"] = allowed_move_call_targets

        body = await self._post("/api/create-sponsored-transaction", payload)
        return SponsoredTransaction(digest=body["digest"], bytes=body["bytes"])

    async def execute_sponsored_transaction(
        self,
        digest: str,
        signature: str,
    ) -> ExecutedTransaction:
        """
        Execute a sponsored transaction with the user's signature.

        Raises:
            CommittedWithoutDetailsError: The transaction is final but its
                effects could not be read
            SponsorshipFailedError: Nothing was committed
        """
        body = await self._post(
            "/api/execute-sponsored-transaction",
            {"digest": digest, "signature": signature},
        )
        return ExecutedTransaction(
            digest=body["digest"],
            effects=body.get("effects"),
            object_changes=body.get("objectChanges") or [],
        )

    async def verify_user(
        self,
        user_address: str,
        dapp_id: str,
        package_id: Optional[str] = None,
    ) -> VerificationOutcome:
        """Ask the service to verify and record a user's dApp interaction."""
        payload: dict[str, Any] = {"userAddress": user_address, "dappId": dapp_id}
        if package_id is not None:
            payload["packageId"] = package_id

        body = await self._post("/api/verify-user", payload)
        return VerificationOutcome(
            verified=body["verified"],
            tx_digest=body.get("txDigest"),
            message=body.get("message"),
        )
