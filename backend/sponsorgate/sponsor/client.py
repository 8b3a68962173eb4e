"""HTTP client for the Enoki transaction sponsorship API."""

import logging
from typing import Any, Optional

import httpx

from sponsorgate.errors import SponsorRemoteError, SponsorTransportError

logger = logging.getLogger(__name__)

ENOKI_API_BASE_URL = "https://api.enoki.mystenlabs.com/v1"


def _remote_message(response: httpx.Response) -> Optional[str]:
    """Pull the error message out of an Enoki error body, if any."""
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    if isinstance(body.get("message"), str):
        return body["message"]
    errors = body.get("errors")
    if isinstance(errors, list) and errors and isinstance(errors[0], dict):
        message = errors[0].get("message")
        if isinstance(message, str):
            return message
    return None


class EnokiClient:
    """
    Client for the sponsorship service.

    All requests carry the private API key as a bearer credential. Failures
    where no response arrived raise SponsorTransportError; responses the
    service marked as errors raise SponsorRemoteError with its message.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = ENOKI_API_BASE_URL,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ) -> None:
        """
        Initialize the client.

        Args:
            api_key: Enoki private API key
            base_url: Base URL of the Enoki API
            http_client: Preconfigured client (created if not provided)
            timeout: Request timeout in seconds
        """
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def _post(self, path: str, json: dict[str, Any]) -> dict[str, Any]:
        """
        Make an authenticated POST and return the ``data`` member.

        A 2xx response without a usable ``data`` object yields an empty dict;
        callers decide whether that is acceptable.
        """
        url = f"{self._base_url}{path}"
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = await self._client.post(url, json=json, headers=headers)
        except httpx.RequestError as e:
            raise SponsorTransportError(f"Request to {path} failed: {e}") from e

        if response.status_code >= 400:
            remote_message = _remote_message(response)
            logger.error(f"Enoki {path} returned HTTP {response.status_code}: {response.text}")
            raise SponsorRemoteError(
                f"HTTP {response.status_code}",
                status_code=response.status_code,
                remote_message=remote_message,
            )

        try:
            body = response.json()
        except ValueError:
            logger.warning(f"Enoki {path} returned a non-JSON body: {response.text!r}")
            return {}

        data = body.get("data") if isinstance(body, dict) else None
        return data if isinstance(data, dict) else {}

    async def request_sponsorship(
        self,
        network: str,
        tx_kind_bytes: str,
        sender: str,
        allowed_addresses: Optional[list[str]] = None,
        allowed_move_call_targets: Optional[list[str]] = None,
    ) -> dict[str, str]:
        """
        Ask the sponsor to wrap transaction kind bytes with its gas payment.

        Returns:
            Dict with ``digest`` and unsigned ``bytes``
        """
        payload: dict[str, Any] = {
            "network": network,
            "transactionBlockKindBytes": tx_kind_bytes,
            "sender": sender,
        }
        if allowed_addresses is not None:
            payload["allowedAddresses"] = allowed_addresses
        if allowed_move_call_targets is not None:
            payload["allowedMoveCallTargets"] = allowed_move_call_targets

        data = await self._post("/transaction-blocks/sponsor", payload)
        if not data.get("digest"):
            raise SponsorRemoteError("Response is missing data.digest")
        if "bytes" not in data:
            raise SponsorRemoteError("Response is missing data.bytes")
        return {"digest": data["digest"], "bytes": data["bytes"]}

    async def finalize_sponsorship(self, digest: str, signature: str) -> dict[str, str]:
        """
        Submit the user's signature so the sponsor executes the transaction.

        Returns:
            Dict with the executed ``digest``. Any 2xx means the sponsor
            accepted the signature, so the requested digest stands in when
            the body omits one.
        """
        data = await self._post(
            f"/transaction-blocks/sponsor/{digest}",
            {"signature": signature},
        )
        if not data.get("digest"):
            logger.warning(f"Enoki finalize for {digest} returned no digest; assuming committed")
        return {"digest": data.get("digest") or digest}
