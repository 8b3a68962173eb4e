"""Sui JSON-RPC client for querying and submitting transactions."""

import logging
from typing import Any, Optional

import httpx

from sponsorgate.blockchain.identity import AdminIdentity
from sponsorgate.errors import ChainQueryError, ChainSubmissionError

logger = logging.getLogger(__name__)

FULLNODE_URLS = {
    "mainnet": "https://fullnode.mainnet.sui.io:443",
    "testnet": "https://fullnode.testnet.sui.io:443",
    "devnet": "https://fullnode.devnet.sui.io:443",
    "localnet": "http://127.0.0.1:9000",
}

DEFAULT_GAS_BUDGET = 10_000_000


def get_fullnode_url(network: str) -> str:
    """Resolve the public fullnode URL for a network name."""
    try:
        return FULLNODE_URLS[network]
    except KeyError:
        raise ValueError(f"Unknown Sui network: {network}")


class RpcError(Exception):
    """JSON-RPC level failure (transport, HTTP status or error member)."""

    pass


class SuiClient:
    """
    Thin client for a Sui fullnode.

    Every operation is a direct pass-through to a JSON-RPC method; the only
    decision made here is which fullnode to talk to.
    """

    def __init__(
        self,
        rpc_url: str,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ) -> None:
        self._rpc_url = rpc_url
        self._client = http_client or httpx.AsyncClient(timeout=timeout)
        self._request_id = 0

    @property
    def rpc_url(self) -> str:
        return self._rpc_url

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def _call(self, method: str, params: list[Any]) -> Any:
        """
        Make a JSON-RPC call.

        Returns:
            The ``result`` member of the response

        Raises:
            RpcError: On transport failure, non-2xx status or an RPC error
        """
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": method,
            "params": params,
        }

        try:
            response = await self._client.post(self._rpc_url, json=payload)
        except httpx.RequestError as e:
            raise RpcError(f"{method} request failed: {e}") from e

        if response.status_code >= 400:
            raise RpcError(f"{method} returned HTTP {response.status_code}: {response.text}")

        try:
            body = response.json()
        except ValueError as e:
            raise RpcError(f"{method} returned invalid JSON") from e

        if "error" in body:
            raise RpcError(f"{method} error: {body['error']}")

        return body.get("result")

    async def query_transactions_by_address(
        self,
        address: str,
        limit: int = 50,
        order: str = "descending",
    ) -> list[dict[str, Any]]:
        """
        Fetch transactions sent by an address.

        Args:
            address: Sender address
            limit: Maximum number of records
            order: "descending" (most recent first) or "ascending"

        Returns:
            Transaction records with input, effects and events
        """
        query = {
            "filter": {"FromAddress": address},
            "options": {
                "showInput": True,
                "showEffects": True,
                "showEvents": True,
            },
        }
        try:
            result = await self._call(
                "suix_queryTransactionBlocks",
                [query, None, limit, order == "descending"],
            )
        except RpcError as e:
            raise ChainQueryError(str(e)) from e

        if not isinstance(result, dict) or not isinstance(result.get("data"), list):
            raise ChainQueryError("Malformed transaction history response")
        return result["data"]

    async def get_transaction_details(self, digest: str) -> dict[str, Any]:
        """
        Fetch effects and object changes for a transaction.

        Returns:
            Dict with ``effects`` and ``objectChanges``
        """
        options = {"showEffects": True, "showObjectChanges": True}
        try:
            result = await self._call("sui_getTransactionBlock", [digest, options])
        except RpcError as e:
            raise ChainQueryError(str(e)) from e

        if not isinstance(result, dict):
            raise ChainQueryError(f"Malformed transaction response for {digest}")
        return {
            "effects": result.get("effects"),
            "objectChanges": result.get("objectChanges", []),
        }

    async def submit_signed_transaction(
        self,
        identity: AdminIdentity,
        tx_data: dict[str, Any],
    ) -> dict[str, Any]:
        """
        Build, sign and execute a move call as the given identity.

        Args:
            identity: Signer; its address is also the sender and gas owner
            tx_data: ``target`` ("pkg::module::function"), ``arguments``,
                optional ``type_arguments`` and ``gas_budget``

        Returns:
            Dict with ``digest`` and ``effects``
        """
        package, module, function = tx_data["target"].split("::")
        build_params = [
            identity.address,
            package,
            module,
            function,
            tx_data.get("type_arguments", []),
            tx_data["arguments"],
            None,  # gas object picked by the node
            str(tx_data.get("gas_budget", DEFAULT_GAS_BUDGET)),
        ]

        try:
            built = await self._call("unsafe_moveCall", build_params)
        except RpcError as e:
            raise ChainSubmissionError(f"Failed to build transaction: {e}") from e

        if not isinstance(built, dict) or "txBytes" not in built:
            raise ChainSubmissionError("Malformed build response")

        tx_bytes = built["txBytes"]
        signature = identity.keypair.sign_transaction(tx_bytes)

        try:
            result = await self._call(
                "sui_executeTransactionBlock",
                [
                    tx_bytes,
                    [signature],
                    {"showEffects": True},
                    "WaitForLocalExecution",
                ],
            )
        except RpcError as e:
            raise ChainSubmissionError(f"Failed to execute transaction: {e}") from e

        if not isinstance(result, dict) or "digest" not in result:
            raise ChainSubmissionError("Malformed execution response")

        logger.info(f"Executed {tx_data['target']}: {result['digest']}")
        return {"digest": result["digest"], "effects": result.get("effects")}
