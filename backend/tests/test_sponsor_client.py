import json
from typing import Any, Callable

import httpx
import pytest

from sponsorgate.errors import SponsorRemoteError, SponsorTransportError
from sponsorgate.sponsor.client import EnokiClient

BASE_URL = "https://enoki.test/v1"


def make_client(
    handler: Callable[[httpx.Request], httpx.Response],
) -> EnokiClient:
    return EnokiClient(
        api_key="enoki_private_key",
        base_url=BASE_URL,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


class TestRequestSponsorship:
    """Tests for the create call."""

    @pytest.mark.asyncio
    async def test_sends_authenticated_request(self) -> None:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"data": {"digest": "D1", "bytes": "B1"}})

        client = make_client(handler)

        result = await client.request_sponsorship("testnet", "0xAA", "0xUSER")

        assert result == {"digest": "D1", "bytes": "B1"}
        request = requests[0]
        assert str(request.url) == f"{BASE_URL}/transaction-blocks/sponsor"
        assert request.headers["Authorization"] == "Bearer enoki_private_key"
        assert json.loads(request.content) == {
            "network": "testnet",
            "transactionBlockKindBytes": "0xAA",
            "sender": "0xUSER",
        }

    @pytest.mark.asyncio
    async def test_includes_allow_lists(self) -> None:
        bodies: list[dict[str, Any]] = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={"data": {"digest": "D1", "bytes": "B1"}})

        client = make_client(handler)

        await client.request_sponsorship(
            "mainnet",
            "0xAA",
            "0xUSER",
            allowed_addresses=["0xFRIEND"],
            allowed_move_call_targets=["0x2::coin::join"],
        )

        assert bodies[0]["allowedAddresses"] == ["0xFRIEND"]
        assert bodies[0]["allowedMoveCallTargets"] == ["0x2::coin::join"]

    @pytest.mark.asyncio
    async def test_remote_error_keeps_message(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"message": "Sender is not allowed"})

        client = make_client(handler)

        with pytest.raises(SponsorRemoteError) as exc_info:
            await client.request_sponsorship("testnet", "0xAA", "0xUSER")

        assert exc_info.value.remote_status == 400
        assert exc_info.value.remote_message == "Sender is not allowed"

    @pytest.mark.asyncio
    async def test_remote_error_list_format(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403, json={"errors": [{"code": "forbidden", "message": "Bad key"}]})

        client = make_client(handler)

        with pytest.raises(SponsorRemoteError) as exc_info:
            await client.request_sponsorship("testnet", "0xAA", "0xUSER")

        assert exc_info.value.remote_message == "Bad key"

    @pytest.mark.asyncio
    async def test_remote_error_without_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, text="upstream unavailable")

        client = make_client(handler)

        with pytest.raises(SponsorRemoteError) as exc_info:
            await client.request_sponsorship("testnet", "0xAA", "0xUSER")

        assert exc_info.value.remote_message is None
        assert exc_info.value.to_response()["message"] == "HTTP 503"

    @pytest.mark.asyncio
    async def test_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused")

        client = make_client(handler)

        with pytest.raises(SponsorTransportError) as exc_info:
            await client.request_sponsorship("testnet", "0xAA", "0xUSER")

        assert exc_info.value.remote_message is None

    @pytest.mark.asyncio
    async def test_missing_digest_is_remote_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"data": {}})

        client = make_client(handler)

        with pytest.raises(SponsorRemoteError):
            await client.request_sponsorship("testnet", "0xAA", "0xUSER")

    @pytest.mark.asyncio
    async def test_non_json_success_is_remote_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"<html>")

        client = make_client(handler)

        with pytest.raises(SponsorRemoteError):
            await client.request_sponsorship("testnet", "0xAA", "0xUSER")


class TestFinalizeSponsorship:
    """Tests for the execute call."""

    @pytest.mark.asyncio
    async def test_posts_signature_to_digest_path(self) -> None:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"data": {"digest": "D1"}})

        client = make_client(handler)

        result = await client.finalize_sponsorship("D1", "SIG")

        assert result == {"digest": "D1"}
        assert str(requests[0].url) == f"{BASE_URL}/transaction-blocks/sponsor/D1"
        assert json.loads(requests[0].content) == {"signature": "SIG"}

    @pytest.mark.asyncio
    async def test_rejected_signature(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"message": "Invalid signature"})

        client = make_client(handler)

        with pytest.raises(SponsorRemoteError) as exc_info:
            await client.finalize_sponsorship("D1", "SIG")

        assert exc_info.value.remote_message == "Invalid signature"

    @pytest.mark.asyncio
    async def test_success_without_digest_keeps_requested_digest(self) -> None:
        """A 2xx finalize commits the transaction even if the body omits the digest."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"data": {}})

        client = make_client(handler)

        result = await client.finalize_sponsorship("D1", "SIG")

        assert result == {"digest": "D1"}

    @pytest.mark.asyncio
    async def test_success_with_unparseable_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"accepted")

        client = make_client(handler)

        result = await client.finalize_sponsorship("D1", "SIG")

        assert result == {"digest": "D1"}
