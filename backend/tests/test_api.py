"""API integration tests."""

from typing import Any, Optional

import pytest
from fastapi.testclient import TestClient

from sponsorgate.api.app import create_app
from sponsorgate.config import REQUIRED_VARIABLES
from sponsorgate.errors import ChainQueryError, ConfigurationError, SponsorRemoteError
from sponsorgate.models.verification import InteractionRecord
from sponsorgate.services.sponsorship import SponsorshipCoordinator
from sponsorgate.services.verification import InteractionVerifier

DAPP_PACKAGE = "0x" + "ab" * 32


class FakeSponsor:
    def __init__(self) -> None:
        self.request_error: Optional[Exception] = None
        self.finalize_error: Optional[Exception] = None
        self.calls = 0

    async def request_sponsorship(self, **kwargs: Any) -> dict[str, str]:
        self.calls += 1
        if self.request_error:
            raise self.request_error
        return {"digest": "D1", "bytes": "B1"}

    async def finalize_sponsorship(self, digest: str, signature: str) -> dict[str, str]:
        self.calls += 1
        if self.finalize_error:
            raise self.finalize_error
        return {"digest": digest}


class FakeChain:
    def __init__(self) -> None:
        self.detail_error: Optional[Exception] = None
        self.history: list[dict[str, Any]] = []
        self.calls = 0

    async def get_transaction_details(self, digest: str) -> dict[str, Any]:
        self.calls += 1
        if self.detail_error:
            raise self.detail_error
        return {"effects": {"status": "success"}, "objectChanges": [{"type": "mutated"}]}

    async def query_transactions_by_address(
        self,
        address: str,
        limit: int = 50,
        order: str = "descending",
    ) -> list[dict[str, Any]]:
        self.calls += 1
        return self.history


class FakeRecorder:
    def __init__(self) -> None:
        self.writes = 0

    async def record_interaction(self, dapp_id: str, user_address: str) -> InteractionRecord:
        self.writes += 1
        return InteractionRecord(
            dapp_id=dapp_id,
            user_address=user_address,
            verified=True,
            tx_digest="REC1",
        )


@pytest.fixture
def sponsor() -> FakeSponsor:
    return FakeSponsor()


@pytest.fixture
def chain() -> FakeChain:
    return FakeChain()


@pytest.fixture
def recorder() -> FakeRecorder:
    return FakeRecorder()


@pytest.fixture
def app(sponsor: FakeSponsor, chain: FakeChain, recorder: FakeRecorder):
    """Create test app with injected services."""
    return create_app(
        coordinator=SponsorshipCoordinator(sponsor=sponsor, chain=chain, network="testnet"),
        verifier=InteractionVerifier(history=chain, recorder=recorder),
    )


@pytest.fixture
def client(app) -> TestClient:
    with TestClient(app) as client:
        yield client


class TestHealthCheck:
    """Health check endpoint tests."""

    def test_health_check(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "network": "testnet"}

    def test_cors_preflight(self, client: TestClient) -> None:
        response = client.options(
            "/api/verify-user",
            headers={
                "Origin": "https://app.example",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Content-Type",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "https://app.example"
        assert response.headers["access-control-allow-credentials"] == "true"


class TestCreateSponsoredTransaction:
    """Create endpoint tests."""

    def test_returns_digest_and_bytes(self, client: TestClient) -> None:
        response = client.post(
            "/api/create-sponsored-transaction",
            json={"transactionKindBytes": "0xAA", "senderAddress": "0xUSER"},
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "digest": "D1", "bytes": "B1"}

    def test_missing_field_rejected(self, client: TestClient, sponsor: FakeSponsor) -> None:
        response = client.post(
            "/api/create-sponsored-transaction",
            json={"transactionKindBytes": "0xAA"},
        )

        assert response.status_code == 400
        assert "error" in response.json()
        assert sponsor.calls == 0

    def test_non_json_body_rejected(self, client: TestClient) -> None:
        response = client.post(
            "/api/create-sponsored-transaction",
            content=b"not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert "error" in response.json()

    def test_upstream_failure(self, client: TestClient, sponsor: FakeSponsor) -> None:
        sponsor.request_error = SponsorRemoteError(
            "HTTP 400", status_code=400, remote_message="Invalid sender"
        )

        response = client.post(
            "/api/create-sponsored-transaction",
            json={"transactionKindBytes": "0xAA", "senderAddress": "0xUSER"},
        )

        assert response.status_code == 502
        assert response.json() == {
            "error": "Sponsorship service request failed",
            "message": "Invalid sender",
        }


class TestExecuteSponsoredTransaction:
    """Execute endpoint tests."""

    def test_returns_effects(self, client: TestClient) -> None:
        response = client.post(
            "/api/execute-sponsored-transaction",
            json={"digest": "D1", "signature": "SIG"},
        )

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "digest": "D1",
            "effects": {"status": "success"},
            "objectChanges": [{"type": "mutated"}],
        }

    def test_empty_signature_rejected(
        self,
        client: TestClient,
        sponsor: FakeSponsor,
        chain: FakeChain,
    ) -> None:
        response = client.post(
            "/api/execute-sponsored-transaction",
            json={"digest": "D1", "signature": ""},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "digest and signature are required"}
        assert sponsor.calls == 0
        assert chain.calls == 0

    def test_post_commit_failure_carries_digest(
        self,
        client: TestClient,
        chain: FakeChain,
    ) -> None:
        chain.detail_error = ChainQueryError("fullnode timeout")

        response = client.post(
            "/api/execute-sponsored-transaction",
            json={"digest": "D1", "signature": "SIG"},
        )

        assert response.status_code == 502
        body = response.json()
        assert body["digest"] == "D1"
        assert body["committed"] is True


class TestVerifyUser:
    """Verification endpoint tests."""

    def test_no_package_id(self, client: TestClient, chain: FakeChain) -> None:
        response = client.post(
            "/api/verify-user",
            json={"userAddress": "0xUSER", "dappId": "0xDAPP"},
        )

        assert response.status_code == 200
        assert response.json() == {"verified": False, "message": "no package id"}
        assert chain.calls == 0

    def test_verified(
        self,
        client: TestClient,
        chain: FakeChain,
        recorder: FakeRecorder,
    ) -> None:
        chain.history = [{"digest": "T1", "transaction": {"target": f"{DAPP_PACKAGE}::game::play"}}]

        response = client.post(
            "/api/verify-user",
            json={"userAddress": "0xUSER", "dappId": "0xDAPP", "packageId": DAPP_PACKAGE},
        )

        assert response.status_code == 200
        assert response.json() == {"verified": True, "txDigest": "REC1"}
        assert recorder.writes == 1

    def test_missing_user_rejected(self, client: TestClient) -> None:
        response = client.post("/api/verify-user", json={"dappId": "0xDAPP"})

        assert response.status_code == 400
        assert response.json() == {"error": "userAddress and dappId are required"}


class TestStartup:
    """Startup configuration tests."""

    def test_missing_configuration_prevents_startup(
        self,
        monkeypatch: pytest.MonkeyPatch,
        tmp_path,
    ) -> None:
        monkeypatch.chdir(tmp_path)
        for name in REQUIRED_VARIABLES:
            monkeypatch.delenv(name, raising=False)

        app = create_app()

        with pytest.raises(ConfigurationError):
            with TestClient(app):
                pass
