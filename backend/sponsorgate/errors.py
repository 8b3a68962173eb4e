"""Error taxonomy shared by the services and the API layer."""

from typing import Any, Optional


class SponsorGateError(Exception):
    """Base exception for sponsorgate errors."""

    status_code = 500
    error = "Internal server error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_response(self) -> dict[str, Any]:
        """Body returned to API callers."""
        return {"error": self.error, "message": self.message}


class ValidationError(SponsorGateError):
    """Raised when a required field is missing or empty."""

    status_code = 400

    def to_response(self) -> dict[str, Any]:
        return {"error": self.message}


class ConfigurationError(SponsorGateError):
    """Raised when required configuration is absent or invalid at startup."""

    error = "Service misconfigured"


class UpstreamServiceError(SponsorGateError):
    """Raised when the sponsorship service rejects a request or is unreachable."""

    status_code = 502
    error = "Sponsorship service request failed"

    def __init__(self, message: str, remote_message: Optional[str] = None) -> None:
        self.remote_message = remote_message
        super().__init__(message)

    def to_response(self) -> dict[str, Any]:
        return {"error": self.error, "message": self.remote_message or self.message}


class SponsorTransportError(UpstreamServiceError):
    """No response was received from the sponsorship service."""

    pass


class SponsorRemoteError(UpstreamServiceError):
    """The sponsorship service answered with an error."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        remote_message: Optional[str] = None,
    ) -> None:
        self.remote_status = status_code
        super().__init__(message, remote_message=remote_message)


class PostCommitQueryError(SponsorGateError):
    """
    Finalization committed the transaction but its details could not be read.

    The transaction identified by ``digest`` is final on-chain; only the
    effects and object changes are unavailable.
    """

    status_code = 502
    error = "Transaction committed but details unavailable"

    def __init__(self, digest: str, cause: str) -> None:
        self.digest = digest
        super().__init__(f"Transaction {digest} committed; detail query failed: {cause}")

    def to_response(self) -> dict[str, Any]:
        return {
            "error": self.error,
            "message": self.message,
            "digest": self.digest,
            "committed": True,
        }


class ChainError(SponsorGateError):
    """Base for Sui RPC failures."""

    status_code = 502
    error = "Blockchain request failed"


class ChainQueryError(ChainError):
    """Raised when a history or detail query against the fullnode fails."""

    pass


class ChainSubmissionError(ChainError):
    """Raised when building or executing an admin transaction fails."""

    pass


class VerificationInternalError(SponsorGateError):
    """Unexpected failure inside the verification workflow. Never leaves the verifier."""

    pass
