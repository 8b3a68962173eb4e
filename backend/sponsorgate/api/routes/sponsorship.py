"""Sponsored transaction API routes."""

from typing import Any, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from sponsorgate.api.dependencies import get_coordinator
from sponsorgate.services.sponsorship import SponsorshipCoordinator

router = APIRouter(prefix="/api", tags=["sponsorship"])


class CreateSponsorshipRequest(BaseModel):
    """Request body for creating a sponsored transaction."""

    model_config = ConfigDict(populate_by_name=True)

    transaction_kind_bytes: str = Field(
        "", alias="transactionKindBytes", description="Base64 transaction kind bytes"
    )
    sender_address: str = Field("", alias="senderAddress", description="User's Sui address")
    allowed_addresses: Optional[list[str]] = Field(
        None, alias="allowedAddresses", description="Addresses the transaction may touch"
    )
    allowed_move_call_targets: Optional[list[str]] = Field(
        None, alias="allowedMoveCallTargets", description="Move call targets the transaction may invoke"
    )


class CreateSponsorshipResponse(BaseModel):
    """Unsigned sponsored transaction for the user to sign."""

    success: bool = True
    digest: str = Field(..., description="Digest to pass back on execution")
    bytes: str = Field(..., description="Base64 transaction bytes to sign")


class ExecuteSponsorshipRequest(BaseModel):
    """Request body for executing a sponsored transaction."""

    digest: str = Field("", description="Digest returned by the create step")
    signature: str = Field("", description="User's signature over the transaction bytes")


class ExecuteSponsorshipResponse(BaseModel):
    """Committed transaction with its effects."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    digest: str = Field(..., description="Transaction digest")
    effects: Optional[dict[str, Any]] = Field(None, description="Transaction effects")
    object_changes: list[dict[str, Any]] = Field(
        default_factory=list, alias="objectChanges", description="Object changes"
    )


@router.post("/create-sponsored-transaction", response_model=CreateSponsorshipResponse)
async def create_sponsored_transaction(
    body: CreateSponsorshipRequest,
    coordinator: SponsorshipCoordinator = Depends(get_coordinator),
) -> CreateSponsorshipResponse:
    """
    Create a sponsored transaction (step 1).

    Returns the unsigned bytes and the digest the user must sign and send
    back to the execute endpoint.
    """
    ticket = await coordinator.create_sponsorship(
        transaction_kind_bytes=body.transaction_kind_bytes,
        sender_address=body.sender_address,
        allowed_addresses=body.allowed_addresses,
        allowed_move_call_targets=body.allowed_move_call_targets,
    )
    return CreateSponsorshipResponse(digest=ticket.digest, bytes=ticket.bytes)


@router.post(
    "/execute-sponsored-transaction",
    response_model=ExecuteSponsorshipResponse,
    response_model_by_alias=True,
)
async def execute_sponsored_transaction(
    body: ExecuteSponsorshipRequest,
    coordinator: SponsorshipCoordinator = Depends(get_coordinator),
) -> ExecuteSponsorshipResponse:
    """
    Execute a sponsored transaction with the user's signature (step 2).

    If the transaction commits but its effects cannot be read, the error
    body carries the committed digest.
    """
    result = await coordinator.execute_sponsorship(body.digest, body.signature)
    return ExecuteSponsorshipResponse(
        digest=result.digest,
        effects=result.effects,
        object_changes=result.object_changes,
    )
