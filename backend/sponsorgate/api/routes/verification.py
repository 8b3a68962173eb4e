"""Interaction verification API routes."""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from sponsorgate.api.dependencies import get_verifier
from sponsorgate.errors import ValidationError
from sponsorgate.services.verification import InteractionVerifier

router = APIRouter(prefix="/api", tags=["verification"])


class VerifyRequest(BaseModel):
    """Request body for verifying a user's interaction with a dApp."""

    model_config = ConfigDict(populate_by_name=True)

    user_address: str = Field("", alias="userAddress", description="User's Sui address")
    dapp_id: str = Field("", alias="dappId", description="Registry id of the dApp")
    package_id: Optional[str] = Field(
        None, alias="packageId", description="dApp's Move package id"
    )


class VerifyResponse(BaseModel):
    """Outcome of verification. Always returned with status 200."""

    model_config = ConfigDict(populate_by_name=True)

    verified: bool
    tx_digest: Optional[str] = Field(None, alias="txDigest")
    message: Optional[str] = None


@router.post(
    "/verify-user",
    response_model=VerifyResponse,
    response_model_by_alias=True,
    response_model_exclude_none=True,
)
async def verify_user(
    body: VerifyRequest,
    verifier: InteractionVerifier = Depends(get_verifier),
) -> VerifyResponse:
    """
    Verify that a user interacted with a dApp's package.

    On a match the interaction is recorded in the on-chain registry. Any
    failure inside the workflow is reported as ``verified: false``.
    """
    if not body.user_address or not body.dapp_id:
        raise ValidationError("userAddress and dappId are required")

    result = await verifier.verify(body.user_address, body.dapp_id, body.package_id)
    return VerifyResponse(**result.to_dict())
