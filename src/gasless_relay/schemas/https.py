"""
HTTP Request/Response Schema Models for the relayer contract

Pydantic models for the single relayer call:

    POST <relayer-base>/relay-transfer
        {"payload": {...}, "v": 27, "r": "0x..", "s": "0x.."}
    2xx -> {"txHash": "0x.."}
    otherwise -> {"error": "human readable message"}

``value`` travels as a decimal-integer string so that uint256 amounts
survive JSON parsers that use doubles.
"""

from typing import Optional

from pydantic import Field, field_validator

from .bases import CanonicalModel
from ..evm.schemas import ERC3009Authorization, EVMECDSASignature
from ..evm.standards import TransferWithAuthorizationMessage


class RelayTransferPayload(CanonicalModel):
    """The authorization fields exactly as the relayer expects them."""
    authorizer: str = Field(..., alias="from", description="Authorizing holder address")
    recipient: str = Field(..., alias="to", description="Recipient address")
    value: str = Field(..., pattern=r"^\d+$", description="Amount in smallest units, decimal string")
    validAfter: int = Field(..., ge=0)
    validBefore: int = Field(..., ge=0)
    nonce: str = Field(..., pattern=r"^0x[0-9a-fA-F]{64}$", description="bytes32 hex nonce")

    @classmethod
    def from_authorization(cls, authorization: ERC3009Authorization) -> "RelayTransferPayload":
        return cls(
            authorizer=authorization.authorizer,
            recipient=authorization.recipient,
            value=str(authorization.value),
            validAfter=authorization.validAfter,
            validBefore=authorization.validBefore,
            nonce=authorization.nonce,
        )

    def to_message(self) -> TransferWithAuthorizationMessage:
        """Return the signed message (integer ``value``) for signature recovery."""
        return TransferWithAuthorizationMessage(
            authorizer=self.authorizer,
            recipient=self.recipient,
            value=int(self.value),
            validAfter=self.validAfter,
            validBefore=self.validBefore,
            nonce=self.nonce,
        )


class RelayTransferRequest(CanonicalModel):
    """Body of ``POST /relay-transfer``."""
    payload: RelayTransferPayload
    v: int = Field(..., ge=27, le=28, description="ECDSA recovery ID")
    r: str = Field(..., pattern=r"^0x[0-9a-fA-F]{64}$")
    s: str = Field(..., pattern=r"^0x[0-9a-fA-F]{64}$")

    @classmethod
    def from_signed(
        cls,
        authorization: ERC3009Authorization,
        signature: EVMECDSASignature,
    ) -> "RelayTransferRequest":
        return cls(
            payload=RelayTransferPayload.from_authorization(authorization),
            v=signature.v,
            r=signature.r,
            s=signature.s,
        )

    def to_json_body(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class RelaySuccessResponse(CanonicalModel):
    """Relayer answer on success."""
    tx_hash: str = Field(..., alias="txHash", description="Hex transaction reference")

    @field_validator("tx_hash")
    @classmethod
    def _check_hex(cls, value: str) -> str:
        if not value.startswith("0x") or len(value) < 3:
            raise ValueError("txHash must be a 0x-prefixed hex string")
        int(value[2:], 16)
        return value


class RelayErrorResponse(CanonicalModel):
    """Relayer answer on failure."""
    error: Optional[str] = None
