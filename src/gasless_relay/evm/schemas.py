"""
EVM Schema Models

Pydantic models for the signed ERC-3009 authorization.

    - EVMECDSASignature: v/r/s components of an EIP-712 signature, with
      helpers to split a raw 65-byte wallet signature and to pack it back.
    - ERC3009Authorization: the ``transferWithAuthorization`` payload the
      holder signs, together with the token and chain it is bound to.
"""

from pydantic import ConfigDict, Field

from ..schemas.bases import CanonicalModel
from .standards import TransferWithAuthorizationMessage


def _strip_hex_prefix(value: str) -> str:
    return value[2:] if value[:2] in ("0x", "0X") else value


class EVMECDSASignature(CanonicalModel):
    """
    EVM ECDSA signature (v, r, s).

    Attributes:
        v: ECDSA recovery ID (27 or 28).
        r: r component, 32 bytes as a 0x-prefixed 64-char hex string.
        s: s component, 32 bytes as a 0x-prefixed 64-char hex string.

    Example::

        sig = EVMECDSASignature.from_raw(wallet_signature_hex)
        sig.to_packed_hex() == wallet_signature_hex
    """

    model_config = ConfigDict(frozen=True)

    v: int = Field(..., ge=27, le=28, description="ECDSA recovery ID (27 or 28)")
    r: str = Field(..., description="Signature r component (32 bytes, 0x-prefixed hex)")
    s: str = Field(..., description="Signature s component (32 bytes, 0x-prefixed hex)")

    @classmethod
    def from_raw(cls, raw_signature: str) -> "EVMECDSASignature":
        """
        Split a packed ``r || s || v`` signature as returned by
        ``eth_signTypedData_v4``.

        Recovery IDs of 0/1 are normalised to 27/28.

        Raises:
            ValueError: If the signature is not 65 bytes of hex.
        """
        hex_str = _strip_hex_prefix(raw_signature)
        if len(hex_str) != 130:
            raise ValueError(f"Invalid signature length: expected 65 bytes, got {len(hex_str) // 2}")
        try:
            v = int(hex_str[128:130], 16)
            int(hex_str[:128], 16)
        except ValueError:
            raise ValueError("Invalid signature: not valid hexadecimal")
        if v < 27:
            v += 27
        return cls(v=v, r="0x" + hex_str[:64].lower(), s="0x" + hex_str[64:128].lower())

    def validate_format(self) -> bool:
        """
        Validate r/s are 64-character hex strings.

        Raises:
            ValueError: Descriptive message on the first failed check.
        """
        for name, val in [("r", self.r), ("s", self.s)]:
            hex_str = _strip_hex_prefix(val)
            if len(hex_str) != 64:
                raise ValueError(f"Invalid {name}: expected 64 hex chars, got {len(hex_str)}")
            try:
                int(hex_str, 16)
            except ValueError:
                raise ValueError(f"Invalid {name}: not valid hexadecimal")
        return True

    def to_packed_hex(self) -> str:
        """
        Encode v/r/s into a packed 65-byte hex string (``r || s || v``).

        Returns:
            0x-prefixed 132-character hex string.
        """
        self.validate_format()
        r = _strip_hex_prefix(self.r).zfill(64)
        s = _strip_hex_prefix(self.s).zfill(64)
        return "0x" + r + s + format(self.v, "02x")


class ERC3009Authorization(CanonicalModel):
    """
    ERC-3009 Authorization (TransferWithAuthorization).

    Immutable once built: the builder creates it, the wallet signs it and the
    relayer client serializes it, nobody changes it in between.

    Attributes:
        token: Token contract address the authorization applies to.
        chain_id: Numeric chain identifier where the authorization is valid.
        authorizer: Address authorizing the transfer (`from` in the EIP).
        recipient: Address receiving tokens (`to` in the EIP).
        value: Amount authorized for transfer (uint256 smallest units).
        validAfter: Start timestamp for validity.
        validBefore: Expiry timestamp for validity.
        nonce: Unique nonce (bytes32 hex string) preventing replay.
    """

    model_config = ConfigDict(frozen=True)

    token: str = Field(..., description="Token contract address")
    chain_id: int = Field(..., ge=1, description="Numeric chain id")
    authorizer: str = Field(..., description="Authorizer address (maps to `from` in EIP-3009)")
    recipient: str = Field(..., description="Recipient address (maps to `to` in EIP-3009)")
    value: int = Field(..., ge=0, description="Amount authorized in smallest token units")
    validAfter: int = Field(..., ge=0, description="Start timestamp for validity (unix)")
    validBefore: int = Field(..., ge=0, description="Expiry timestamp for validity (unix)")
    nonce: str = Field(..., pattern=r"^0x[0-9a-fA-F]{64}$", description="Unique nonce (bytes32 hex string)")

    def to_message(self) -> TransferWithAuthorizationMessage:
        return TransferWithAuthorizationMessage(
            authorizer=self.authorizer,
            recipient=self.recipient,
            value=self.value,
            validAfter=self.validAfter,
            validBefore=self.validBefore,
            nonce=self.nonce,
        )
