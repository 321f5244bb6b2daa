"""
EIP-712 / ERC-3009 typed-data structures.

Plain dataclasses holding exactly what is hashed and signed: the domain that
pins a signature to one token on one network, and the
``TransferWithAuthorization`` struct.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, List


EIP712_DOMAIN_TYPES: List[Dict[str, str]] = [
    {"name": "name", "type": "string"},
    {"name": "version", "type": "string"},
    {"name": "chainId", "type": "uint256"},
    {"name": "verifyingContract", "type": "address"},
]

TRANSFER_WITH_AUTHORIZATION_TYPES: Dict[str, List[Dict[str, str]]] = {
    "TransferWithAuthorization": [
        {"name": "from", "type": "address"},
        {"name": "to", "type": "address"},
        {"name": "value", "type": "uint256"},
        {"name": "validAfter", "type": "uint256"},
        {"name": "validBefore", "type": "uint256"},
        {"name": "nonce", "type": "bytes32"},
    ],
}


@dataclass(frozen=True)
class EIP712Domain:
    """Signing domain: token display name, scheme version, network and token contract."""
    name: str
    version: str
    chainId: int
    verifyingContract: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "chainId": self.chainId,
            "verifyingContract": self.verifyingContract,
        }


@dataclass(frozen=True)
class TransferWithAuthorizationMessage:
    """
    The ``TransferWithAuthorization`` struct.

    ``from`` is a keyword in Python, so the holder is stored as ``authorizer``
    (and the recipient as ``recipient`` for symmetry); ``to_dict`` restores
    the on-chain names.
    """
    authorizer: str
    recipient: str
    value: int
    validAfter: int
    validBefore: int
    nonce: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from": self.authorizer,
            "to": self.recipient,
            "value": self.value,
            "validAfter": self.validAfter,
            "validBefore": self.validBefore,
            "nonce": self.nonce,
        }


def build_full_message(
    domain: Dict[str, Any],
    types: Dict[str, List[Dict[str, str]]],
    message: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Assemble the ``{types, primaryType, domain, message}`` layout consumed by
    ``eth_account`` and ``eth_signTypedData_v4`` from the ethers-style triple
    (domain, types without ``EIP712Domain``, message).

    The primary type is the single struct declared in ``types``.
    """
    struct_types = {name: fields for name, fields in types.items() if name != "EIP712Domain"}
    if len(struct_types) != 1:
        raise ValueError(f"Expected exactly one primary type, got {sorted(struct_types)}")
    primary_type = next(iter(struct_types))
    return {
        "types": {"EIP712Domain": EIP712_DOMAIN_TYPES, **struct_types},
        "primaryType": primary_type,
        "domain": domain,
        "message": message,
    }


@dataclass(frozen=True)
class ERC3009TypedData:
    """Domain plus message, ready for ``encode_typed_data(full_message=...)``."""
    domain: EIP712Domain
    message: TransferWithAuthorizationMessage
    types: Dict[str, List[Dict[str, str]]] = field(
        default_factory=lambda: dict(TRANSFER_WITH_AUTHORIZATION_TYPES)
    )

    def to_dict(self) -> Dict[str, Any]:
        return build_full_message(self.domain.to_dict(), self.types, self.message.to_dict())
