"""
Authorization Builder

Turns user intent (recipient, decimal amount) plus live chain and token
context into the EIP-712 signing domain and the ERC-3009 authorization the
holder signs. The only side effects are the token metadata reads.
"""

from typing import Dict, List, Optional, Tuple

from eth_utils import is_address, to_checksum_address

from ..evm.constants import amount_to_value, generate_nonce
from ..evm.schemas import ERC3009Authorization
from ..evm.standards import EIP712Domain, TRANSFER_WITH_AUTHORIZATION_TYPES
from ..evm.token import TokenReader
from .exceptions import (
    InvalidAmountError,
    InvalidRecipientError,
    MetadataUnavailableError,
)
from .timers import Clock, SystemClock

#: Lifetime of an authorization, ``validBefore - validAfter``.
DEFAULT_VALIDITY_SECONDS: int = 3600

#: Signing-scheme revision bound into the domain.
DEFAULT_DOMAIN_VERSION: str = "1"


class AuthorizationBuilder:
    """
    Builds ``(EIP712Domain, ERC3009Authorization)`` pairs.

    Every call to ``build`` mints a new 32-byte nonce and a new validity
    window starting at the clock's current time; nothing is reused between
    calls.

    Args:
        token: Token contract reader (name, decimals).
        token_address: Token contract address, used as ``verifyingContract``.
        domain_version: EIP-712 domain ``version``.
        validity_seconds: Length of the validity window.
        clock: Time source for ``validAfter``.

    Example:
        builder = AuthorizationBuilder(reader, "0xToken")
        domain, authorization = await builder.build(
            authorizer="0xHolder", recipient="0xFriend", amount="1.5", chain_id=114,
        )
    """

    def __init__(
        self,
        token: TokenReader,
        token_address: str,
        *,
        domain_version: str = DEFAULT_DOMAIN_VERSION,
        validity_seconds: int = DEFAULT_VALIDITY_SECONDS,
        clock: Optional[Clock] = None,
    ):
        if validity_seconds <= 0:
            raise ValueError("validity_seconds must be positive")
        self._token = token
        self.token_address = to_checksum_address(token_address)
        self.domain_version = domain_version
        self.validity_seconds = validity_seconds
        self._clock = clock or SystemClock()

    @staticmethod
    def type_schema() -> Dict[str, List[Dict[str, str]]]:
        """The ``TransferWithAuthorization`` struct definition."""
        return {name: list(fields) for name, fields in TRANSFER_WITH_AUTHORIZATION_TYPES.items()}

    async def _read_decimals(self) -> int:
        try:
            decimals = int(await self._token.decimals())
        except Exception as e:
            raise MetadataUnavailableError(f"Could not read token decimals: {e}") from e
        if decimals < 0:
            raise MetadataUnavailableError(f"Token reported invalid decimals: {decimals}")
        return decimals

    async def _read_name(self) -> str:
        try:
            return str(await self._token.name())
        except Exception as e:
            raise MetadataUnavailableError(f"Could not read token name: {e}") from e

    @staticmethod
    def _checked_recipient(recipient: str) -> str:
        recipient = (recipient or "").strip()
        if not recipient:
            raise InvalidRecipientError("Recipient address is required")
        if not is_address(recipient):
            raise InvalidRecipientError(f"Invalid recipient address: {recipient}")
        return to_checksum_address(recipient)

    async def validate_intent(self, recipient: str, amount: str) -> int:
        """
        Check recipient and amount without touching the wallet.

        Returns:
            The amount in the token's smallest unit.

        Raises:
            InvalidRecipientError, InvalidAmountError, MetadataUnavailableError
        """
        self._checked_recipient(recipient)
        if amount is None or not str(amount).strip():
            raise InvalidAmountError("Amount is required")
        decimals = await self._read_decimals()
        return amount_to_value(amount=amount, decimals=decimals)

    async def build(
        self,
        *,
        authorizer: str,
        recipient: str,
        amount: str,
        chain_id: int,
    ) -> Tuple[EIP712Domain, ERC3009Authorization]:
        """
        Produce the signing domain and the authorization payload.

        Args:
            authorizer: Resolved signer address (``from``).
            recipient: Caller-entered recipient (``to``).
            amount: Caller-entered decimal amount string.
            chain_id: Network id read from the wallet for this signature.

        Raises:
            InvalidRecipientError: Empty or malformed recipient.
            InvalidAmountError: Amount not representable at the token's precision.
            MetadataUnavailableError: Token name or decimals unreadable.
        """
        checked_recipient = self._checked_recipient(recipient)
        decimals = await self._read_decimals()
        value = amount_to_value(amount=amount, decimals=decimals)
        name = await self._read_name()

        valid_after = int(self._clock.now())
        domain = EIP712Domain(
            name=name,
            version=self.domain_version,
            chainId=int(chain_id),
            verifyingContract=self.token_address,
        )
        authorization = ERC3009Authorization(
            token=self.token_address,
            chain_id=int(chain_id),
            authorizer=to_checksum_address(authorizer),
            recipient=checked_recipient,
            value=value,
            validAfter=valid_after,
            validBefore=valid_after + self.validity_seconds,
            nonce=generate_nonce(),
        )
        return domain, authorization
