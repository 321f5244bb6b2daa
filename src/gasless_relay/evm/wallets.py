"""
Wallet collaborators

The wallet holds the key and performs the structured signature; the client
only asks it for account access, the active signer, the active network and a
signature. Two implementations are provided:

LocalAccountWallet
    Signs in-process with an ``eth_account`` key. Useful for scripts, bots and
    tests; the "network" is whatever chain id the caller selected.

RpcWallet
    Forwards to an EIP-1193 style JSON-RPC wallet (``eth_requestAccounts``,
    ``eth_chainId``, ``eth_signTypedData_v4``) through an ``AsyncWeb3``
    provider, e.g. a node-managed account or a desktop wallet bridge.
"""

import json
import logging
from typing import Any, Dict, List, Protocol

from eth_account import Account
from eth_utils import to_hex
from web3 import AsyncWeb3

from ..engine.exceptions import AccessDeniedError, SignatureDeniedError
from .standards import build_full_message

logger = logging.getLogger(__name__)


class WalletProvider(Protocol):
    """Capability interface of the key-holding agent."""

    async def request_accounts(self) -> List[str]:
        """Ask for account access; raises ``AccessDeniedError`` on refusal."""
        ...

    async def active_signer(self) -> str:
        ...

    async def active_network(self) -> int:
        ...

    async def sign_structured(
        self,
        domain: Dict[str, Any],
        types: Dict[str, List[Dict[str, str]]],
        message: Dict[str, Any],
    ) -> str:
        """Return the packed 65-byte signature; raises ``SignatureDeniedError`` on refusal."""
        ...


class LocalAccountWallet:
    """
    In-process wallet backed by a private key.

    Args:
        private_key: Hex-encoded secp256k1 private key (with or without ``0x``).
        chain_id: Network reported by ``active_network()``.

    Example:
        wallet = LocalAccountWallet("0xYOUR_PRIVATE_KEY", chain_id=114)
        await wallet.request_accounts()
    """

    def __init__(self, private_key: str, chain_id: int):
        self._private_key = private_key
        self.account = Account.from_key(private_key)
        self.address = AsyncWeb3.to_checksum_address(self.account.address)
        self.chain_id = int(chain_id)

    def switch_network(self, chain_id: int) -> None:
        """Select another network, as a user would in their wallet."""
        self.chain_id = int(chain_id)

    async def request_accounts(self) -> List[str]:
        return [self.address]

    async def active_signer(self) -> str:
        return self.address

    async def active_network(self) -> int:
        return self.chain_id

    async def sign_structured(
        self,
        domain: Dict[str, Any],
        types: Dict[str, List[Dict[str, str]]],
        message: Dict[str, Any],
    ) -> str:
        signer = message.get("from")
        if signer is not None and str(signer).lower() != self.address.lower():
            raise SignatureDeniedError(f"Wallet account {self.address} cannot sign for {signer}")

        full_message = build_full_message(domain, types, message)
        signed = Account.sign_typed_data(self._private_key, full_message=full_message)
        return to_hex(signed.signature)


class RpcWallet:
    """
    Wallet reached over JSON-RPC.

    Errors returned by the wallet (for example code 4001, "User rejected the
    request") are mapped to ``AccessDeniedError`` or ``SignatureDeniedError``
    carrying the wallet's message.
    """

    def __init__(self, w3: AsyncWeb3):
        self._w3 = w3

    @classmethod
    def from_rpc_url(cls, rpc_url: str, request_timeout: int = 120) -> "RpcWallet":
        return cls(AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(
            rpc_url,
            request_kwargs={"timeout": request_timeout}
        )))

    async def _request(self, method: str, params: List[Any]) -> Any:
        response = await self._w3.provider.make_request(method, params)
        error = response.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise RuntimeError(message or f"{method} failed")
        return response.get("result")

    async def request_accounts(self) -> List[str]:
        try:
            accounts = await self._request("eth_requestAccounts", [])
        except Exception as e:
            raise AccessDeniedError(str(e)) from e
        if not accounts:
            raise AccessDeniedError("Wallet returned no accounts")
        return [AsyncWeb3.to_checksum_address(a) for a in accounts]

    async def active_signer(self) -> str:
        accounts = await self._w3.eth.accounts
        if not accounts:
            raise AccessDeniedError("Wallet has no active account")
        return AsyncWeb3.to_checksum_address(accounts[0])

    async def active_network(self) -> int:
        return int(await self._w3.eth.chain_id)

    async def sign_structured(
        self,
        domain: Dict[str, Any],
        types: Dict[str, List[Dict[str, str]]],
        message: Dict[str, Any],
    ) -> str:
        full_message = build_full_message(domain, types, message)
        try:
            signature = await self._request(
                "eth_signTypedData_v4",
                [message["from"], json.dumps(full_message)],
            )
        except Exception as e:
            logger.info("Wallet declined eth_signTypedData_v4: %s", e)
            raise SignatureDeniedError(str(e)) from e
        return signature if isinstance(signature, str) else to_hex(signature)
